import re
from typing import Dict, List

from app.services.response_parser.context import ParseContext
from app.services.response_parser.data_models import MenuCategory, MenuEngClass, SectionType
from app.services.response_parser.extractors.base import ExtractionResult, ResponseExtractor

# "• ⭐ STAR: Cappuccino, Latte", "DOG (low margin): Decaf and Iced Tea"
MENU_CLASS_RE = re.compile(
    r'^\s*[-•*]?\s*(?:(?:⭐|🐴|🧩|🐕)️?)?\s*(STAR|PLOWHORSE|PUZZLE|DOG)'
    r'(?:\s*\([^)\n]*\))?\s*:\s*(\S.*)$',
    re.IGNORECASE,
)
ITEM_SPLIT_RE = re.compile(r',|\s+and\s+', re.IGNORECASE)


def split_items(items: str) -> List[str]:
    return [item.strip() for item in ITEM_SPLIT_RE.split(items) if item.strip()]


class MenuEngineeringExtractor(ResponseExtractor):
    """One entry per category; repeated category lines append their items."""

    section_type = SectionType.MENU
    section_title = "Menu Engineering"

    @property
    def name(self) -> str:
        return "menu"

    def extract(self, ctx: ParseContext) -> ExtractionResult:
        by_category: Dict[MenuCategory, MenuEngClass] = {}
        claimed: List[int] = []

        for index, line in ctx.open_lines():
            match = MENU_CLASS_RE.match(line)
            if not match:
                continue
            category = MenuCategory(match.group(1).upper())
            entry = by_category.setdefault(category, MenuEngClass(category=category))
            entry.items.extend(split_items(match.group(2)))
            claimed.append(index)

        return ExtractionResult(content=list(by_category.values()), claimed=claimed)
