"""
Recommendation extraction.

Finds the first recommendation header ("Here's what I'd do", "Recommendations",
"Actions", "What I'd recommend", "Next steps") and reads the numbered items
after it. Each item keeps its source number. Continuation lines run until
the next number or a blank line; only the first line becomes `text`, while
the whole item is searched for an impact clause.

Once items are found, the header and every open line after it are claimed:
later stages only see what preceded the recommendations block.
"""

import re
from typing import List, Optional, Tuple

from app.services.response_parser.context import ParseContext
from app.services.response_parser.data_models import RecommendationItem, SectionType
from app.services.response_parser.extractors.base import ExtractionResult, ResponseExtractor
from app.services.response_parser.text_utils import strip_bold, strip_leading_icon

HEADER_WORDS = (
    r"(?:here['’]s what i['’]?d do|recommendations?|actions?|what i['’]?d recommend|next steps?)"
)
HEADER_RES = (
    # The whole line is the header
    re.compile(rf'^{HEADER_WORDS}\s*(?:\([^)\n]*\))?\s*:?$', re.IGNORECASE),
    # Header phrase opens the line and the line ends with a colon
    re.compile(rf'^{HEADER_WORDS}\b[^:\n]{{0,60}}:$', re.IGNORECASE),
    # "... recommendations:" at the end of a line
    re.compile(rf'\b{HEADER_WORDS}\s*:$', re.IGNORECASE),
)
HEADING_MARK_RE = re.compile(r'^#{1,6}\s*')

NUMBERED_RE = re.compile(r'^\s*(\d+)\.\s+(.+?)\s*$')

NUMBER = r'\d[\d,]*(?:\.\d+)?'
IMPACT_RE = re.compile(
    r'(?:(?:projected|expected|estimated|potential)\s+)?(?:impact|uplift|revenue|gain)\b'
    r'\s*(?:of|:|=|→)?\s*[~≈]?\s*'
    rf'([+-]?\s*(?:EGP\s*)?{NUMBER}(?:\s*(?:EGP|%))?(?:\s*/\s*[A-Za-z]+)?)',
    re.IGNORECASE,
)
SIGNED_AMOUNT_RE = re.compile(
    rf'(\+\s*(?:EGP\s*{NUMBER}|{NUMBER}\s*(?:EGP|%))(?:\s*/\s*[A-Za-z]+)?)',
    re.IGNORECASE,
)


def is_recommendation_header(line: str) -> bool:
    text = strip_leading_icon(HEADING_MARK_RE.sub("", strip_bold(line).strip())).strip()
    if not text:
        return False
    return any(pattern.search(text) for pattern in HEADER_RES)


def find_impact(text: str) -> Optional[str]:
    match = IMPACT_RE.search(text) or SIGNED_AMOUNT_RE.search(text)
    if not match:
        return None
    return match.group(1).strip()


class RecommendationExtractor(ResponseExtractor):
    section_type = SectionType.RECOMMENDATIONS
    section_title = "Recommendations"

    @property
    def name(self) -> str:
        return "recommendations"

    def extract(self, ctx: ParseContext) -> ExtractionResult:
        header_index = None
        for index, line in ctx.open_lines():
            if is_recommendation_header(line):
                header_index = index
                break
        if header_index is None:
            return ExtractionResult()

        after = ctx.open_lines_after(header_index)
        items = [self._build_item(number, body) for number, body in self._numbered_items(after)]
        if not items:
            return ExtractionResult()

        claimed = [header_index] + [index for index, _ in after]
        return ExtractionResult(content=items, claimed=claimed)

    @staticmethod
    def _numbered_items(lines: List[Tuple[int, str]]) -> List[Tuple[int, List[str]]]:
        items: List[Tuple[int, List[str]]] = []
        current: Optional[Tuple[int, List[str]]] = None

        for _, line in lines:
            match = NUMBERED_RE.match(line)
            if match:
                current = (int(match.group(1)), [match.group(2)])
                items.append(current)
            elif not line.strip():
                current = None
            elif current is not None:
                current[1].append(line.strip())
        return items

    @staticmethod
    def _build_item(number: int, body: List[str]) -> RecommendationItem:
        return RecommendationItem(
            index=number,
            text=body[0].strip(),
            impact=find_impact(" ".join(body)),
        )
