import re
from typing import List

from app.services.response_parser.context import ParseContext
from app.services.response_parser.data_models import InsightItem, InsightType, SectionType
from app.services.response_parser.extractors.base import ExtractionResult, ResponseExtractor
from app.services.response_parser.text_utils import BULLET_RE, bullet_body

# "ALERTS:", "⚠️ ALERTS (vs 4-week avg):"
ALERTS_HEADER_RE = re.compile(r'\bALERTS\b\s*(?:\([^)\n]*\))?\s*:\s*$', re.IGNORECASE)

# "• Cappuccino: 3 qty vs 19.1 avg ↓ 84.3% → check stock"
ALERT_ITEM_RE = re.compile(
    r'^\s*(?:•\s*|[-*]\s+)([^:]+):\s*(\d+)\s*(?:qty|units?)?\s*vs\s*([\d.]+)\s*avg\s*'
    r'([↑↓])\s*([\d.]+%?)\s*(?:→\s*(.+?))?\s*$',
    re.IGNORECASE,
)


def _alert_from_match(match) -> InsightItem:
    item, current, avg, arrow, change, action = match.groups()
    is_down = arrow == "↓"
    text = f"**{item.strip()}**: {current} vs {avg} avg ({arrow}{change})"
    if action:
        text += f" — {action.strip()}"
    return InsightItem(
        text=text,
        icon="⚠️" if is_down else "📈",
        type=InsightType.WARNING if is_down else InsightType.INFO,
    )


class AlertExtractor(ResponseExtractor):
    """
    Reads the first ALERTS block: the header line and the run of bulleted
    lines under it, after any blank lines. Lines that don't fit the
    "x vs avg" shape still become warnings. Alerts have no section of their
    own; the pipeline merges them into the insights section.
    """

    feeds_section = SectionType.INSIGHTS
    merged_title = "Alerts & Insights"

    @property
    def name(self) -> str:
        return "alerts"

    def extract(self, ctx: ParseContext) -> ExtractionResult:
        open_lines = ctx.open_lines()
        for pos, (header_index, line) in enumerate(open_lines):
            if ALERTS_HEADER_RE.search(line):
                break
        else:
            return ExtractionResult()

        # Blank lines may separate the header from its bullets
        start = pos + 1
        while start < len(open_lines) and not open_lines[start][1].strip():
            start += 1

        alerts: List[InsightItem] = []
        claimed: List[int] = []
        for index, line in open_lines[start:]:
            if not BULLET_RE.match(line):
                break
            match = ALERT_ITEM_RE.match(line)
            if match:
                alerts.append(_alert_from_match(match))
                claimed.append(index)
                continue
            body = bullet_body(line)
            if body:
                alerts.append(InsightItem(text=body, icon="⚠️", type=InsightType.WARNING))
                claimed.append(index)

        if alerts:
            claimed.append(header_index)
        return ExtractionResult(content=alerts, claimed=sorted(claimed))
