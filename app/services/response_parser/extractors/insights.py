import re
from typing import List, Optional, Tuple

from app.services.response_parser.context import ParseContext
from app.services.response_parser.data_models import InsightItem, InsightType, SectionType
from app.services.response_parser.extractors.base import ExtractionResult, ResponseExtractor

INSIGHT_BULLET_RE = re.compile(r'^\s*[-•*]\s+(\S.*)$')

# Leftovers of other stages: "Label: 123" and "x vs 12.5 avg"
KPI_SHAPED_RE = re.compile(r'^[^:]+:\s*[\d,]+')
ALERT_SHAPED_RE = re.compile(r'vs\s*[\d.]+\s*avg', re.IGNORECASE)

MIN_INSIGHT_LENGTH = 10

WARNING_ICON = "⚠️"
SUCCESS_ICONS = ("✅", "🎯")
HIGHLIGHT_ICON = "🔥"


def classify(text: str) -> Tuple[str, Optional[str], InsightType]:
    """Return (text without its icon, icon, type) from a leading emoji or keyword."""
    if text.startswith(HIGHLIGHT_ICON):
        return text[len(HIGHLIGHT_ICON):].strip(), HIGHLIGHT_ICON, InsightType.HIGHLIGHT

    lowered = text.lower()
    if text.startswith("⚠"):
        stripped = text[len(WARNING_ICON):] if text.startswith(WARNING_ICON) else text[1:]
        return stripped.strip(), WARNING_ICON, InsightType.WARNING
    if "warning" in lowered or "alert" in lowered:
        return text, WARNING_ICON, InsightType.WARNING

    for icon in SUCCESS_ICONS:
        if text.startswith(icon):
            return text[len(icon):].strip(), icon, InsightType.SUCCESS

    return text, None, InsightType.INFO


class InsightExtractor(ResponseExtractor):
    """Residual bullet points that no earlier stage claimed."""

    section_type = SectionType.INSIGHTS
    section_title = "What the data says"

    @property
    def name(self) -> str:
        return "insights"

    def extract(self, ctx: ParseContext) -> ExtractionResult:
        insights: List[InsightItem] = []
        claimed: List[int] = []

        for index, line in ctx.open_lines():
            match = INSIGHT_BULLET_RE.match(line)
            if not match:
                continue
            body = match.group(1).rstrip()
            if KPI_SHAPED_RE.match(body) or ALERT_SHAPED_RE.search(body):
                continue

            text, icon, insight_type = classify(body)
            if len(text) < MIN_INSIGHT_LENGTH:
                continue
            insights.append(InsightItem(text=text, icon=icon, type=insight_type))
            claimed.append(index)

        return ExtractionResult(content=insights, claimed=claimed)
