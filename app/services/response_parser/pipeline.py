"""
Response parsing pipeline.

Runs the extractors in EXTRACTION_ORDER over one ParseContext. Every stage
only sees lines earlier stages left unclaimed. A section is appended for each
stage that found something, numbered by a running counter, so `sections` is
the render order. Whatever text is left at the end becomes a `text` section
when it is long enough to be worth showing.
"""

import re
from typing import Any, Dict, List, Optional, Sequence, Tuple

from app.core.logger import Logger
from app.services.response_parser.context import ParseContext
from app.services.response_parser.data_models import ParsedResponse, ResponseSection, SectionType
from app.services.response_parser.extractors import (
    AlertExtractor,
    ChartExtractor,
    HeadlineExtractor,
    InsightExtractor,
    KPIExtractor,
    MenuEngineeringExtractor,
    RecommendationExtractor,
    ResponseExtractor,
    TableExtractor,
)

logger = Logger("ResponseParser")

EXTRACTION_ORDER: Tuple[str, ...] = (
    "headline",
    "kpis",
    "alerts",
    "chart",
    "menu",
    "recommendations",
    "insights",
    "table",
)

_EXTRACTORS = {
    "headline": HeadlineExtractor,
    "kpis": KPIExtractor,
    "alerts": AlertExtractor,
    "chart": ChartExtractor,
    "menu": MenuEngineeringExtractor,
    "recommendations": RecommendationExtractor,
    "insights": InsightExtractor,
    "table": TableExtractor,
}

SECTION_FIELDS: Dict[SectionType, str] = {
    SectionType.HEADLINE: "headline",
    SectionType.KPIS: "kpi_cards",
    SectionType.CHART: "chart_data",
    SectionType.MENU: "menu_engineering",
    SectionType.RECOMMENDATIONS: "recommendations",
    SectionType.INSIGHTS: "insights",
    SectionType.TABLE: "table_data",
}

MIN_RESIDUAL_TEXT_LENGTH = 50
EMPTY_SECTION_HEADER_RE = re.compile(r'^[A-Z][A-Z ]+:[ \t]*$', re.MULTILINE)
EXCESS_BLANK_LINES_RE = re.compile(r'\n{3,}')


def build_default_extractors() -> List[ResponseExtractor]:
    return [_EXTRACTORS[name]() for name in EXTRACTION_ORDER]


def clean_residual_text(text: str) -> str:
    text = EMPTY_SECTION_HEADER_RE.sub("", text)
    text = "\n".join(line.rstrip(" \t") for line in text.split("\n"))
    return EXCESS_BLANK_LINES_RE.sub("\n\n", text).strip()


class ExtractorChain:
    """Runs extractors in order over a shared ParseContext."""

    def __init__(self, extractors: Optional[Sequence[ResponseExtractor]] = None):
        self._extractors: List[ResponseExtractor] = list(
            extractors if extractors is not None else build_default_extractors()
        )

    @property
    def stage_names(self) -> List[str]:
        return [e.name for e in self._extractors]

    def run(self, text: str) -> ParsedResponse:
        ctx = ParseContext(text)
        result = ParsedResponse()
        # Items handed forward by stages without their own section, keyed by target
        pending: Dict[SectionType, Tuple[List[Any], Optional[str]]] = {}
        order = 0

        for extractor in self._extractors:
            snapshot = ctx.snapshot()
            try:
                outcome = extractor.run(ctx)
            except Exception as e:
                logger.error(f"Extractor {extractor.name} error: {e}", e)
                ctx.restore(snapshot)
                continue

            if extractor.feeds_section is not None:
                if outcome.found:
                    items, _ = pending.get(extractor.feeds_section, ([], None))
                    pending[extractor.feeds_section] = (items + list(outcome.content), extractor.merged_title)
                continue

            section_type = extractor.section_type
            content = outcome.content
            title = extractor.section_title
            if section_type in pending:
                fed, merged_title = pending.pop(section_type)
                content = fed + list(content or [])
                title = merged_title or title

            if not content:
                continue

            order = self._add_section(result, section_type, content, title, order)
            logger.debug(f"Stage {extractor.name}: {self._describe(content)}")

        # Fed items whose target stage failed or is not in this chain
        for section_type, (items, merged_title) in pending.items():
            order = self._add_section(result, section_type, items, merged_title, order)
            logger.debug(f"Flushed {len(items)} pending item(s) into {section_type.value}")

        residual = clean_residual_text(ctx.remaining_text)
        if len(residual) > MIN_RESIDUAL_TEXT_LENGTH:
            result.raw_text = residual
            result.sections.append(ResponseSection(type=SectionType.TEXT, content=residual, order=order))

        return result

    @staticmethod
    def _add_section(
        result: ParsedResponse, section_type: SectionType, content: Any, title: Optional[str], order: int
    ) -> int:
        setattr(result, SECTION_FIELDS[section_type], content)
        result.sections.append(ResponseSection(
            type=section_type, content=content, order=order, title=title,
        ))
        return order + 1

    @staticmethod
    def _describe(content: Any) -> str:
        if isinstance(content, list):
            return f"{len(content)} item(s)"
        if isinstance(content, str):
            return content[:50]
        return type(content).__name__


default_chain = ExtractorChain()


def parse_response(content: Any) -> ParsedResponse:
    """
    Parse one assistant reply into structured, renderable sections.

    Never raises. Empty or non-string input yields a result with only
    `raw_text` set ("" for non-strings) and no sections.
    """
    if not content or not isinstance(content, str):
        return ParsedResponse(raw_text=content if isinstance(content, str) else "")

    try:
        result = default_chain.run(content)
    except Exception as e:
        logger.error(f"Response parsing failed: {e}", e)
        return ParsedResponse(raw_text=content)

    if logger.is_debug():
        logger.debug(
            f"Parse complete: headline={'yes' if result.headline else 'no'} "
            f"kpis={len(result.kpi_cards or [])} "
            f"insights={len(result.insights or [])} "
            f"chart={len(result.chart_data or [])} "
            f"visual={has_visual_content(result)}"
        )
    return result


def has_visual_content(parsed: Optional[ParsedResponse]) -> bool:
    """True when any structured field is present and non-empty."""
    if parsed is None:
        return False
    return bool(
        parsed.headline
        or parsed.kpi_cards
        or parsed.chart_data
        or parsed.menu_engineering
        or parsed.recommendations
        or parsed.insights
        or parsed.table_data
    )
