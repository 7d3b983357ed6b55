"""
Response Parser - turns free-form assistant replies into renderable structure

Instead of showing a wall of text, a reply is broken into:
- Headline
- KPI cards (metrics with trends)
- Chart data (top items by value)
- Menu engineering classes
- Recommendations
- Insights and alerts
- Markdown tables
- Residual prose

Architecture:
    Raw Text → ParseContext (lines) → Extractor Chain → ParsedResponse (ordered sections)
"""

from app.services.response_parser.data_models import (
    ChartDataPoint,
    InsightItem,
    InsightType,
    KPICard,
    MenuCategory,
    MenuEngClass,
    ParsedResponse,
    RecommendationItem,
    ResponseSection,
    SectionType,
    TableData,
    Trend,
    TrendDirection,
)
from app.services.response_parser.text_utils import normalize_kpi_label, normalize_unit
from app.services.response_parser.pipeline import (
    EXTRACTION_ORDER,
    ExtractorChain,
    has_visual_content,
    parse_response,
)
from app.services.response_parser.presentation import get_menu_eng_color, get_menu_eng_icon
from app.services.response_parser.service import ResponseParserService, response_parser_service

__all__ = [
    # Data models
    "ChartDataPoint",
    "InsightItem",
    "InsightType",
    "KPICard",
    "MenuCategory",
    "MenuEngClass",
    "ParsedResponse",
    "RecommendationItem",
    "ResponseSection",
    "SectionType",
    "TableData",
    "Trend",
    "TrendDirection",
    # Parsing
    "EXTRACTION_ORDER",
    "ExtractorChain",
    "parse_response",
    "has_visual_content",
    "normalize_kpi_label",
    "normalize_unit",
    # Presentation
    "get_menu_eng_icon",
    "get_menu_eng_color",
    # Service
    "ResponseParserService",
    "response_parser_service",
]
