from app.services.response_parser.extractors.base import ExtractionResult, ResponseExtractor
from app.services.response_parser.extractors.headline import HeadlineExtractor
from app.services.response_parser.extractors.kpi import KPIExtractor
from app.services.response_parser.extractors.alerts import AlertExtractor
from app.services.response_parser.extractors.chart import ChartExtractor
from app.services.response_parser.extractors.menu import MenuEngineeringExtractor
from app.services.response_parser.extractors.recommendations import RecommendationExtractor
from app.services.response_parser.extractors.insights import InsightExtractor
from app.services.response_parser.extractors.table import TableExtractor

__all__ = [
    "ExtractionResult",
    "ResponseExtractor",
    "HeadlineExtractor",
    "KPIExtractor",
    "AlertExtractor",
    "ChartExtractor",
    "MenuEngineeringExtractor",
    "RecommendationExtractor",
    "InsightExtractor",
    "TableExtractor",
]
