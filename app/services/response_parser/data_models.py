"""
Data Models for Structured Response Parsing

Defines the dataclasses produced by the response parser:
- KPI cards with optional trend
- Insights (alerts and residual bullet points)
- Menu engineering classes
- Numbered recommendations
- Chart points and markdown tables
- Ordered sections (the render order contract)
- ParsedResponse, the aggregate result
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union


# ═══════════════════════════════════════════════════════════════════════════════
# Enums
# ═══════════════════════════════════════════════════════════════════════════════

class TrendDirection(str, Enum):
    UP = "up"
    DOWN = "down"
    NEUTRAL = "neutral"


class InsightType(str, Enum):
    INFO = "info"
    WARNING = "warning"
    SUCCESS = "success"
    HIGHLIGHT = "highlight"


class MenuCategory(str, Enum):
    """Four-quadrant menu engineering class (volume x margin)."""
    STAR = "STAR"
    PLOWHORSE = "PLOWHORSE"
    PUZZLE = "PUZZLE"
    DOG = "DOG"


class SectionType(str, Enum):
    HEADLINE = "headline"
    KPIS = "kpis"
    CHART = "chart"
    INSIGHTS = "insights"
    MENU = "menu"
    RECOMMENDATIONS = "recommendations"
    TABLE = "table"
    TEXT = "text"


def _serialize(value: Any) -> Any:
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, list):
        return [_serialize(v) for v in value]
    if isinstance(value, Enum):
        return value.value
    return value


# ═══════════════════════════════════════════════════════════════════════════════
# Extracted Entities
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass
class Trend:
    direction: TrendDirection
    value: float                        # Magnitude, always non-negative
    label: Optional[str] = None         # e.g. "vs last period"

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"direction": self.direction.value, "value": self.value}
        if self.label is not None:
            d["label"] = self.label
        return d


@dataclass
class KPICard:
    """
    A single named business metric.

    `label` is canonical (see normalize_kpi_label) and unique within one
    ParsedResponse. `value` keeps the raw string when it cannot be parsed.
    """
    label: str
    value: Union[int, float, str]
    unit: Optional[str] = None          # EGP, %, units
    trend: Optional[Trend] = None

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"label": self.label, "value": self.value}
        if self.unit is not None:
            d["unit"] = self.unit
        if self.trend is not None:
            d["trend"] = self.trend.to_dict()
        return d


@dataclass
class InsightItem:
    text: str
    icon: Optional[str] = None          # Emoji glyph
    type: Optional[InsightType] = None

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"text": self.text}
        if self.icon is not None:
            d["icon"] = self.icon
        if self.type is not None:
            d["type"] = self.type.value
        return d


@dataclass
class MenuEngClass:
    category: MenuCategory
    items: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"category": self.category.value, "items": list(self.items)}


@dataclass
class RecommendationItem:
    index: int                          # Source numbering, never renumbered
    text: str                           # First line of the item only
    impact: Optional[str] = None        # e.g. "+EGP 220/day"

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"index": self.index, "text": self.text}
        if self.impact is not None:
            d["impact"] = self.impact
        return d


@dataclass
class ChartDataPoint:
    name: str                           # Display name, truncated past 20 chars
    value: Union[int, float]
    label: Optional[str] = None         # Unit

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"name": self.name, "value": self.value}
        if self.label is not None:
            d["label"] = self.label
        return d


@dataclass
class TableData:
    headers: List[str] = field(default_factory=list)
    rows: List[List[str]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"headers": list(self.headers), "rows": [list(r) for r in self.rows]}


@dataclass
class ResponseSection:
    """One rendered block. `order` is the render order; iterate sections, not fields."""
    type: SectionType
    content: Any
    order: int
    title: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "type": self.type.value,
            "content": _serialize(self.content),
            "order": self.order,
        }
        if self.title is not None:
            d["title"] = self.title
        return d


# ═══════════════════════════════════════════════════════════════════════════════
# Aggregate Result
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass
class ParsedResponse:
    headline: Optional[str] = None
    kpi_cards: Optional[List[KPICard]] = None
    insights: Optional[List[InsightItem]] = None
    menu_engineering: Optional[List[MenuEngClass]] = None
    recommendations: Optional[List[RecommendationItem]] = None
    chart_data: Optional[List[ChartDataPoint]] = None
    table_data: Optional[TableData] = None
    sections: List[ResponseSection] = field(default_factory=list)
    raw_text: Optional[str] = None

    _WIRE_NAMES = (
        ("headline", "headline"),
        ("kpi_cards", "kpiCards"),
        ("insights", "insights"),
        ("menu_engineering", "menuEngineering"),
        ("recommendations", "recommendations"),
        ("chart_data", "chartData"),
        ("table_data", "tableData"),
    )

    def to_dict(self) -> Dict[str, Any]:
        """Camel-cased wire shape; absent fields are omitted."""
        d: Dict[str, Any] = {}
        for attr, wire in self._WIRE_NAMES:
            value = getattr(self, attr)
            if value is not None:
                d[wire] = _serialize(value)
        d["sections"] = [s.to_dict() for s in self.sections]
        if self.raw_text is not None:
            d["rawText"] = self.raw_text
        return d
