"""
Chart data extraction.

Builds a list of named magnitudes (typically top items by revenue) from
whichever phrasing the reply used. Tiers run in order and a tier is skipped
once three distinct names have been collected:

    Tier 1  bulleted "<Name>: ... <n> EGP ... <n> EGP", largest value >= 100 wins
    Tier 2  "<Name>: <n> EGP" anywhere
    Tier 3  ranked list "<i>. <Name> - <n> <unit>"
    Tier 4  loose "<Name>: <n> EGP|GMV" with bold markers and a wider blocklist

Points keep encounter order and are capped at MAX_POINTS. Fewer than
MIN_POINTS means no chart at all. Lines are not claimed; the chart is a view
over text later stages may still use.
"""

import re
from typing import Dict, Iterator, List, Optional, Tuple

from app.services.response_parser.context import ParseContext
from app.services.response_parser.data_models import ChartDataPoint, SectionType
from app.services.response_parser.extractors.base import ExtractionResult, ResponseExtractor
from app.services.response_parser.text_utils import (
    NUMBER_LITERAL,
    Number,
    bullet_body,
    strip_bold,
    strip_leading_icon,
    to_number,
    truncate_name,
)

MIN_POINTS = 3
MAX_POINTS = 8
# Values under this next to "EGP" are usually a stray percentage from an adjacent clause
MIN_MONEY_VALUE = 100

NAME_MIN, NAME_MAX = 2, 50
LOOSE_NAME_MIN, LOOSE_NAME_MAX = 3, 40

# Metric labels belong to the KPI stage
METRIC_NAME_RE = re.compile(
    r'^(?:GMV|Revenue|Orders?|AOV|Approval|Tips?|Units?|Customers?|Total|Sales|'
    r'Split|Share|Discount|Avg|Average)\b',
    re.IGNORECASE,
)
LOOSE_BLOCKLIST = frozenset({
    "total", "revenue", "gmv", "orders", "aov", "sales", "headline", "items", "units",
    # KPI and report wording that shows up as "<word>: <n> EGP"
    "tips", "approval", "customers", "average", "avg", "discount", "split", "share",
    "numbers", "metrics", "summary",
})

LIST_NUMBER_RE = re.compile(r'^\d+\.\s+')
EGP_VALUE_RE = re.compile(rf'({NUMBER_LITERAL})\s*EGP\b', re.IGNORECASE)
# Value patterns are matched at the text right after a colon
NAME_EGP_VALUE_RE = re.compile(rf'\s*({NUMBER_LITERAL})\s*EGP\b', re.IGNORECASE)
RANKED_RE = re.compile(
    rf'^\s*\d+\.\s+(.+?)\s*[-–:]\s*({NUMBER_LITERAL})\s*([A-Za-z%]+)?'
)
LOOSE_VALUE_RE = re.compile(rf'\s*(?:\*\*)?({NUMBER_LITERAL})\s*(EGP|GMV)\b', re.IGNORECASE)


def iter_colon_values(line: str, value_re: re.Pattern) -> Iterator[Tuple[str, re.Match]]:
    """
    Yield (text before the colon, value match) for each colon followed by a
    value. The text runs from the previous colon or the end of the previous
    value, whichever is later.
    """
    start = 0
    colon = line.find(":")
    while colon != -1:
        match = value_re.match(line, colon + 1) if colon > start else None
        if match:
            yield line[start:colon], match
            start = match.end()
        else:
            start = colon + 1
        colon = line.find(":", start)


def loose_name(segment: str) -> str:
    """Name run before the colon: trailing bold markers dropped, no '*' inside."""
    text = segment.rstrip()
    if text.endswith("**"):
        text = text[:-2]
    return text[text.rfind("*") + 1:]


def clean_name(raw: str) -> str:
    name = strip_bold(raw).strip()
    body = bullet_body(name)
    if body is not None:
        name = body
    name = LIST_NUMBER_RE.sub("", name)
    return strip_leading_icon(name).strip()


def pick_money_value(values: List[Number]) -> Optional[Number]:
    """Largest value >= MIN_MONEY_VALUE, else the largest value."""
    if not values:
        return None
    large = [v for v in values if v >= MIN_MONEY_VALUE]
    return max(large) if large else max(values)


class _PointCollector:
    """Case-insensitive, first-wins accumulation of chart points."""

    def __init__(self):
        self.points: List[ChartDataPoint] = []
        self._seen: Dict[str, int] = {}

    @property
    def count(self) -> int:
        return len(self.points)

    def add(self, name: str, value: Optional[Number], unit: Optional[str] = "EGP"):
        if value is None:
            return
        key = name.lower()
        if key in self._seen:
            return
        self._seen[key] = len(self.points)
        self.points.append(ChartDataPoint(name=truncate_name(name), value=value, label=unit))


def _valid_name(name: str) -> bool:
    return NAME_MIN <= len(name) <= NAME_MAX and not METRIC_NAME_RE.match(name)


def _valid_loose_name(name: str) -> bool:
    if not LOOSE_NAME_MIN <= len(name) <= LOOSE_NAME_MAX:
        return False
    words = set(re.findall(r'[a-z]+', name.lower()))
    return not (words & LOOSE_BLOCKLIST)


class ChartExtractor(ResponseExtractor):
    section_type = SectionType.CHART

    @property
    def name(self) -> str:
        return "chart"

    def extract(self, ctx: ParseContext) -> ExtractionResult:
        lines = [line for _, line in ctx.open_lines()]
        collector = _PointCollector()

        for tier in (self._bulleted_tier, self._name_egp_tier, self._ranked_tier, self._loose_tier):
            if collector.count >= MIN_POINTS:
                break
            tier(lines, collector)

        if collector.count < MIN_POINTS:
            return ExtractionResult()
        return ExtractionResult(content=collector.points[:MAX_POINTS])

    @staticmethod
    def _bulleted_tier(lines: List[str], collector: _PointCollector):
        for line in lines:
            body = bullet_body(line)
            if not body or ":" not in body:
                continue
            raw_name, rest = body.split(":", 1)
            name = clean_name(raw_name)
            if not _valid_name(name):
                continue
            values = [to_number(raw) for raw in EGP_VALUE_RE.findall(rest)]
            collector.add(name, pick_money_value([v for v in values if v is not None]))

    @staticmethod
    def _name_egp_tier(lines: List[str], collector: _PointCollector):
        for line in lines:
            if "egp" not in line.lower():
                continue
            for segment, match in iter_colon_values(line, NAME_EGP_VALUE_RE):
                name = clean_name(segment)
                if _valid_name(name):
                    collector.add(name, to_number(match.group(1)))

    @staticmethod
    def _ranked_tier(lines: List[str], collector: _PointCollector):
        for line in lines:
            match = RANKED_RE.match(strip_bold(line))
            if not match:
                continue
            name = clean_name(match.group(1))
            if _valid_name(name):
                collector.add(name, to_number(match.group(2)), match.group(3))

    @staticmethod
    def _loose_tier(lines: List[str], collector: _PointCollector):
        for line in lines:
            lowered = line.lower()
            if "egp" not in lowered and "gmv" not in lowered:
                continue
            for segment, match in iter_colon_values(line, LOOSE_VALUE_RE):
                name = clean_name(loose_name(segment))
                if _valid_loose_name(name):
                    collector.add(name, to_number(match.group(1)), "EGP")
