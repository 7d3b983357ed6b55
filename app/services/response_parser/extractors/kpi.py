"""
KPI extraction.

Works line by line so a sentence-shaped pattern cannot span two lines.
Each line is tried against a priority-ordered list of shapes; the first
shape that matches decides the line:

1. "<amount> EGP GMV from <n> (successful )?orders"  -> Revenue + Orders
2. "<amount> EGP AOV"                               -> Avg Order
3. "<pct>% (payment )?approval (rate)?" / "Approval rate: <pct>%"
4. "<amount> EGP (in )?tips" / "Tips: <amount> EGP"
5. split-rate phrasing: recognized, never emitted, line left for insights
6. "• <Label>: <amount> <unit>? <arrow>? <delta>?" for a fixed label vocabulary

A matched line is claimed even when all its KPIs were duplicates.
"""

import re
from typing import Callable, List, Optional, Tuple

from app.core.logger import Logger
from app.services.response_parser.context import ParseContext
from app.services.response_parser.data_models import KPICard, SectionType, Trend, TrendDirection
from app.services.response_parser.extractors.base import ExtractionResult, ResponseExtractor
from app.services.response_parser.text_utils import (
    NUMBER_LITERAL,
    normalize_kpi_label,
    normalize_unit,
    parse_number,
    strip_bold,
)

logger = Logger("KPIExtractor")

NUM = rf'({NUMBER_LITERAL})'

GMV_ORDERS_RE = re.compile(
    rf'{NUM}\s*EGP\s+GMV\s+from\s+(\d[\d,]*)\s+(?:successful\s+)?orders?\b', re.IGNORECASE
)
AOV_RE = re.compile(rf'{NUM}\s*EGP\s+AOV\b', re.IGNORECASE)
APPROVAL_RES = (
    re.compile(rf'{NUM}\s*%\s*(?:payment\s+)?approval(?:\s+rate)?\b', re.IGNORECASE),
    re.compile(rf'\bapproval(?:\s+rate)?\s*:\s*{NUM}\s*%', re.IGNORECASE),
)
TIPS_RES = (
    re.compile(rf'{NUM}\s*EGP\s+(?:in\s+)?tips?\b', re.IGNORECASE),
    re.compile(rf'\btips?\s*:\s*{NUM}\s*EGP', re.IGNORECASE),
)
SPLIT_RES = (
    re.compile(rf'{NUM}\s*%\s*split(?:\s+rate)?\b', re.IGNORECASE),
    re.compile(rf'\bsplit(?:\s+rate)?\s*:\s*{NUM}\s*%', re.IGNORECASE),
)
BULLET_KPI_RE = re.compile(
    r'^\s*(?:•\s*|[-*]\s+)'
    r'(GMV|Revenue|Orders?|AOV|Units?|Customers?|Total\s+Sales|Tips?)\s*:\s*'
    rf'{NUM}\s*(EGP|%|units?)?\s*([↑↓])?\s*([+-]?\d+(?:\.\d+)?)?%?',
    re.IGNORECASE,
)
NUMBERS_HEADER_RE = re.compile(
    r'^\s*(?:THE NUMBERS|KEY METRICS|METRICS)\b[^:\n]*:\s*$', re.IGNORECASE
)

TREND_LABEL = "vs last period"

# None: no shape matched; []: recognized but nothing to emit
LineMatch = Optional[List[KPICard]]


def _first_match(patterns, line: str):
    for pattern in patterns:
        match = pattern.search(line)
        if match:
            return match
    return None


def _gmv_from_orders(line: str) -> LineMatch:
    match = GMV_ORDERS_RE.search(line)
    if not match:
        return None
    return [
        KPICard(label="Revenue", value=parse_number(match.group(1)), unit="EGP"),
        KPICard(label="Orders", value=parse_number(match.group(2))),
    ]


def _aov(line: str) -> LineMatch:
    match = AOV_RE.search(line)
    if not match:
        return None
    return [KPICard(label="Avg Order", value=parse_number(match.group(1)), unit="EGP")]


def _approval(line: str) -> LineMatch:
    match = _first_match(APPROVAL_RES, line)
    if not match:
        return None
    return [KPICard(label="Approval Rate", value=parse_number(match.group(1)), unit="%")]


def _tips(line: str) -> LineMatch:
    match = _first_match(TIPS_RES, line)
    if not match:
        return None
    return [KPICard(label="Tips", value=parse_number(match.group(1)), unit="EGP")]


def _split_rate(line: str) -> LineMatch:
    if _first_match(SPLIT_RES, line):
        return []
    return None


def _bulleted(line: str) -> LineMatch:
    match = BULLET_KPI_RE.match(line)
    if not match:
        return None
    label, raw_value, unit, arrow, delta = match.groups()

    trend = None
    if arrow and delta:
        trend = Trend(
            direction=TrendDirection.UP if arrow == "↑" else TrendDirection.DOWN,
            value=abs(float(delta)),
            label=TREND_LABEL,
        )
    return [KPICard(
        label=normalize_kpi_label(label),
        value=parse_number(raw_value),
        unit=normalize_unit(unit),
        trend=trend,
    )]


LINE_SHAPES: Tuple[Tuple[str, Callable[[str], LineMatch]], ...] = (
    ("gmv_from_orders", _gmv_from_orders),
    ("aov", _aov),
    ("approval", _approval),
    ("tips", _tips),
    ("split_rate", _split_rate),
    ("bulleted", _bulleted),
)


class KPIExtractor(ResponseExtractor):
    section_type = SectionType.KPIS

    @property
    def name(self) -> str:
        return "kpis"

    def extract(self, ctx: ParseContext) -> ExtractionResult:
        kpis: List[KPICard] = []
        seen = set()
        claimed: List[int] = []
        headers: List[int] = []

        for index, line in ctx.open_lines():
            if not line.strip():
                continue
            if NUMBERS_HEADER_RE.match(line):
                headers.append(index)
                continue

            text = strip_bold(line)
            for shape, matcher in LINE_SHAPES:
                cards = matcher(text)
                if cards is None:
                    continue
                if not cards:
                    logger.debug(f"Skipping {shape} line: {line.strip()[:60]}")
                    break
                claimed.append(index)
                for card in cards:
                    if card.label in seen:
                        continue
                    seen.add(card.label)
                    kpis.append(card)
                break

        if kpis:
            claimed.extend(headers)
        return ExtractionResult(content=kpis, claimed=sorted(claimed))
