"""
Text helpers shared by the extractors: number parsing, label/unit
normalization, icon and markup stripping.
"""

import re
from typing import Optional, Union

Number = Union[int, float]

# "•" may hug the text; "-" and "*" need a space so "-5%" and "**bold**" are not bullets
BULLET_RE = re.compile(r'^\s*(?:•\s*|[-*]\s+)(.*)$')

# Emoji, dingbats, arrows and their joiners/variation selectors at the start of a string
LEADING_ICON_RE = re.compile(
    r'^(?:[\u2190-\u21FF\u2300-\u27BF\u2B00-\u2BFF\U0001F000-\U0001FAFF\uFE0F\u200D]+\s*)+'
)

# A literal never starts inside another number
NUMBER_LITERAL = r'(?<![\d,])\d[\d,]*(?:\.\d+)?'
_NUMERIC_RE = re.compile(r'[+-]?\d+(?:\.\d+)?')
_INT_RE = re.compile(r'[+-]?\d+')

DISPLAY_NAME_LIMIT = 20

_KPI_LABELS = {
    "revenue": "Revenue",
    "gmv": "Revenue",
    "total sales": "Revenue",
    "orders": "Orders",
    "order": "Orders",
    "aov": "Avg Order",
    "avg order": "Avg Order",
    "units": "Units Sold",
    "unit": "Units Sold",
    "customers": "Customers",
    "customer": "Customers",
    "share": "Share",
    "approval": "Approval Rate",
    "approval rate": "Approval Rate",
    "discount": "Discount",
    "split rate": "Split Rate",
    "split": "Split Rate",
    "tips": "Tips",
    "tip": "Tips",
    "total": "Total",
    "sales": "Sales",
    "avg": "Average",
    "average": "Average",
}


def parse_number(raw: str) -> Union[int, float, str]:
    """
    Parse a numeric literal, dropping thousands separators.

    Integers stay int, decimals become float. Anything else is returned
    unchanged so callers can keep the raw string.
    """
    cleaned = raw.replace(",", "").strip()
    if _INT_RE.fullmatch(cleaned):
        return int(cleaned)
    if _NUMERIC_RE.fullmatch(cleaned):
        return float(cleaned)
    return raw


def to_number(raw: str) -> Optional[Number]:
    """Like parse_number, but None instead of the raw string."""
    value = parse_number(raw)
    return None if isinstance(value, str) else value


def normalize_kpi_label(label: str) -> str:
    """Map metric synonyms to their canonical label; unknown labels pass through."""
    key = re.sub(r'\s+', ' ', label.lower().strip())
    return _KPI_LABELS.get(key, label.strip())


def normalize_unit(unit: Optional[str]) -> str:
    u = (unit or "").strip().lower()
    if u in ("egp", ""):
        return "EGP"
    if u in ("%", "percent"):
        return "%"
    if "unit" in u:
        return "units"
    return unit.strip()


def strip_bold(text: str) -> str:
    return text.replace("**", "")


def strip_leading_icon(text: str) -> str:
    return LEADING_ICON_RE.sub("", text)


def bullet_body(line: str) -> Optional[str]:
    """Text after the bullet marker, or None when the line is not a bullet."""
    match = BULLET_RE.match(line)
    return match.group(1).strip() if match else None


def truncate_name(name: str, limit: int = DISPLAY_NAME_LIMIT) -> str:
    if len(name) <= limit:
        return name
    return name[:limit] + "..."
