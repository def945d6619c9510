"""
Brazilian-format monetary values (``1.234,56``).

This is the only bridge between free text and computed balances, so the
grouping convention is fixed: dot-grouped thousands, comma plus two decimals.
"""

import math
import re
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import List, Optional

MONETARY_PATTERN = re.compile(r"\d{1,3}(?:\.\d{3})*,\d{2}")

_CENTS = Decimal("0.01")


def extract_monetary_values(text: Optional[str]) -> List[str]:
    """All monetary substrings in order of appearance."""
    if not text:
        return []
    return MONETARY_PATTERN.findall(str(text))


def parse_monetary_value(raw: Optional[str]) -> Optional[float]:
    """
    Convert ``"9.999,99"`` into ``9999.99``.

    Returns None when the token does not yield a finite number.
    """
    if not raw:
        return None
    cleaned = str(raw).strip().replace(".", "").replace(",", ".", 1)
    try:
        value = float(cleaned)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def round_money(value: float) -> float:
    """Round half-up to cents (1000.025 -> 1000.03)."""
    try:
        return float(Decimal(repr(value)).quantize(_CENTS, rounding=ROUND_HALF_UP))
    except InvalidOperation:
        return value


def format_brl(value: Optional[float]) -> str:
    """Format ``1234.5`` as ``"1.234,50"``; empty string for None."""
    if value is None:
        return ""
    grouped = f"{round_money(value):,.2f}"
    return grouped.replace(",", "_").replace(".", ",").replace("_", ".")
