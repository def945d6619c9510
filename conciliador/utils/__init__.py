"""Utility modules."""

from .text_normalizer import normalize_text, split_lines, significant_tokens
from .monetary import (
    extract_monetary_values,
    parse_monetary_value,
    round_money,
    format_brl,
)
from .identifiers import extract_identifiers

__all__ = [
    "normalize_text",
    "split_lines",
    "significant_tokens",
    "extract_monetary_values",
    "parse_monetary_value",
    "round_money",
    "format_brl",
    "extract_identifiers",
]
