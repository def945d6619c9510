"""
Text normalization for comparing supplier names against extracted report text.
"""

import re
import unicodedata
from typing import List, Optional

_NON_WORD = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")
_LINE_BREAK = re.compile(r"\r?\n")


def normalize_text(value: Optional[str]) -> str:
    """
    Canonical form for comparison.

    Strips accents, replaces punctuation with spaces, collapses whitespace
    (line breaks included), lower-cases and trims. Idempotent.
    """
    if not value:
        return ""
    # Lower-case first: some capitals only decompose once lowered.
    decomposed = unicodedata.normalize("NFD", str(value).lower())
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    stripped = _NON_WORD.sub(" ", stripped)
    return _WHITESPACE.sub(" ", stripped).strip()


def split_lines(text: Optional[str]) -> List[str]:
    """Split raw text into lines; normalization must happen per line afterwards."""
    if not text:
        return []
    return _LINE_BREAK.split(str(text))


def significant_tokens(value: Optional[str], min_length: int = 2) -> List[str]:
    """Words of the normalized value longer than min_length characters."""
    return [token for token in normalize_text(value).split() if len(token) > min_length]
