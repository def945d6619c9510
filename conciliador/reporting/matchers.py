"""
Best-effort field sniffers for export rows.

Each matcher looks at one piece of free text and returns the field value or
None, so every pattern can be exercised on its own.
"""

import re
from typing import Iterable, List, Optional, Pattern, Tuple

from ..utils.monetary import extract_monetary_values, parse_monetary_value, format_brl
from ..utils.text_normalizer import normalize_text

NOT_FOUND = "Não localizado"
SETTLED = "Liquidado"
OPEN = "A Liquidar"


class TextMatcher:
    """Base matcher: ``match`` one text, ``match_first`` over several."""

    def match(self, text: str) -> Optional[str]:
        raise NotImplementedError

    def match_first(self, texts: Iterable[Optional[str]]) -> Optional[str]:
        for text in texts:
            if not text:
                continue
            found = self.match(text)
            if found:
                return found
        return None


class DateMatcher(TextMatcher):
    """dd/mm/yyyy, dd-mm-yy or dd.mm.yyyy, returned as dd/mm/yyyy."""

    PATTERN = re.compile(r"(?<!\d)(\d{1,2})[/.-](\d{1,2})[/.-](\d{4}|\d{2})(?!\d)")

    def match(self, text: str) -> Optional[str]:
        for day, month, year in self.PATTERN.findall(text):
            d, m = int(day), int(month)
            if not (1 <= d <= 31 and 1 <= m <= 12):
                continue
            if len(year) == 2:
                year = f"20{year}"
            return f"{d:02d}/{m:02d}/{year}"
        return None


_NUMBER_MARK = r"(?:n[º°o]\.?\s*)?[:#]?\s*"
_DOC_NUMBER = r"(\d[\d./-]*\d|\d)"


class DocumentReferenceMatcher(TextMatcher):
    """Invoice, title or document numbers ("NF 1234", "Título 55/1")."""

    PATTERNS: List[Tuple[str, Pattern]] = [
        ("NF", re.compile(r"\bNF(?:S)?(?:-?e)?\s*" + _NUMBER_MARK + _DOC_NUMBER, re.I)),
        ("NF", re.compile(r"\bnota\s+fiscal\s*" + _NUMBER_MARK + _DOC_NUMBER, re.I)),
        ("Título", re.compile(r"\bt[íi]tulo\s*" + _NUMBER_MARK + _DOC_NUMBER, re.I)),
        ("Duplicata", re.compile(r"\bduplicata\s*" + _NUMBER_MARK + _DOC_NUMBER, re.I)),
        ("Documento", re.compile(r"\bdoc(?:umento)?\.?\s*" + _NUMBER_MARK + _DOC_NUMBER, re.I)),
    ]

    def match(self, text: str) -> Optional[str]:
        for label, pattern in self.PATTERNS:
            found = pattern.search(text)
            if found:
                return f"{label} {found.group(1)}"
        return None


class ValueMatcher(TextMatcher):
    """First Brazilian-format amount in the text, re-formatted."""

    def match(self, text: str) -> Optional[str]:
        for token in extract_monetary_values(text):
            value = parse_monetary_value(token)
            if value is not None:
                return format_brl(value)
        return None


class SettlementStatusMatcher(TextMatcher):
    """Liquidado / A Liquidar from wording; open wording wins ("não pago")."""

    OPEN_WORDS = (
        "nao pago", "nao liquidado", "em aberto", "a pagar", "a liquidar",
        "vencido", "pendente", "sem pagamento",
    )
    SETTLED_WORDS = ("liquidado", "pago", "quitado", "baixado")

    def match(self, text: str) -> Optional[str]:
        normalized = f" {normalize_text(text)} "
        if any(f" {word} " in normalized for word in self.OPEN_WORDS):
            return OPEN
        if any(f" {word} " in normalized for word in self.SETTLED_WORDS):
            return SETTLED
        return None
