"""
Accounts-payable subtotal for the supplier.

Prefers an explicit "sub total" line; otherwise takes the largest matched
value. The fallback can pick a single large invoice instead of a real
subtotal and is kept that way until the business rule is confirmed.
"""

import re
from typing import Optional

import structlog

from ..models import OverdueTitle, ReconciliationResult
from ..utils.monetary import parse_monetary_value
from .fuzzy_matcher import FuzzyLineMatcher

logger = structlog.get_logger()

SUBTOTAL_LABEL = re.compile(r"\bsub ?total\b")


class SubtotalResolver:
    """Isolates the supplier's open-items subtotal from accounts-payable text."""

    def __init__(self, matcher: Optional[FuzzyLineMatcher] = None):
        self.matcher = matcher or FuzzyLineMatcher()

    def resolve(self, accounts_payable_text: str, supplier: str) -> Optional[float]:
        lines = self.matcher.matched_lines(supplier, accounts_payable_text or "")
        if not lines:
            return None

        for line in lines:
            if not SUBTOTAL_LABEL.search(line.normalized_text):
                continue
            value = parse_monetary_value(line.last_value)
            if value is not None:
                logger.debug("Subtotal line found", supplier=supplier, value=value)
                return value

        values = [
            value for value in (parse_monetary_value(line.last_value) for line in lines)
            if value is not None
        ]
        if not values:
            return None
        return max(values)

    def apply(
        self,
        result: ReconciliationResult,
        value: float,
        supplier: str,
    ) -> OverdueTitle:
        """
        Force the resolved subtotal into the first overdue title, creating
        one when the model returned none. Returns the record written.
        """
        if result.overdue_titles:
            title = result.overdue_titles[0]
            title.estimated_value = value
        else:
            title = OverdueTitle(
                description=(
                    f"Saldo em aberto do fornecedor {supplier} conforme subtotal "
                    "do relatório de contas a pagar."
                ),
                estimated_value=value,
                references=[f"Fornecedor: {supplier}", "Relatório: Contas a Pagar"],
            )
            result.overdue_titles.append(title)
        return title
