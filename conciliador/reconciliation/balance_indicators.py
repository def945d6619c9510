"""
Balance indicators: per-document supplier balances and the automatic
cross-document assessment sent alongside the model request.
"""

from typing import Dict, List, Optional

import structlog

from ..config import get_settings
from ..models import (
    BalanceAssessment,
    BalanceReport,
    BalanceStatus,
    DocumentIndicator,
    DocumentKey,
)
from ..utils.monetary import parse_monetary_value, round_money
from .fuzzy_matcher import FuzzyLineMatcher

logger = structlog.get_logger()

# Documents that carry a supplier balance, in reporting order.
BALANCE_DOCUMENTS = (
    DocumentKey.BALANCETE,
    DocumentKey.CONTAS_PAGAR,
    DocumentKey.RAZAO,
)


class BalanceIndicatorBuilder:
    """
    Collects supplier lines per document, parses their trailing values and
    decides whether the balances agree within the configured tolerance.
    """

    def __init__(
        self,
        matcher: Optional[FuzzyLineMatcher] = None,
        tolerance: Optional[float] = None,
    ):
        self.settings = get_settings()
        self.matcher = matcher or FuzzyLineMatcher()
        self.tolerance = self.settings.balance_tolerance if tolerance is None else tolerance

    def build(
        self,
        supplier: str,
        texts_by_document: Dict[DocumentKey, str],
    ) -> BalanceReport:
        """
        Build indicators for every balance-bearing document present.

        Args:
            supplier: Supplier name as typed by the user
            texts_by_document: Extracted text per document key

        Returns:
            BalanceReport with indicators keyed by document value
        """
        indicators: Dict[str, DocumentIndicator] = {}

        for key in BALANCE_DOCUMENTS:
            text = texts_by_document.get(key)
            if not text:
                continue
            indicators[key.value] = self.build_indicator(supplier, text)

        assessment = self.assess(
            [ind.numeric_balances for ind in indicators.values() if ind.has_balances]
        )

        logger.info(
            "Balance indicators built",
            supplier=supplier,
            documents=list(indicators.keys()),
            status=assessment.status.value,
            reference_value=assessment.reference_value,
        )

        return BalanceReport(indicators=indicators, assessment=assessment)

    def build_indicator(self, supplier: str, text: str) -> DocumentIndicator:
        lines = self.matcher.matched_lines(supplier, text)
        balances = []
        for line in lines:
            value = parse_monetary_value(line.last_value)
            if value is not None:
                balances.append(value)
        return DocumentIndicator(matched_lines=lines, numeric_balances=balances)

    def assess(self, balance_lists: List[List[float]]) -> BalanceAssessment:
        """
        Equal when every balance from at least two documents falls within
        the tolerance; insufficient when fewer than two documents have one.
        """
        populated = [balances for balances in balance_lists if balances]
        if len(populated) < 2:
            return BalanceAssessment(
                status=BalanceStatus.DADOS_INSUFICIENTES,
                documents_with_balances=len(populated),
            )

        everything = [value for balances in populated for value in balances]
        low, high = min(everything), max(everything)

        if round_money(high - low) <= self.tolerance:
            return BalanceAssessment(
                status=BalanceStatus.SALDOS_IGUAIS,
                reference_value=round_money((low + high) / 2),
                min_balance=low,
                max_balance=high,
                documents_with_balances=len(populated),
            )

        return BalanceAssessment(
            status=BalanceStatus.SALDOS_DIFERENTES,
            min_balance=low,
            max_balance=high,
            documents_with_balances=len(populated),
        )
