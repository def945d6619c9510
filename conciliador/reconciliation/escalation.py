"""
Severity classification and strategic-supplier escalation.
"""

from typing import Optional

import structlog

from ..config import get_settings
from ..models import ReconciliationResult, Severity

logger = structlog.get_logger()

STRATEGIC_NOTE = (
    "Critérios de criticidade reforçados: fornecedor classificado como "
    "estratégico, todas as ocorrências foram elevadas em um nível."
)


def escalate(level: Severity) -> Severity:
    """One step up, saturating at ALTA."""
    if level == Severity.BAIXA:
        return Severity.MEDIA
    return Severity.ALTA


class DivergenceEscalator:
    """
    Raises severity of findings by monetary magnitude and supplier profile.
    Escalation never lowers a level and never exceeds ALTA.
    """

    def __init__(
        self,
        low_ceiling: Optional[float] = None,
        medium_ceiling: Optional[float] = None,
    ):
        self.settings = get_settings()
        self.low_ceiling = (
            self.settings.severity_low_ceiling if low_ceiling is None else low_ceiling
        )
        self.medium_ceiling = (
            self.settings.severity_medium_ceiling if medium_ceiling is None else medium_ceiling
        )

    def classify_by_amount(self, value: Optional[float]) -> Severity:
        amount = abs(value) if value is not None else 0.0
        if amount <= self.low_ceiling:
            return Severity.BAIXA
        if amount <= self.medium_ceiling:
            return Severity.MEDIA
        return Severity.ALTA

    def escalate(self, level: Severity) -> Severity:
        return escalate(level)

    def apply_strategic_profile(self, result: ReconciliationResult) -> int:
        """
        Escalate every divergence, orphan payment and overdue title one step.
        Records without a severity first get one from their estimated value.

        Returns:
            Number of records touched
        """
        records = [*result.divergences, *result.orphan_payments, *result.overdue_titles]

        for record in records:
            base = record.severity or self.classify_by_amount(record.estimated_value)
            record.severity = escalate(base)

        result.append_note(STRATEGIC_NOTE)

        logger.info("Strategic escalation applied", records=len(records))
        return len(records)
