"""
Polices the model's balance-discrepancy claims against the automatic
assessment computed from the extracted figures.
"""

from dataclasses import dataclass, field
from typing import List, Optional

import structlog

from ..models import (
    BalanceAssessment,
    BalanceStatus,
    Divergence,
    DivergenceKind,
    ReconciliationResult,
)
from ..utils.monetary import format_brl, round_money
from .escalation import DivergenceEscalator

logger = structlog.get_logger()


@dataclass
class GuardOutcome:
    """What the guard changed in a result."""
    suppressed: List[Divergence] = field(default_factory=list)
    synthesized: Optional[Divergence] = None
    flagged_unconfirmed: int = 0


class BalanceClaimGuard:
    """
    saldos_iguais: balance divergences from the model are dropped.
    saldos_diferentes: a balance divergence is synthesized if the model omitted it.
    dados_insuficientes: claims are kept but marked as unconfirmed in the notes.
    """

    def __init__(self, escalator: Optional[DivergenceEscalator] = None):
        self.escalator = escalator or DivergenceEscalator()

    def apply(
        self,
        result: ReconciliationResult,
        assessment: BalanceAssessment,
        supplier: str,
    ) -> GuardOutcome:
        outcome = GuardOutcome()
        claims = [d for d in result.divergences if d.kind == DivergenceKind.SALDO_DIFERENTE]

        if assessment.status == BalanceStatus.SALDOS_IGUAIS:
            if claims:
                result.divergences = [
                    d for d in result.divergences if d.kind != DivergenceKind.SALDO_DIFERENTE
                ]
                outcome.suppressed = claims
                result.append_note(
                    "Divergências de saldo apontadas pelo modelo foram descartadas: "
                    "os saldos extraídos dos relatórios conferem "
                    f"(valor de referência {format_brl(assessment.reference_value)})."
                )
                logger.info(
                    "Balance claims suppressed",
                    supplier=supplier,
                    count=len(claims),
                )

        elif assessment.status == BalanceStatus.SALDOS_DIFERENTES:
            if not claims:
                spread = round_money(assessment.spread or 0.0)
                divergence = Divergence(
                    description=(
                        f"Saldos do fornecedor {supplier} diferem entre os relatórios: "
                        f"menor saldo {format_brl(assessment.min_balance)}, "
                        f"maior saldo {format_brl(assessment.max_balance)}."
                    ),
                    kind=DivergenceKind.SALDO_DIFERENTE,
                    references=[f"Fornecedor: {supplier}", "Avaliação automática de saldos"],
                    estimated_value=spread,
                    severity=self.escalator.classify_by_amount(spread),
                )
                result.divergences.insert(0, divergence)
                outcome.synthesized = divergence
                logger.info(
                    "Balance claim synthesized",
                    supplier=supplier,
                    spread=spread,
                )

        elif claims:
            outcome.flagged_unconfirmed = len(claims)
            result.append_note(
                "As divergências de saldo não puderam ser confirmadas pelos valores "
                "extraídos: menos de dois relatórios apresentaram saldo do fornecedor."
            )

        return outcome
