"""
Tests for severity classification, escalation and the balance claim guard.
"""

import pytest

from conciliador.models import (
    BalanceAssessment,
    BalanceStatus,
    Divergence,
    DivergenceKind,
    OrphanPayment,
    OverdueTitle,
    ReconciliationResult,
    Severity,
)
from conciliador.reconciliation import BalanceClaimGuard, DivergenceEscalator, escalate
from conciliador.reconciliation.escalation import STRATEGIC_NOTE


SUPPLIER = "Comercial Rio Ltda"


@pytest.fixture
def escalator():
    return DivergenceEscalator(low_ceiling=1000, medium_ceiling=10000)


@pytest.fixture
def guard(escalator):
    return BalanceClaimGuard(escalator=escalator)


class TestEscalate:
    def test_one_step_up(self):
        assert escalate(Severity.BAIXA) == Severity.MEDIA
        assert escalate(Severity.MEDIA) == Severity.ALTA

    def test_saturates_at_alta(self):
        assert escalate(Severity.ALTA) == Severity.ALTA

    def test_never_lowers(self):
        for level in Severity:
            assert escalate(level).rank >= level.rank


class TestClassifyByAmount:
    @pytest.mark.parametrize("value,expected", [
        (None, Severity.BAIXA),
        (0, Severity.BAIXA),
        (1000, Severity.BAIXA),
        (1000.01, Severity.MEDIA),
        (10000, Severity.MEDIA),
        (10000.01, Severity.ALTA),
        (-20000, Severity.ALTA),
    ])
    def test_breakpoints(self, escalator, value, expected):
        assert escalator.classify_by_amount(value) == expected


class TestStrategicProfile:
    def test_every_record_goes_up_one_step(self, escalator):
        result = ReconciliationResult(
            divergences=[
                Divergence(description="a", severity=Severity.BAIXA),
                Divergence(description="b", severity=Severity.ALTA),
            ],
            orphan_payments=[OrphanPayment(description="c", severity=Severity.MEDIA)],
            overdue_titles=[OverdueTitle(description="d", severity=Severity.BAIXA)],
        )

        touched = escalator.apply_strategic_profile(result)

        assert touched == 4
        assert [d.severity for d in result.divergences] == [Severity.MEDIA, Severity.ALTA]
        assert result.orphan_payments[0].severity == Severity.ALTA
        assert result.overdue_titles[0].severity == Severity.MEDIA

    def test_missing_severity_derived_from_value_first(self, escalator):
        result = ReconciliationResult(
            divergences=[Divergence(description="x", estimated_value=5000.0)],
            orphan_payments=[OrphanPayment(description="y")],
        )

        escalator.apply_strategic_profile(result)

        assert result.divergences[0].severity == Severity.ALTA
        assert result.orphan_payments[0].severity == Severity.MEDIA

    def test_note_appended(self, escalator):
        result = ReconciliationResult(general_notes="Dados parciais.")

        assert escalator.apply_strategic_profile(result) == 0
        assert result.general_notes == f"Dados parciais. {STRATEGIC_NOTE}"


class TestBalanceClaimGuard:
    """Test suite for policing model balance claims."""

    def _result(self):
        return ReconciliationResult(divergences=[
            Divergence(description="saldo", kind=DivergenceKind.SALDO_DIFERENTE,
                       estimated_value=800.0, severity=Severity.MEDIA),
            Divergence(description="NF 10 paga", kind=DivergenceKind.TITULO_PAGO_NAO_BAIXADO),
        ])

    def test_claims_dropped_when_balances_agree(self, guard):
        result = self._result()
        assessment = BalanceAssessment(
            status=BalanceStatus.SALDOS_IGUAIS,
            reference_value=15000.0,
            min_balance=15000.0,
            max_balance=15000.0,
            documents_with_balances=2,
        )

        outcome = guard.apply(result, assessment, SUPPLIER)

        assert len(outcome.suppressed) == 1
        assert [d.kind for d in result.divergences] == [DivergenceKind.TITULO_PAGO_NAO_BAIXADO]
        assert "15.000,00" in result.general_notes

    def test_claim_synthesized_when_balances_differ(self, guard):
        result = ReconciliationResult()
        assessment = BalanceAssessment(
            status=BalanceStatus.SALDOS_DIFERENTES,
            min_balance=14000.0,
            max_balance=15000.0,
            documents_with_balances=2,
        )

        outcome = guard.apply(result, assessment, SUPPLIER)

        assert outcome.synthesized is result.divergences[0]
        assert result.divergences[0].kind == DivergenceKind.SALDO_DIFERENTE
        assert result.divergences[0].estimated_value == 1000.0
        assert result.divergences[0].severity == Severity.BAIXA

    def test_model_claim_kept_when_balances_differ(self, guard):
        result = self._result()
        assessment = BalanceAssessment(
            status=BalanceStatus.SALDOS_DIFERENTES,
            min_balance=1000.0,
            max_balance=2000.0,
            documents_with_balances=2,
        )

        outcome = guard.apply(result, assessment, SUPPLIER)

        assert outcome.synthesized is None
        assert len(result.divergences) == 2

    def test_claims_flagged_when_data_insufficient(self, guard):
        result = self._result()
        assessment = BalanceAssessment(status=BalanceStatus.DADOS_INSUFICIENTES)

        outcome = guard.apply(result, assessment, SUPPLIER)

        assert outcome.flagged_unconfirmed == 1
        assert len(result.divergences) == 2
        assert "não puderam ser confirmadas" in result.general_notes

    def test_nothing_to_do(self, guard):
        result = ReconciliationResult()
        outcome = guard.apply(
            result, BalanceAssessment(status=BalanceStatus.DADOS_INSUFICIENTES), SUPPLIER
        )

        assert outcome.flagged_unconfirmed == 0
        assert result.general_notes == ""
