"""
Tests for monthly audit aggregation.
"""

import pytest

from conciliador.models import Divergence, DivergenceKind, DocumentKey, ReconciliationResult
from conciliador.reconciliation import FuzzyLineMatcher, MonthlyAuditAggregator


SUPPLIER = "Comercial Rio Ltda"


@pytest.fixture
def aggregator():
    return MonthlyAuditAggregator(matcher=FuzzyLineMatcher())


class TestMonthlyAudit:
    def test_buckets_by_kind_in_first_seen_order(self, aggregator):
        result = ReconciliationResult(divergences=[
            Divergence(kind=DivergenceKind.TITULO_SEM_PAGAMENTO, estimated_value=100.0),
            Divergence(kind=DivergenceKind.OUTRO),
            Divergence(kind=DivergenceKind.TITULO_SEM_PAGAMENTO, estimated_value=200.5),
        ])

        buckets = [b.to_dict() for b in aggregator.aggregate_divergences(result)]

        assert buckets == [
            {"tipo": "titulo_sem_pagamento", "quantidade": 2, "valorTotalEstimado": 300.5},
            {"tipo": "outro", "quantidade": 1, "valorTotalEstimado": 0.0},
        ]

    def test_line_counts(self, aggregator):
        texts = {
            DocumentKey.RAZAO: "Comercial Rio Ltda 10,00\nComercial Rio Ltda 20,00\nOutro 5,00",
            DocumentKey.PAGAMENTOS: "PIX COMERCIAL RIO LTDA 10,00",
            DocumentKey.BALANCETE: "Comercial Rio Ltda 30,00",
        }

        counts = aggregator.count_supplier_lines(SUPPLIER, texts)

        assert counts == {"razao": 2, "contas_pagar": 0, "pagamentos": 1}

    def test_narrative(self, aggregator):
        result = ReconciliationResult(divergences=[
            Divergence(kind=DivergenceKind.TITULO_SEM_PAGAMENTO, estimated_value=1500.0),
        ])
        texts = {DocumentKey.RAZAO: "Comercial Rio Ltda 10,00"}

        summary = aggregator.summarize(SUPPLIER, result, texts)

        assert summary.narrative.startswith(f"Auditoria mensal do fornecedor {SUPPLIER}")
        assert "1 na razão" in summary.narrative
        assert "0 no contas a pagar" in summary.narrative
        assert "1 divergência(s)" in summary.narrative
        assert "1.500,00" in summary.narrative

    def test_narrative_without_divergences(self, aggregator):
        summary = aggregator.summarize(SUPPLIER, ReconciliationResult(), {})

        assert summary.buckets == []
        assert "nenhuma divergência registrada" in summary.narrative
