"""
Tests for export row matchers and row building.
"""

import pytest

from conciliador.models import (
    Divergence,
    DivergenceKind,
    OrphanPayment,
    OverdueTitle,
    ReconciliationResult,
)
from conciliador.reporting import (
    DateMatcher,
    DocumentReferenceMatcher,
    ExportRowBuilder,
    SettlementStatusMatcher,
    ValueMatcher,
    build_export_rows,
)
from conciliador.reporting.matchers import NOT_FOUND, OPEN, SETTLED


SUPPLIER = "Comercial Rio Ltda"


@pytest.fixture
def builder():
    return ExportRowBuilder()


class TestMatchers:
    """Each matcher is exercised on its own."""

    @pytest.mark.parametrize("text,expected", [
        ("pago em 12/01/2024", "12/01/2024"),
        ("venc. 5-1-24", "05/01/2024"),
        ("emissão 01.02.2023", "01/02/2023"),
        ("data 31/13/2024 inválida", None),
        ("sem data", None),
    ])
    def test_date(self, text, expected):
        assert DateMatcher().match(text) == expected

    @pytest.mark.parametrize("text,expected", [
        ("NF 1250 paga", "NF 1250"),
        ("NF-e nº 3321 emitida", "NF 3321"),
        ("nota fiscal 998", "NF 998"),
        ("Título 55/1 vencido", "Título 55/1"),
        ("duplicata 77", "Duplicata 77"),
        ("Documento: 4410", "Documento 4410"),
        ("sem referência", None),
    ])
    def test_document_reference(self, text, expected):
        assert DocumentReferenceMatcher().match(text) == expected

    def test_value(self):
        assert ValueMatcher().match("saldo de 12.300,00 em aberto") == "12.300,00"
        assert ValueMatcher().match("sem valores") is None

    @pytest.mark.parametrize("text,expected", [
        ("Título não pago", OPEN),
        ("Pagamento em aberto", OPEN),
        ("Pago via PIX", SETTLED),
        ("Título quitado", SETTLED),
        ("sem informação", None),
    ])
    def test_settlement_status(self, text, expected):
        assert SettlementStatusMatcher().match(text) == expected

    def test_match_first_skips_empty(self):
        assert DateMatcher().match_first([None, "", "sem data", "em 02/03/2024"]) == "02/03/2024"


class TestExportRowBuilder:
    def test_divergence_row(self, builder):
        divergence = Divergence(
            description="NF 1250 paga em 12/01/2024 e não baixada",
            kind=DivergenceKind.TITULO_PAGO_NAO_BAIXADO,
            references=["NF 1250"],
            estimated_value=2700.0,
        )

        row = builder.from_divergence(SUPPLIER, divergence)

        assert row.to_dict() == {
            "date": "12/01/2024",
            "narrative": "NF 1250 paga em 12/01/2024 e não baixada",
            "documentReference": "NF 1250",
            "status": SETTLED,
            "value": "2.700,00",
            "supplierName": SUPPLIER,
        }

    def test_status_sniffed_for_generic_kind(self, builder):
        divergence = Divergence(description="Pagamento em aberto da duplicata 77")

        row = builder.from_divergence(SUPPLIER, divergence)

        assert row.status == OPEN
        assert row.document_reference == "Duplicata 77"
        assert row.value == NOT_FOUND

    def test_value_taken_from_references(self, builder):
        title = OverdueTitle(description="Título 55/1 vencido", references=["Valor 1.234,56"])

        row = builder.from_overdue_title(SUPPLIER, title)

        assert row.status == OPEN
        assert row.value == "1.234,56"
        assert row.date == NOT_FOUND

    def test_unresolved_fields_default(self, builder):
        row = builder.from_divergence("", Divergence())

        assert set(row.to_dict().values()) == {NOT_FOUND}

    def test_build_export_rows_by_sheet(self):
        result = ReconciliationResult(
            divergences=[Divergence(description="d", kind=DivergenceKind.TITULO_SEM_PAGAMENTO)],
            overdue_titles=[OverdueTitle(description="t"), OverdueTitle(description="u")],
            orphan_payments=[OrphanPayment(description="PIX 10/01/2024", estimated_value=50.0)],
        )

        rows = build_export_rows(SUPPLIER, result)

        assert list(rows) == ["Divergencias", "TitulosVencidos", "PagamentosOrfaos"]
        assert rows["Divergencias"][0].status == OPEN
        assert len(rows["TitulosVencidos"]) == 2
        payment = rows["PagamentosOrfaos"][0]
        assert payment.status == SETTLED
        assert payment.value == "50,00"
        assert payment.date == "10/01/2024"
