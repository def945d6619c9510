"""
Flattened rows handed to the spreadsheet-export collaborator.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from ..models import (
    Divergence,
    DivergenceKind,
    OrphanPayment,
    OverdueTitle,
    ReconciliationResult,
)
from ..utils.monetary import format_brl
from .matchers import (
    NOT_FOUND,
    OPEN,
    SETTLED,
    DateMatcher,
    DocumentReferenceMatcher,
    SettlementStatusMatcher,
    ValueMatcher,
)

SHEET_DIVERGENCES = "Divergencias"
SHEET_OVERDUE_TITLES = "TitulosVencidos"
SHEET_ORPHAN_PAYMENTS = "PagamentosOrfaos"

_KIND_STATUS = {
    DivergenceKind.TITULO_PAGO_NAO_BAIXADO: SETTLED,
    DivergenceKind.TITULO_SEM_PAGAMENTO: OPEN,
}


@dataclass
class ExportRow:
    date: str = NOT_FOUND
    narrative: str = NOT_FOUND
    document_reference: str = NOT_FOUND
    status: str = NOT_FOUND
    value: str = NOT_FOUND
    supplier_name: str = NOT_FOUND

    def to_dict(self) -> Dict[str, str]:
        return {
            "date": self.date,
            "narrative": self.narrative,
            "documentReference": self.document_reference,
            "status": self.status,
            "value": self.value,
            "supplierName": self.supplier_name,
        }


class ExportRowBuilder:
    """Derives export rows from result records with the field matchers."""

    def __init__(self):
        self.date_matcher = DateMatcher()
        self.document_matcher = DocumentReferenceMatcher()
        self.value_matcher = ValueMatcher()
        self.status_matcher = SettlementStatusMatcher()

    def build_row(
        self,
        supplier: str,
        description: str,
        references: List[str],
        estimated_value: Optional[float],
        default_status: Optional[str],
    ) -> ExportRow:
        texts = [description, *references]

        if estimated_value is not None:
            value = format_brl(estimated_value)
        else:
            value = self.value_matcher.match_first(texts)

        status = default_status or self.status_matcher.match_first(texts)

        return ExportRow(
            date=self.date_matcher.match_first(texts) or NOT_FOUND,
            narrative=description.strip() or NOT_FOUND,
            document_reference=self.document_matcher.match_first(texts) or NOT_FOUND,
            status=status or NOT_FOUND,
            value=value or NOT_FOUND,
            supplier_name=supplier.strip() or NOT_FOUND,
        )

    def from_divergence(self, supplier: str, record: Divergence) -> ExportRow:
        return self.build_row(
            supplier,
            record.description,
            record.references,
            record.estimated_value,
            _KIND_STATUS.get(record.kind),
        )

    def from_overdue_title(self, supplier: str, record: OverdueTitle) -> ExportRow:
        return self.build_row(
            supplier, record.description, record.references, record.estimated_value, OPEN
        )

    def from_orphan_payment(self, supplier: str, record: OrphanPayment) -> ExportRow:
        return self.build_row(
            supplier, record.description, record.references, record.estimated_value, SETTLED
        )


def build_export_rows(
    supplier: str,
    result: ReconciliationResult,
    builder: Optional[ExportRowBuilder] = None,
) -> Dict[str, List[ExportRow]]:
    """Rows per sheet, in the order the export collaborator writes them."""
    builder = builder or ExportRowBuilder()
    return {
        SHEET_DIVERGENCES: [builder.from_divergence(supplier, d) for d in result.divergences],
        SHEET_OVERDUE_TITLES: [
            builder.from_overdue_title(supplier, t) for t in result.overdue_titles
        ],
        SHEET_ORPHAN_PAYMENTS: [
            builder.from_orphan_payment(supplier, p) for p in result.orphan_payments
        ],
    }
