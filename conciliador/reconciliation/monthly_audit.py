"""
Monthly audit aggregation: divergences bucketed by kind, supplier line
counts per document and a narrative sentence for the notes.
"""

from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any

from ..models import DocumentKey, ReconciliationResult
from ..utils.monetary import format_brl, round_money
from .fuzzy_matcher import FuzzyLineMatcher

COUNTED_DOCUMENTS = (
    DocumentKey.RAZAO,
    DocumentKey.CONTAS_PAGAR,
    DocumentKey.PAGAMENTOS,
)

_DOCUMENT_LABELS = {
    DocumentKey.RAZAO: "na razão",
    DocumentKey.CONTAS_PAGAR: "no contas a pagar",
    DocumentKey.PAGAMENTOS: "nos pagamentos",
}


@dataclass
class DivergenceBucket:
    kind: str
    count: int = 0
    total_estimated_value: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tipo": self.kind,
            "quantidade": self.count,
            "valorTotalEstimado": round_money(self.total_estimated_value),
        }


@dataclass
class MonthlyAuditSummary:
    buckets: List[DivergenceBucket] = field(default_factory=list)
    line_counts: Dict[str, int] = field(default_factory=dict)
    narrative: str = ""


class MonthlyAuditAggregator:
    def __init__(self, matcher: Optional[FuzzyLineMatcher] = None):
        self.matcher = matcher or FuzzyLineMatcher()

    def aggregate_divergences(self, result: ReconciliationResult) -> List[DivergenceBucket]:
        buckets: "OrderedDict[str, DivergenceBucket]" = OrderedDict()
        for divergence in result.divergences:
            bucket = buckets.setdefault(
                divergence.kind.value, DivergenceBucket(kind=divergence.kind.value)
            )
            bucket.count += 1
            bucket.total_estimated_value += divergence.estimated_value or 0.0
        return list(buckets.values())

    def count_supplier_lines(
        self,
        supplier: str,
        texts_by_document: Dict[DocumentKey, str],
    ) -> Dict[str, int]:
        return {
            key.value: len(self.matcher.matched_lines(supplier, texts_by_document.get(key) or ""))
            for key in COUNTED_DOCUMENTS
        }

    def summarize(
        self,
        supplier: str,
        result: ReconciliationResult,
        texts_by_document: Dict[DocumentKey, str],
    ) -> MonthlyAuditSummary:
        buckets = self.aggregate_divergences(result)
        counts = self.count_supplier_lines(supplier, texts_by_document)
        return MonthlyAuditSummary(
            buckets=buckets,
            line_counts=counts,
            narrative=self.narrative(supplier, buckets, counts),
        )

    @staticmethod
    def narrative(
        supplier: str,
        buckets: List[DivergenceBucket],
        counts: Dict[str, int],
    ) -> str:
        lines_part = ", ".join(
            f"{counts.get(key.value, 0)} {_DOCUMENT_LABELS[key]}" for key in COUNTED_DOCUMENTS
        )
        total = sum(bucket.count for bucket in buckets)
        amount = sum(bucket.total_estimated_value for bucket in buckets)

        if total:
            divergence_part = (
                f"{total} divergência(s) em {len(buckets)} tipo(s), "
                f"somando R$ {format_brl(amount)} estimados"
            )
        else:
            divergence_part = "nenhuma divergência registrada"

        return (
            f"Auditoria mensal do fornecedor {supplier}: linhas localizadas "
            f"{lines_part}; {divergence_part}."
        )
