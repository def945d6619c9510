"""Reconciliation models: matched lines, balance indicators and the result wire shape."""

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List, Dict, Any
from uuid import uuid4

from .enums import (
    AuditAction,
    BalanceStatus,
    DivergenceKind,
    Severity,
)


@dataclass
class MatchedLine:
    """A text line that fuzzily matches the supplier name."""
    original_text: str
    normalized_text: str
    score: float  # 0-1, fraction of target tokens found
    monetary_values: List[str] = field(default_factory=list)

    @property
    def last_value(self) -> Optional[str]:
        """Trailing monetary token, treated as the balance column."""
        return self.monetary_values[-1] if self.monetary_values else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "linha": self.original_text.strip(),
            "score": round(self.score, 4),
            "valores": list(self.monetary_values),
            "ultimoValor": self.last_value,
        }


@dataclass
class DocumentIndicator:
    """Supplier lines and parsed balances found in one document."""
    matched_lines: List[MatchedLine] = field(default_factory=list)
    numeric_balances: List[float] = field(default_factory=list)

    @property
    def has_balances(self) -> bool:
        return bool(self.numeric_balances)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "linhasEncontradas": [line.to_dict() for line in self.matched_lines],
            "saldosNumericos": list(self.numeric_balances),
        }


@dataclass
class BalanceAssessment:
    """
    Deterministic verdict over the balances extracted from all documents.
    reference_value is only set when status is SALDOS_IGUAIS.
    """
    status: BalanceStatus = BalanceStatus.DADOS_INSUFICIENTES
    reference_value: Optional[float] = None
    min_balance: Optional[float] = None
    max_balance: Optional[float] = None
    documents_with_balances: int = 0

    @property
    def spread(self) -> Optional[float]:
        if self.min_balance is None or self.max_balance is None:
            return None
        return self.max_balance - self.min_balance

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"status": self.status.value}
        if self.status == BalanceStatus.SALDOS_IGUAIS:
            data["valorReferencia"] = self.reference_value
        if self.min_balance is not None:
            data["menorSaldo"] = self.min_balance
            data["maiorSaldo"] = self.max_balance
        data["documentosComSaldo"] = self.documents_with_balances
        return data


@dataclass
class BalanceReport:
    """Per-document indicators plus the automatic assessment."""
    indicators: Dict[str, DocumentIndicator] = field(default_factory=dict)
    assessment: BalanceAssessment = field(default_factory=BalanceAssessment)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "indicadoresSaldo": {
                key: indicator.to_dict() for key, indicator in self.indicators.items()
            },
            "avaliacaoAutomatica": self.assessment.to_dict(),
        }


def _coerce_value(value: Any) -> Optional[float]:
    """Lenient numeric coercion for model-provided values."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    else:
        text = str(value).strip().replace("R$", "").strip()
        if "," in text:
            text = text.replace(".", "").replace(",", ".")
        try:
            number = float(text)
        except ValueError:
            return None
    return number if math.isfinite(number) else None


def _coerce_references(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value if item is not None]
    return [str(value)]


def _coerce_int(value: Any) -> Optional[int]:
    number = _coerce_value(value)
    return int(number) if number is not None else None


@dataclass
class Divergence:
    """A discrepancy reported for the supplier."""
    description: str = ""
    kind: DivergenceKind = DivergenceKind.OUTRO
    references: List[str] = field(default_factory=list)
    estimated_value: Optional[float] = None
    severity: Optional[Severity] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "descricao": self.description,
            "tipo": self.kind.value,
            "referencias": list(self.references),
            "valorEstimado": self.estimated_value,
            "nivelCriticidade": self.severity.value if self.severity else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Divergence":
        return cls(
            description=str(data.get("descricao") or ""),
            kind=DivergenceKind.parse(data.get("tipo")),
            references=_coerce_references(data.get("referencias")),
            estimated_value=_coerce_value(data.get("valorEstimado")),
            severity=Severity.parse(data.get("nivelCriticidade") or data.get("nivelRisco")),
        )


@dataclass
class BalanceComponent:
    """One line of the balance composition."""
    source: str = "estimado"  # contas_pagar | balancete | razao | pagamentos | estimado
    description: str = ""
    estimated_value: Optional[float] = None
    notes: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fonte": self.source,
            "descricao": self.description,
            "valorEstimado": self.estimated_value,
            "observacoes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BalanceComponent":
        return cls(
            source=str(data.get("fonte") or "estimado"),
            description=str(data.get("descricao") or ""),
            estimated_value=_coerce_value(data.get("valorEstimado")),
            notes=str(data.get("observacoes") or ""),
        )


@dataclass
class OrphanPayment:
    """A payment in the extract with no counterpart in payables or ledger."""
    description: str = ""
    estimated_value: Optional[float] = None
    references: List[str] = field(default_factory=list)
    severity: Optional[Severity] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "descricao": self.description,
            "valorEstimado": self.estimated_value,
            "referencias": list(self.references),
            "nivelCriticidade": self.severity.value if self.severity else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OrphanPayment":
        return cls(
            description=str(data.get("descricao") or ""),
            estimated_value=_coerce_value(data.get("valorEstimado")),
            references=_coerce_references(data.get("referencias")),
            severity=Severity.parse(data.get("nivelCriticidade") or data.get("nivelRisco")),
        )


@dataclass
class OverdueTitle:
    """An open title with no matching payment."""
    description: str = ""
    estimated_value: Optional[float] = None
    references: List[str] = field(default_factory=list)
    days_overdue: Optional[int] = None
    severity: Optional[Severity] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "descricao": self.description,
            "valorEstimado": self.estimated_value,
            "referencias": list(self.references),
            "diasEmAtrasoEstimado": self.days_overdue,
            "nivelCriticidade": self.severity.value if self.severity else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OverdueTitle":
        return cls(
            description=str(data.get("descricao") or ""),
            estimated_value=_coerce_value(data.get("valorEstimado")),
            references=_coerce_references(data.get("referencias")),
            days_overdue=_coerce_int(data.get("diasEmAtrasoEstimado")),
            severity=Severity.parse(data.get("nivelCriticidade") or data.get("nivelRisco")),
        )


def _records(data: Dict[str, Any], key: str) -> List[Dict[str, Any]]:
    items = data.get(key)
    if not isinstance(items, list):
        return []
    return [item for item in items if isinstance(item, dict)]


@dataclass
class ReconciliationResult:
    """
    Canonical result shape exchanged with the model and export collaborators.
    """
    summary: str = ""
    balance_composition: List[BalanceComponent] = field(default_factory=list)
    divergences: List[Divergence] = field(default_factory=list)
    orphan_payments: List[OrphanPayment] = field(default_factory=list)
    overdue_titles: List[OverdueTitle] = field(default_factory=list)
    recommended_steps: List[str] = field(default_factory=list)
    general_notes: str = ""

    def append_note(self, note: str) -> None:
        """Append a sentence to general_notes."""
        if not note:
            return
        if self.general_notes:
            self.general_notes = f"{self.general_notes.rstrip()} {note}"
        else:
            self.general_notes = note

    def to_dict(self) -> Dict[str, Any]:
        return {
            "resumoExecutivo": self.summary,
            "composicaoSaldo": [c.to_dict() for c in self.balance_composition],
            "divergencias": [d.to_dict() for d in self.divergences],
            "pagamentosOrfaos": [p.to_dict() for p in self.orphan_payments],
            "titulosVencidosSemContrapartida": [t.to_dict() for t in self.overdue_titles],
            "passosRecomendados": list(self.recommended_steps),
            "observacoesGerais": self.general_notes,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ReconciliationResult":
        """Build from a model response; missing sections become empty."""
        steps = data.get("passosRecomendados")
        return cls(
            summary=str(data.get("resumoExecutivo") or ""),
            balance_composition=[
                BalanceComponent.from_dict(item) for item in _records(data, "composicaoSaldo")
            ],
            divergences=[Divergence.from_dict(item) for item in _records(data, "divergencias")],
            orphan_payments=[
                OrphanPayment.from_dict(item) for item in _records(data, "pagamentosOrfaos")
            ],
            overdue_titles=[
                OverdueTitle.from_dict(item)
                for item in _records(data, "titulosVencidosSemContrapartida")
            ],
            recommended_steps=[str(s) for s in steps] if isinstance(steps, list) else [],
            general_notes=str(data.get("observacoesGerais") or ""),
        )


@dataclass
class AuditEntry:
    """An entry in the audit log."""
    id: str = field(default_factory=lambda: str(uuid4()))
    timestamp: datetime = field(default_factory=datetime.utcnow)

    action: AuditAction = AuditAction.SUPPLIER_PRESENCE_CHECKED
    message: str = ""
    details: Dict[str, Any] = field(default_factory=dict)

    success: bool = True
    error_message: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp.isoformat(),
            "action": self.action.value,
            "message": self.message,
            "details": self.details,
            "success": self.success,
            "error_message": self.error_message,
        }
