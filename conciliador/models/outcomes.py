"""
Pipeline outcomes.

Every exit path of the base procedure is one of the outcome types below,
so callers branch on the type (or its status) instead of checking optional fields.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List, Dict, Any, Union
from uuid import uuid4

from .enums import Profile, Rodada, RunStatus
from .reconciliation import AuditEntry, BalanceReport, ReconciliationResult

LOCAL_RULE_MODEL = "regra_local_sem_ia"


@dataclass
class SupplierNotFound:
    """Supplier absent from the ledger; diagnostic built without the model."""
    result: ReconciliationResult
    model: str = LOCAL_RULE_MODEL
    raw_response: str = (
        "Fornecedor não encontrado na razão. "
        "Diagnóstico gerado sem chamada ao modelo de IA."
    )
    status: RunStatus = field(default=RunStatus.CONCILIACAO_GERADA, init=False)


@dataclass
class ModelUnavailable:
    """No model credential configured."""
    message: str
    status: RunStatus = field(default=RunStatus.ERRO_OPENAI, init=False)


@dataclass
class ModelCallFailed:
    """The model call raised (network, HTTP error, timeout)."""
    message: str
    detail: str = ""
    status: RunStatus = field(default=RunStatus.ERRO_OPENAI, init=False)


@dataclass
class ParsedResponse:
    """Model answered with a JSON object matching the result shape."""
    result: ReconciliationResult
    model: str
    raw_response: str = ""
    status: RunStatus = field(default=RunStatus.CONCILIACAO_GERADA, init=False)


@dataclass
class RawResponseFallback:
    """Model answered with something that is not a JSON object."""
    raw_response: str
    model: str
    status: RunStatus = field(default=RunStatus.CONCILIACAO_TEXTO, init=False)


Outcome = Union[
    SupplierNotFound,
    ModelUnavailable,
    ModelCallFailed,
    ParsedResponse,
    RawResponseFallback,
]


def outcome_result(outcome: Outcome) -> Optional[ReconciliationResult]:
    """The structured result carried by an outcome, if any."""
    if isinstance(outcome, (SupplierNotFound, ParsedResponse)):
        return outcome.result
    return None


def outcome_to_dict(outcome: Outcome) -> Dict[str, Any]:
    data: Dict[str, Any] = {"status": outcome.status.value}
    if isinstance(outcome, (ModelUnavailable, ModelCallFailed)):
        data["mensagem"] = outcome.message
        if isinstance(outcome, ModelCallFailed):
            data["detalhe"] = outcome.detail
        return data

    data["modelo"] = outcome.model
    data["respostaBruta"] = outcome.raw_response
    result = outcome_result(outcome)
    data["estrutura"] = result.to_dict() if result is not None else None
    return data


@dataclass
class ReconciliationRun:
    """Envelope returned to callers for one reconciliation request."""
    supplier: str
    rodada: Rodada
    outcome: Outcome
    profile: Profile = Profile.PADRAO
    id: str = field(default_factory=lambda: str(uuid4()))

    balance_report: Optional[BalanceReport] = None
    subtotal_contas_pagar: Optional[float] = None
    model_request: Optional[Dict[str, Any]] = None

    # rodada2
    identifiers: Optional[Dict[str, List[str]]] = None

    # rodada3
    divergence_buckets: Optional[List[Dict[str, Any]]] = None
    supplier_line_counts: Optional[Dict[str, int]] = None

    audit_log: List[AuditEntry] = field(default_factory=list)
    started_at: datetime = field(default_factory=datetime.utcnow)
    completed_at: Optional[datetime] = None

    @property
    def status(self) -> RunStatus:
        return self.outcome.status

    @property
    def result(self) -> Optional[ReconciliationResult]:
        return outcome_result(self.outcome)

    @property
    def model_skipped(self) -> bool:
        return isinstance(self.outcome, SupplierNotFound)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "fornecedor": self.supplier,
            "rodada": self.rodada.value,
            "perfil": self.profile.value,
        }
        data.update(outcome_to_dict(self.outcome))

        if self.model_request is not None:
            data["entradaIA"] = self.model_request
        if self.balance_report is not None:
            data.update(self.balance_report.to_payload())
        if self.subtotal_contas_pagar is not None:
            data["subtotalContasPagar"] = self.subtotal_contas_pagar
        if self.identifiers is not None:
            data["identificadores"] = self.identifiers
        if self.divergence_buckets is not None:
            data["divergenciasPorTipo"] = self.divergence_buckets
        if self.supplier_line_counts is not None:
            data["linhasFornecedor"] = self.supplier_line_counts

        data["auditoria"] = [entry.to_dict() for entry in self.audit_log]
        data["iniciadoEm"] = self.started_at.isoformat()
        if self.completed_at is not None:
            data["concluidoEm"] = self.completed_at.isoformat()
        return data
