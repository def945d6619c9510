"""Data models for the supplier reconciliation system."""

from .enums import (
    AuditAction,
    BalanceStatus,
    DivergenceKind,
    DocumentKey,
    Profile,
    Rodada,
    RunStatus,
    Severity,
)
from .document import Document, build_documents
from .reconciliation import (
    AuditEntry,
    BalanceAssessment,
    BalanceComponent,
    BalanceReport,
    Divergence,
    DocumentIndicator,
    MatchedLine,
    OrphanPayment,
    OverdueTitle,
    ReconciliationResult,
)
from .outcomes import (
    LOCAL_RULE_MODEL,
    ModelCallFailed,
    ModelUnavailable,
    Outcome,
    ParsedResponse,
    RawResponseFallback,
    ReconciliationRun,
    SupplierNotFound,
)

__all__ = [
    # Enums
    "AuditAction",
    "BalanceStatus",
    "DivergenceKind",
    "DocumentKey",
    "Profile",
    "Rodada",
    "RunStatus",
    "Severity",
    # Documents
    "Document",
    "build_documents",
    # Reconciliation
    "AuditEntry",
    "BalanceAssessment",
    "BalanceComponent",
    "BalanceReport",
    "Divergence",
    "DocumentIndicator",
    "MatchedLine",
    "OrphanPayment",
    "OverdueTitle",
    "ReconciliationResult",
    # Outcomes
    "LOCAL_RULE_MODEL",
    "ModelCallFailed",
    "ModelUnavailable",
    "Outcome",
    "ParsedResponse",
    "RawResponseFallback",
    "ReconciliationRun",
    "SupplierNotFound",
]
