"""Reconciliation guardrail components."""

from .fuzzy_matcher import FuzzyLineMatcher
from .balance_indicators import BalanceIndicatorBuilder
from .subtotal import SubtotalResolver
from .escalation import DivergenceEscalator, escalate
from .balance_guard import BalanceClaimGuard
from .monthly_audit import MonthlyAuditAggregator
from .orchestrator import ReconciliationPipeline

__all__ = [
    "FuzzyLineMatcher",
    "BalanceIndicatorBuilder",
    "SubtotalResolver",
    "DivergenceEscalator",
    "escalate",
    "BalanceClaimGuard",
    "MonthlyAuditAggregator",
    "ReconciliationPipeline",
]
