"""Enumerations for the supplier reconciliation system."""

from enum import Enum
from typing import Optional


class DocumentKey(str, Enum):
    """
    Kind of uploaded report.

    RAZAO: Supplier general ledger
    BALANCETE: Trial balance
    CONTAS_PAGAR: Accounts payable (open items)
    PAGAMENTOS: Payment extract
    NOTAS_FISCAIS: Invoices
    """
    RAZAO = "razao"
    BALANCETE = "balancete"
    CONTAS_PAGAR = "contas_pagar"
    PAGAMENTOS = "pagamentos"
    NOTAS_FISCAIS = "notas_fiscais"


class BalanceStatus(str, Enum):
    """Automatic cross-document balance assessment."""
    SALDOS_IGUAIS = "saldos_iguais"
    SALDOS_DIFERENTES = "saldos_diferentes"
    DADOS_INSUFICIENTES = "dados_insuficientes"


class DivergenceKind(str, Enum):
    """Kind of reconciliation finding."""
    SALDO_DIFERENTE = "saldo_diferente"
    TITULO_PAGO_NAO_BAIXADO = "titulo_pago_nao_baixado"
    TITULO_SEM_PAGAMENTO = "titulo_sem_pagamento"
    FORNECEDOR_SEM_LANCAMENTO = "fornecedor_sem_lancamento"
    OUTRO = "outro"

    @classmethod
    def parse(cls, value) -> "DivergenceKind":
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.OUTRO


class Severity(str, Enum):
    """Severity of a finding, ordered baixa < media < alta."""
    BAIXA = "baixa"
    MEDIA = "media"
    ALTA = "alta"

    @property
    def rank(self) -> int:
        return _SEVERITY_ORDER.index(self)

    @classmethod
    def parse(cls, value) -> Optional["Severity"]:
        """Parse a severity label, accepting the masculine risk labels."""
        if value is None:
            return None
        label = str(value).strip().lower()
        label = _SEVERITY_ALIASES.get(label, label)
        try:
            return cls(label)
        except ValueError:
            return None


_SEVERITY_ORDER = [Severity.BAIXA, Severity.MEDIA, Severity.ALTA]
_SEVERITY_ALIASES = {
    "baixo": "baixa",
    "medio": "media",
    "média": "media",
    "médio": "media",
    "alto": "alta",
}


class Rodada(str, Enum):
    """Reconciliation mode."""
    RODADA1 = "rodada1"  # Standard
    RODADA2 = "rodada2"  # Strategic supplier
    RODADA3 = "rodada3"  # Monthly audit
    RODADA4 = "rodada4"  # Invoice cross-check

    @classmethod
    def parse(cls, value) -> "Rodada":
        """Parse a mode label; anything unknown falls back to RODADA1."""
        try:
            return cls(str(value or "").strip().lower())
        except ValueError:
            return cls.RODADA1


class Profile(str, Enum):
    """Profile tag attached to a run."""
    PADRAO = "padrao"
    ESTRATEGICO = "estrategico"
    AUDITORIA_MENSAL = "auditoria_mensal"
    CRUZAMENTO_NOTAS_FISCAIS = "cruzamento_notas_fiscais"


class RunStatus(str, Enum):
    """Status discriminator returned to callers."""
    CONCILIACAO_GERADA = "conciliacao_gerada"
    CONCILIACAO_TEXTO = "conciliacao_texto"
    ERRO_OPENAI = "erro_openai"


class AuditAction(str, Enum):
    """Type of audit action."""
    SUPPLIER_PRESENCE_CHECKED = "supplier_presence_checked"
    MODEL_SKIPPED = "model_skipped"
    INDICATORS_BUILT = "indicators_built"
    MODEL_INVOKED = "model_invoked"
    MODEL_UNAVAILABLE = "model_unavailable"
    MODEL_FAILED = "model_failed"
    MODEL_OUTPUT_UNPARSEABLE = "model_output_unparseable"
    BALANCE_CLAIM_SUPPRESSED = "balance_claim_suppressed"
    BALANCE_CLAIM_SYNTHESIZED = "balance_claim_synthesized"
    BALANCE_CLAIM_UNCONFIRMED = "balance_claim_unconfirmed"
    SUBTOTAL_OVERRIDE = "subtotal_override"
    IDENTIFIERS_EXTRACTED = "identifiers_extracted"
    SEVERITY_ESCALATED = "severity_escalated"
    MONTHLY_AGGREGATION = "monthly_aggregation"
