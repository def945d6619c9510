"""
Reconciliation Pipeline - Main coordinator.

Every mode shares one base procedure:
1. Supplier presence gate on the ledger (model skipped when absent)
2. Balance indicators + accounts-payable subtotal
3. Model call with the indicators attached
4. Response parsing and balance claim guard

Modes then add their own post-processing:
- rodada1: subtotal override
- rodada2: identifiers + strategic escalation
- rodada3: rodada1 + monthly aggregation
- rodada4: base only
"""

from datetime import datetime
from typing import Any, Dict, Optional

import structlog

from ..config import Settings, get_settings
from ..integrations.chat_model import ChatModelClient, ModelCallError
from ..models import (
    AuditAction,
    BalanceComponent,
    Divergence,
    DivergenceKind,
    Document,
    DocumentKey,
    ModelCallFailed,
    ModelUnavailable,
    ParsedResponse,
    Profile,
    RawResponseFallback,
    ReconciliationResult,
    ReconciliationRun,
    Rodada,
    Severity,
    SupplierNotFound,
)
from ..models.document import all_texts, texts_by_key
from ..utils.audit_logger import AuditLogger
from ..utils.identifiers import extract_identifiers
from .balance_guard import BalanceClaimGuard
from .balance_indicators import BalanceIndicatorBuilder
from .escalation import DivergenceEscalator
from .fuzzy_matcher import FuzzyLineMatcher
from .monthly_audit import MonthlyAuditAggregator
from .payload import build_model_request, parse_model_response
from .prompts import SYSTEM_PROMPT, build_user_prompt
from .subtotal import SubtotalResolver

logger = structlog.get_logger()

MODEL_UNAVAILABLE_MESSAGE = (
    "Chave da API do modelo não configurada. Defina OPENAI_API_KEY no arquivo .env "
    "para habilitar a conciliação com IA."
)
MODEL_FAILED_MESSAGE = "Falha ao gerar conciliação com IA. Veja logs no servidor."


def build_supplier_not_found_result(supplier: str) -> ReconciliationResult:
    """Deterministic diagnostic for a supplier absent from the ledger."""
    return ReconciliationResult(
        summary=f'Não foram encontrados lançamentos do fornecedor "{supplier}" na razão enviada.',
        balance_composition=[
            BalanceComponent(
                source="razao",
                description=(
                    "Razão de fornecedores analisada, porém o fornecedor informado "
                    "não consta em nenhum lançamento."
                ),
                estimated_value=0,
                notes=(
                    "Verifique se o relatório de razão está filtrado corretamente para o "
                    "período e empresa, ou se há erro no nome do fornecedor."
                ),
            ),
        ],
        divergences=[
            Divergence(
                description=(
                    "Fornecedor informado não aparece em nenhum lançamento da razão "
                    "de fornecedores."
                ),
                kind=DivergenceKind.FORNECEDOR_SEM_LANCAMENTO,
                references=[f"Fornecedor: {supplier}", "Relatório: Razão de Fornecedores"],
                estimated_value=0,
                severity=Severity.ALTA,
            ),
        ],
        recommended_steps=[
            "Conferir se o nome do fornecedor está idêntico ao cadastrado no sistema/contabilidade.",
            "Validar se o relatório de razão foi emitido para o CNPJ correto e para o período desejado.",
            "Caso o fornecedor realmente devesse ter lançamentos, solicitar a emissão de um novo "
            "relatório de razão filtrado corretamente.",
        ],
        general_notes=(
            "Como o fornecedor não foi encontrado no relatório de razão, não é possível "
            "prosseguir com a conciliação detalhada até que os relatórios estejam consistentes."
        ),
    )


class ReconciliationPipeline:
    """
    Main pipeline for supplier reconciliation.

    Stateless across runs: every call builds its own run envelope, so
    concurrent runs share nothing but the injected model client.
    """

    def __init__(
        self,
        model_client: Optional[ChatModelClient] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.model_client = model_client
        self.matcher = FuzzyLineMatcher(
            presence_threshold=self.settings.presence_threshold,
            line_threshold=self.settings.line_match_threshold,
            min_token_length=self.settings.min_token_length,
        )
        self.indicator_builder = BalanceIndicatorBuilder(
            matcher=self.matcher,
            tolerance=self.settings.balance_tolerance,
        )
        self.subtotal_resolver = SubtotalResolver(matcher=self.matcher)
        self.escalator = DivergenceEscalator(
            low_ceiling=self.settings.severity_low_ceiling,
            medium_ceiling=self.settings.severity_medium_ceiling,
        )
        self.balance_guard = BalanceClaimGuard(escalator=self.escalator)
        self.monthly_aggregator = MonthlyAuditAggregator(matcher=self.matcher)

    async def run(
        self,
        rodada: Any,
        supplier: str,
        documents: Dict[DocumentKey, Document],
    ) -> ReconciliationRun:
        """Dispatch to a mode; unknown labels run the standard rodada1."""
        mode = rodada if isinstance(rodada, Rodada) else Rodada.parse(rodada)

        if mode == Rodada.RODADA2:
            return await self.rodada2(supplier, documents)
        if mode == Rodada.RODADA3:
            return await self.rodada3(supplier, documents)
        if mode == Rodada.RODADA4:
            return await self.rodada4(supplier, documents)
        return await self.rodada1(supplier, documents)

    async def rodada1(
        self,
        supplier: str,
        documents: Dict[DocumentKey, Document],
    ) -> ReconciliationRun:
        """Standard reconciliation with the accounts-payable subtotal enforced."""
        run, audit = await self._base(Rodada.RODADA1, Profile.PADRAO, supplier, documents)
        self._apply_subtotal_override(run, audit)
        return self._finish(run, audit)

    async def rodada2(
        self,
        supplier: str,
        documents: Dict[DocumentKey, Document],
    ) -> ReconciliationRun:
        """Strategic supplier: identifiers attached and every finding escalated."""
        run, audit = await self._base(Rodada.RODADA2, Profile.ESTRATEGICO, supplier, documents)

        run.identifiers = extract_identifiers(all_texts(documents))
        audit.record(
            AuditAction.IDENTIFIERS_EXTRACTED,
            "Identifiers extracted",
            cnpjs=len(run.identifiers["cnpjs"]),
            cpfs=len(run.identifiers["cpfs"]),
        )

        if isinstance(run.outcome, ParsedResponse):
            touched = self.escalator.apply_strategic_profile(run.outcome.result)
            audit.record(
                AuditAction.SEVERITY_ESCALATED,
                "Severity escalated for strategic supplier",
                records=touched,
            )

        return self._finish(run, audit)

    async def rodada3(
        self,
        supplier: str,
        documents: Dict[DocumentKey, Document],
    ) -> ReconciliationRun:
        """Monthly audit: full rodada1 plus aggregation and narrative."""
        run, audit = await self._base(
            Rodada.RODADA3, Profile.AUDITORIA_MENSAL, supplier, documents
        )
        self._apply_subtotal_override(run, audit)

        if isinstance(run.outcome, ParsedResponse):
            result = run.outcome.result
            summary = self.monthly_aggregator.summarize(
                supplier, result, texts_by_key(documents)
            )
            run.divergence_buckets = [bucket.to_dict() for bucket in summary.buckets]
            run.supplier_line_counts = summary.line_counts
            result.append_note(summary.narrative)
            audit.record(
                AuditAction.MONTHLY_AGGREGATION,
                "Monthly aggregation appended",
                buckets=len(summary.buckets),
                line_counts=summary.line_counts,
            )

        return self._finish(run, audit)

    async def rodada4(
        self,
        supplier: str,
        documents: Dict[DocumentKey, Document],
    ) -> ReconciliationRun:
        """Invoice cross-check: shared base procedure only."""
        run, audit = await self._base(
            Rodada.RODADA4, Profile.CRUZAMENTO_NOTAS_FISCAIS, supplier, documents
        )
        return self._finish(run, audit)

    async def _base(
        self,
        rodada: Rodada,
        profile: Profile,
        supplier: str,
        documents: Dict[DocumentKey, Document],
    ):
        run = ReconciliationRun(
            supplier=supplier,
            rodada=rodada,
            profile=profile,
            outcome=ModelUnavailable(message=MODEL_UNAVAILABLE_MESSAGE),
        )
        audit = AuditLogger(run.id, supplier)

        logger.info(
            "Starting reconciliation",
            run_id=run.id,
            supplier=supplier,
            rodada=rodada.value,
            documents=[key.value for key in documents],
        )

        # Phase 1: presence gate
        ledger = documents.get(DocumentKey.RAZAO)
        ledger_text = ledger.searchable_text if ledger else ""
        if supplier.strip() and ledger_text:
            present = self.matcher.is_present(supplier, ledger_text)
            audit.record(
                AuditAction.SUPPLIER_PRESENCE_CHECKED,
                "Supplier presence checked on ledger",
                present=present,
            )
            if not present:
                run.outcome = SupplierNotFound(result=build_supplier_not_found_result(supplier))
                audit.record(
                    AuditAction.MODEL_SKIPPED,
                    "Supplier not found in ledger; model not invoked",
                )
                return run, audit

        # Phase 2: objective indicators
        texts = texts_by_key(documents)
        run.balance_report = self.indicator_builder.build(supplier, texts)
        ap_text = texts.get(DocumentKey.CONTAS_PAGAR)
        if ap_text:
            run.subtotal_contas_pagar = self.subtotal_resolver.resolve(ap_text, supplier)
        audit.record(
            AuditAction.INDICATORS_BUILT,
            "Balance indicators built",
            assessment=run.balance_report.assessment.status.value,
            subtotal=run.subtotal_contas_pagar,
        )

        run.model_request = build_model_request(
            supplier,
            documents,
            run.balance_report,
            run.subtotal_contas_pagar,
            excerpt_max_chars=self.settings.excerpt_max_chars,
        )

        # Phase 3: model call
        if self.model_client is None:
            audit.record(
                AuditAction.MODEL_UNAVAILABLE,
                "Model client not configured",
                success=False,
            )
            return run, audit

        model_name = getattr(self.model_client, "model", None) or self.settings.model_name
        try:
            raw = await self.model_client.complete(
                SYSTEM_PROMPT, build_user_prompt(supplier, run.model_request)
            )
        except ModelCallError as e:
            detail = str(e)
            logger.error(
                "Model call failed",
                run_id=run.id,
                error=detail,
                status_code=e.status_code,
            )
            run.outcome = ModelCallFailed(message=MODEL_FAILED_MESSAGE, detail=detail)
            audit.record(
                AuditAction.MODEL_FAILED,
                "Model call failed",
                success=False,
                error_message=detail,
            )
            return run, audit
        except Exception as e:
            # Caller-imposed timeouts and unexpected client errors
            detail = str(e) or e.__class__.__name__
            logger.exception("Model call raised", run_id=run.id, error=detail)
            run.outcome = ModelCallFailed(message=MODEL_FAILED_MESSAGE, detail=detail)
            audit.record(
                AuditAction.MODEL_FAILED,
                "Model call failed",
                success=False,
                error_message=detail,
            )
            return run, audit

        audit.record(AuditAction.MODEL_INVOKED, "Model answered", model=model_name)

        # Phase 4: parsing and guard
        result = parse_model_response(raw)
        if result is None:
            logger.warning("Model output is not a JSON object", run_id=run.id)
            run.outcome = RawResponseFallback(raw_response=raw, model=model_name)
            audit.record(
                AuditAction.MODEL_OUTPUT_UNPARSEABLE,
                "Model output kept as raw text",
                success=False,
            )
            return run, audit

        guard = self.balance_guard.apply(result, run.balance_report.assessment, supplier)
        if guard.suppressed:
            audit.record(
                AuditAction.BALANCE_CLAIM_SUPPRESSED,
                "Balance divergences dropped: balances agree",
                count=len(guard.suppressed),
            )
        if guard.synthesized is not None:
            audit.record(
                AuditAction.BALANCE_CLAIM_SYNTHESIZED,
                "Balance divergence added from automatic assessment",
                value=guard.synthesized.estimated_value,
            )
        if guard.flagged_unconfirmed:
            audit.record(
                AuditAction.BALANCE_CLAIM_UNCONFIRMED,
                "Balance divergences kept as unconfirmed: insufficient balance data",
                count=guard.flagged_unconfirmed,
            )

        run.outcome = ParsedResponse(result=result, model=model_name, raw_response=raw)
        return run, audit

    def _apply_subtotal_override(self, run: ReconciliationRun, audit: AuditLogger) -> None:
        if not isinstance(run.outcome, ParsedResponse):
            return
        if run.subtotal_contas_pagar is None:
            return

        title = self.subtotal_resolver.apply(
            run.outcome.result, run.subtotal_contas_pagar, run.supplier
        )
        audit.record(
            AuditAction.SUBTOTAL_OVERRIDE,
            "Accounts-payable subtotal written to first overdue title",
            value=title.estimated_value,
        )

    def _finish(self, run: ReconciliationRun, audit: AuditLogger) -> ReconciliationRun:
        run.audit_log = list(audit.entries)
        run.completed_at = datetime.utcnow()
        logger.info(
            "Reconciliation finished",
            run_id=run.id,
            status=run.status.value,
            rodada=run.rodada.value,
            model_skipped=run.model_skipped,
        )
        return run
