"""
Model request assembly and response parsing.
"""

import json
import re
from typing import Any, Dict, Optional

import structlog

from ..models import (
    BalanceReport,
    Document,
    DocumentKey,
    ReconciliationResult,
)

logger = structlog.get_logger()

_CODE_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL | re.IGNORECASE)


def summarize_document(document: Document, excerpt_max_chars: int) -> Dict[str, Any]:
    return {
        "nomeOriginal": document.original_name,
        "tipo": document.kind,
        "tamanhoTexto": document.length_chars,
        "preview": document.preview or None,
        "trechoConteudo": document.excerpt(excerpt_max_chars),
    }


def build_model_request(
    supplier: str,
    documents: Dict[DocumentKey, Document],
    report: BalanceReport,
    subtotal: Optional[float],
    excerpt_max_chars: int = 8000,
) -> Dict[str, Any]:
    """Payload embedded in the user prompt: previews, excerpts and indicators."""
    payload: Dict[str, Any] = {
        "fornecedor": supplier,
        "relatorios": {
            key.value: summarize_document(doc, excerpt_max_chars)
            for key, doc in documents.items()
        },
    }
    payload.update(report.to_payload())
    payload["subtotalContasPagar"] = subtotal
    return payload


def parse_model_response(raw: str) -> Optional[ReconciliationResult]:
    """
    Parse the model's answer into a result.

    A single surrounding markdown code fence is tolerated; anything that is
    not a JSON object, or cannot be read into the result shape, yields None.
    """
    text = (raw or "").strip()
    fenced = _CODE_FENCE.match(text)
    if fenced:
        text = fenced.group(1)

    try:
        data = json.loads(text)
    except (ValueError, RecursionError):
        return None

    if not isinstance(data, dict):
        return None

    try:
        return ReconciliationResult.from_dict(data)
    except (ValueError, TypeError, OverflowError, RecursionError) as e:
        logger.warning("Model JSON does not fit the result shape", error=repr(e))
        return None
