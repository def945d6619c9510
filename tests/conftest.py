"""Shared fixtures: a consistent set of extracted reports for one supplier."""

import pytest

from conciliador.models import Document, DocumentKey


SUPPLIER = "Comercial Rio Ltda"

RAZAO_TEXT = (
    "Razão de Fornecedores - Período 01/2024\n"
    "05/01/2024 NF 1234 COMERCIAL RIO LTDA 15.000,00\n"
)
BALANCETE_TEXT = (
    "Balancete de Verificação\n"
    "2.1.1.01 Comercial Rio Ltda 15.000,00\n"
)
CONTAS_PAGAR_TEXT = (
    "Fornecedor: Comercial Rio Ltda\n"
    "NF 1234 Comercial Rio Ltda venc. 10/01/2024 15.000,00\n"
    "Sub Total Comercial Rio Ltda 15.000,00\n"
)
PAGAMENTOS_TEXT = "12/01/2024 PIX COMERCIAL RIO LTDA CNPJ 12.345.678/0001-90 2.700,00\n"
NOTAS_FISCAIS_TEXT = "NF 1234 emitente Comercial Rio Ltda sócio CPF 123.456.789-09\n"


def make_document(key, text):
    return Document(
        key=key,
        full_text=text,
        preview=text[:1000],
        original_name=f"{key.value}.pdf",
        kind="pdf",
        length_chars=len(text),
    )


@pytest.fixture
def document_factory():
    return make_document


@pytest.fixture
def supplier():
    return SUPPLIER


@pytest.fixture
def documents():
    """All five reports, balances agreeing at 15.000,00."""
    return {
        DocumentKey.RAZAO: make_document(DocumentKey.RAZAO, RAZAO_TEXT),
        DocumentKey.BALANCETE: make_document(DocumentKey.BALANCETE, BALANCETE_TEXT),
        DocumentKey.CONTAS_PAGAR: make_document(DocumentKey.CONTAS_PAGAR, CONTAS_PAGAR_TEXT),
        DocumentKey.PAGAMENTOS: make_document(DocumentKey.PAGAMENTOS, PAGAMENTOS_TEXT),
        DocumentKey.NOTAS_FISCAIS: make_document(DocumentKey.NOTAS_FISCAIS, NOTAS_FISCAIS_TEXT),
    }
