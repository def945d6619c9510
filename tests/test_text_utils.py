"""
Tests for text normalization, monetary parsing and identifier extraction.
"""

import pytest

from conciliador.utils import (
    extract_identifiers,
    extract_monetary_values,
    format_brl,
    normalize_text,
    parse_monetary_value,
    round_money,
    significant_tokens,
    split_lines,
)


class TestNormalizeText:
    """Test suite for normalize_text."""

    def test_strips_accents_and_case(self):
        assert normalize_text("Índústria") == "industria"

    def test_idempotent(self):
        samples = ["Índústria", "  COMERCIAL   Rio-Ltda. ", "Ação/Pagto: 1.234,56", ""]
        for sample in samples:
            once = normalize_text(sample)
            assert normalize_text(once) == once

    def test_punctuation_becomes_space(self):
        assert normalize_text("Comercial-Rio/Ltda.") == "comercial rio ltda"

    def test_line_breaks_collapse(self):
        assert normalize_text("Comercial\nRio\r\n  Ltda") == "comercial rio ltda"

    def test_none_and_empty(self):
        assert normalize_text(None) == ""
        assert normalize_text("") == ""


class TestTokensAndLines:
    def test_significant_tokens_drop_short_words(self):
        assert significant_tokens("Rio de Janeiro SA") == ["rio", "janeiro"]

    def test_significant_tokens_custom_length(self):
        assert significant_tokens("Rio de Janeiro SA", min_length=3) == ["janeiro"]

    def test_split_lines_keeps_raw_lines(self):
        assert split_lines("a\r\nb\nc") == ["a", "b", "c"]
        assert split_lines("") == []


class TestMonetary:
    """Test suite for Brazilian-format values."""

    def test_parse_grouped_value(self):
        assert parse_monetary_value("42.151,99") == 42151.99

    def test_parse_small_value(self):
        assert parse_monetary_value("500,00") == 500.0

    def test_parse_invalid(self):
        assert parse_monetary_value("") is None
        assert parse_monetary_value(None) is None
        assert parse_monetary_value("abc") is None

    def test_extract_in_order(self):
        text = "NF 10 de 05/01/2024 valor 1.234,56 saldo 12.300,00 ref 12,5"
        assert extract_monetary_values(text) == ["1.234,56", "12.300,00"]

    def test_extract_empty(self):
        assert extract_monetary_values(None) == []

    def test_round_money_half_up(self):
        assert round_money(1000.025) == 1000.03
        assert round_money(0.125) == 0.13
        assert round_money(2.5) == 2.5

    def test_format_brl(self):
        assert format_brl(1234.5) == "1.234,50"
        assert format_brl(1234567.891) == "1.234.567,89"
        assert format_brl(0) == "0,00"
        assert format_brl(None) == ""


class TestIdentifiers:
    def test_extracts_cnpj_and_cpf(self):
        texts = [
            "Fornecedor CNPJ 12.345.678/0001-90",
            "Sócio CPF 123.456.789-09 e CNPJ 12.345.678/0001-90",
        ]
        found = extract_identifiers(texts)

        assert found["cnpjs"] == ["12.345.678/0001-90"]
        assert found["cpfs"] == ["123.456.789-09"]

    def test_cnpj_fragment_is_not_a_cpf(self):
        found = extract_identifiers(["CNPJ 12.345.678/0001-90"])
        assert found["cpfs"] == []

    def test_keeps_first_seen_order(self):
        found = extract_identifiers([
            "11.111.111/0001-11 22.222.222/0001-22",
            "22.222.222/0001-22 11.111.111/0001-11",
        ])
        assert found["cnpjs"] == ["11.111.111/0001-11", "22.222.222/0001-22"]

    @pytest.mark.parametrize("texts", [[], [""], ["sem identificadores aqui"]])
    def test_nothing_found(self, texts):
        assert extract_identifiers(texts) == {"cnpjs": [], "cpfs": []}
