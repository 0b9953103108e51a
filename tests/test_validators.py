# -*- coding: utf-8 -*-
"""
Tests for tax id validation
"""
import pytest

from utils.validators import looks_like_tax_id, parse_tax_id


class TestParseTaxId:

    @pytest.mark.parametrize("text", ["7707083893", "500100732259", "  7707083893\n"])
    def test_valid(self, text):
        assert parse_tax_id(text) == text.strip()

    @pytest.mark.parametrize("text", [
        "", None, "12345", "77070838931", "7707 083893", "770708389a",
        "١٢٣٤٥٦٧٨٩٠",  # не-ASCII цифры
        "ИНН 7707083893",
    ])
    def test_invalid(self, text):
        assert parse_tax_id(text) is None


class TestLooksLikeTaxId:

    def test_digits_of_wrong_length(self):
        assert looks_like_tax_id("12345")
        assert looks_like_tax_id("7707-083-893")

    def test_plain_text(self):
        assert not looks_like_tax_id("привет")
        assert not looks_like_tax_id("")
        assert not looks_like_tax_id(None)
