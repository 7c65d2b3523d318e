"""Tests for shared utility functions."""

from leadbot.utils import is_contact, is_email, is_phone, normalize_input, normalize_phone


class TestNormalizePhone:
    def test_strips_spaces(self):
        assert normalize_phone("999 000 111") == "999000111"

    def test_strips_dashes(self):
        assert normalize_phone("999-000-111") == "999000111"

    def test_strips_parentheses(self):
        assert normalize_phone("(01) 234-5678") == "012345678"

    def test_preserves_leading_plus(self):
        assert normalize_phone("+51 999 000 111") == "+51999000111"

    def test_strips_whitespace(self):
        assert normalize_phone("  51999000111  ") == "51999000111"


class TestNormalizeInput:
    def test_trims_and_casefolds(self):
        assert normalize_input("  MENÚ ") == "menú"

    def test_none_is_empty(self):
        assert normalize_input(None) == ""


class TestContactChecks:
    def test_email(self):
        assert is_email("ana@x.com")
        assert not is_email("ana@x")
        assert not is_email("ana x@y.com")

    def test_phone_digit_bounds(self):
        assert is_phone("+51 999 999 999")
        assert is_phone("1234567")
        assert not is_phone("123456")
        assert not is_phone("1" * 16)

    def test_contact(self):
        assert is_contact("ana@x.com")
        assert is_contact("(01) 234-5678")
        assert not is_contact("mañana por la tarde")
