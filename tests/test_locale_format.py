"""
Tests for the locale format resolver
"""

import pytest

from pricescan_core.locale_format import (
    DEFAULT_FORMAT,
    LocaleFormatResolver,
    detect_format_from_text,
    format_group_for,
    get_locale_format,
    symbol_for_code,
)


class TestGetLocaleFormat:
    """Symbol/code to separator conventions"""

    def test_symbol_wins_over_code(self):
        fmt = get_locale_format("€", "USD")
        assert fmt.locale_id == "de-DE"
        assert fmt.thousands_separator_style == "spacesAndDots"
        assert fmt.decimal_separator_style == "comma"
        assert fmt.symbols_before_amount is False

    def test_code_only(self):
        assert get_locale_format(None, "JPY").locale_id == "ja-JP"
        assert get_locale_format(None, "pln").locale_id == "de-DE"

    def test_unknown_falls_back_to_us(self):
        assert get_locale_format("¤", "XYZ") is DEFAULT_FORMAT
        assert get_locale_format(None, None) is DEFAULT_FORMAT
        assert DEFAULT_FORMAT.thousands_separator_style == "commas"
        assert DEFAULT_FORMAT.decimal_separator_style == "dot"

    def test_format_group(self):
        assert format_group_for("$", None) == "US"
        assert format_group_for("zł", None) == "EU"
        assert format_group_for(None, "KRW") == "JP"


class TestDetectFormat:
    """Auto-detection from text"""

    @pytest.mark.parametrize("text,locale_id", [
        ("Total: $1,234.56", "en-US"),
        ("1.234,56 €", "de-DE"),
        ("¥12,000", "ja-JP"),
        ("Price 100 CHF", "de-DE"),
    ])
    def test_detects_known_markers(self, text, locale_id):
        assert detect_format_from_text(text).locale_id == locale_id

    def test_no_markers(self):
        assert detect_format_from_text("just some words 123") is None
        assert detect_format_from_text("") is None
        assert detect_format_from_text(None) is None


class TestResolver:
    """Memoizing resolver"""

    def test_memoizes_by_key(self):
        resolver = LocaleFormatResolver()
        first = resolver.resolve("€", "EUR")
        second = resolver.resolve("€", "EUR")
        assert first is second
        assert len(resolver) == 1

        resolver.resolve("$", "USD")
        assert len(resolver) == 2

    def test_symbol_for_code(self):
        assert symbol_for_code("usd") == "$"
        assert symbol_for_code("EUR") == "€"
        assert symbol_for_code("XYZ") is None
        assert symbol_for_code(None) is None
