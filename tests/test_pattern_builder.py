"""
Tests for the locale-aware pattern builder and its cache
"""

import re

import pytest

from pricescan_core.exceptions import PatternBuildError
from pricescan_core.models import PriceSettings
from pricescan_core.patterns.builder import (
    PatternCache,
    build_decimal_string,
    build_match_pattern,
    build_number_pattern,
    build_reverse_match_pattern,
    build_thousands_string,
    find_prices,
    get_price_info,
    normalize_amount,
    revert_time_annotations,
)


class TestSeparatorFragments:

    def test_thousands_styles(self):
        assert build_thousands_string("commas") == ","
        assert build_thousands_string("spacesAndDots") == r"(?:\s|\.)"

    def test_decimal_styles(self):
        assert build_decimal_string("dot") == r"\."
        assert build_decimal_string("comma") == ","

    def test_unknown_style_raises(self):
        with pytest.raises(PatternBuildError):
            build_thousands_string("apostrophes")
        with pytest.raises(PatternBuildError):
            build_decimal_string(None)

    def test_pattern_build_error_is_value_error(self):
        with pytest.raises(ValueError):
            build_number_pattern("commas", "semicolon")

    def test_number_pattern_groups_of_three(self):
        number = re.compile(build_number_pattern("commas", "dot") + "$")
        assert number.match("1,234,567.89")
        assert number.match("12")
        assert not number.match("1,23")


class TestBuildMatchPattern:
    """Canonical examples per locale"""

    def test_us_canonical_example(self):
        pattern = build_match_pattern("$", "USD", "commas", "dot")
        match = pattern.search("Total: $1,234.56 today")
        assert match.group(0) == "$1,234.56"

    def test_eu_canonical_example(self):
        pattern = build_match_pattern("€", "EUR", "spacesAndDots", "comma")
        match = pattern.search("Preis: 1.234,56 €")
        assert match.group(0) == "1.234,56 €"

    def test_eu_space_thousands(self):
        pattern = build_match_pattern("€", "EUR", "spacesAndDots", "comma")
        assert pattern.search("1 234,56€").group(0) == "1 234,56€"

    def test_code_requires_whitespace(self):
        pattern = build_match_pattern(None, "USD", "commas", "dot")
        assert pattern.search("USD 25.00").group(0) == "USD 25.00"
        assert pattern.search("25.00 USD").group(0) == "25.00 USD"

    def test_metacharacter_symbol_is_escaped(self):
        pattern = build_match_pattern("$", None, "commas", "dot")
        assert pattern.search("$5")
        assert not pattern.search("5 dollars")

    def test_requires_symbol_or_code(self):
        with pytest.raises(PatternBuildError):
            build_match_pattern(None, None, "commas", "dot")

    def test_unknown_style(self):
        with pytest.raises(PatternBuildError):
            build_match_pattern("$", "USD", "commas", "comma-ish")


class TestReversePattern:
    """Time annotation round trip"""

    @pytest.mark.parametrize("args,text", [
        (("$", "USD", "commas", "dot"), "$1,234.56"),
        (("$", "USD", "commas", "dot"), "$12"),
        (("€", "EUR", "spacesAndDots", "comma"), "1.234,56 €"),
        (("£", "GBP", "commas", "dot"), "£9.99"),
    ])
    def test_round_trip(self, args, text):
        price = build_match_pattern(*args).search(text).group(0)
        annotated = build_reverse_match_pattern(*args).search(price + " (2h 30m)")
        assert annotated is not None
        assert annotated.group(1) == price

    def test_plain_price_not_matched(self):
        reverse = build_reverse_match_pattern("$", "USD", "commas", "dot")
        assert reverse.search("$12.50") is None


class TestPatternCache:
    """Memoization by full key"""

    def test_same_key_same_object(self):
        cache = PatternCache()
        first = build_match_pattern("$", "USD", "commas", "dot", cache=cache)
        second = build_match_pattern("$", "USD", "commas", "dot", cache=cache)
        assert first is second
        assert cache.stats()["match"] == 1

    def test_distinct_keys(self):
        cache = PatternCache()
        build_match_pattern("$", "USD", "commas", "dot", cache=cache)
        build_match_pattern("$", "USD", "spacesAndDots", "comma", cache=cache)
        build_reverse_match_pattern("$", "USD", "commas", "dot", cache=cache)
        stats = cache.stats()
        assert stats["match"] == 2
        assert stats["reverse"] == 1

    def test_cached_equals_uncached(self):
        cache = PatternCache()
        cached = build_match_pattern("€", "EUR", "spacesAndDots", "comma", cache=cache)
        fresh = build_match_pattern("€", "EUR", "spacesAndDots", "comma")
        assert cached.pattern == fresh.pattern

    def test_clear(self):
        cache = PatternCache()
        build_match_pattern("$", "USD", "commas", "dot", cache=cache)
        cache.clear()
        assert cache.stats()["match"] == 0


class TestFindPrices:

    def test_explicit_settings(self):
        settings = PriceSettings(
            currency_code="EUR",
            currency_symbol="€",
            thousands_separator_style="spacesAndDots",
            decimal_separator_style="comma",
        )
        found = find_prices("1.234,56 €", settings)
        assert found.thousands_style == "spacesAndDots"
        assert found.decimal_style == "comma"
        assert found.locale_format.locale_id == "de-DE"
        assert found.pattern.search("1.234,56 €")

    def test_missing_styles_are_detected(self):
        found = find_prices("Preis 12,50 €", PriceSettings(currency_code="EUR"))
        assert found.currency_symbol == "€"
        assert found.decimal_style == "comma"

    def test_missing_styles_default_to_us(self):
        found = find_prices("costs 12.50", PriceSettings(currency_code="USD"))
        assert found.thousands_style == "commas"
        assert found.decimal_style == "dot"

    def test_invalid_input(self):
        assert find_prices(None, PriceSettings()) is None
        assert find_prices(42, PriceSettings()) is None
        assert find_prices("$5", None) is None


class TestNormalizeAmount:

    @pytest.mark.parametrize("raw,ts,ds,expected", [
        ("$1,234.56", "commas", "dot", "1234.56"),
        ("1.234,56 €", "spacesAndDots", "comma", "1234.56"),
        ("1 234 €", "spacesAndDots", "comma", "1234"),
        ("USD 25", "commas", "dot", "25"),
        ("€ 3,5", "spacesAndDots", "comma", "3.5"),
    ])
    def test_normalizes(self, raw, ts, ds, expected):
        assert normalize_amount(raw, ts, ds) == expected

    def test_no_digits(self):
        assert normalize_amount("$", "commas", "dot") is None


class TestPriceInfo:

    def test_us_price(self):
        info = get_price_info("Only $1,299.99 while stocks last")
        assert info.amount == pytest.approx(1299.99)
        assert info.currency_code == "USD"
        assert info.original == "$1,299.99"

    def test_eu_price(self):
        info = get_price_info("Jetzt 1.234,56 €")
        assert info.amount == pytest.approx(1234.56)
        assert info.currency_code == "EUR"

    def test_pound_symbol_maps_to_gbp(self):
        info = get_price_info("£45.00")
        assert info.currency_code == "GBP"

    def test_nothing_found(self):
        assert get_price_info("no price here") is None
        assert get_price_info(None) is None


class TestRevertTimeAnnotations:

    def test_strips_annotation(self):
        settings = PriceSettings(currency_code="USD", thousands_separator_style="commas", decimal_separator_style="dot")
        text = "Was $12.99 (2h 30m), now $9.99 (1h 45m)"
        assert revert_time_annotations(text, settings) == "Was $12.99, now $9.99"

    def test_leaves_other_text(self):
        assert revert_time_annotations("Meeting (2h 30m)", PriceSettings()) == "Meeting (2h 30m)"

    def test_default_settings(self):
        assert revert_time_annotations("$5 (0h 20m)", None) == "$5"
