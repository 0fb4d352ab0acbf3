"""
Pattern Builder & Cache - locale-aware price regular expressions

Builds one alternation per (symbol, code, thousands style, decimal style):

    symbol/code before the amount   (only for locales that put symbols first)
    symbol/code after the amount
    code before the amount          (mandatory whitespace)
    code after the amount           (mandatory whitespace)

The reverse pattern recognizes prices already annotated by the badge
renderer, e.g. "$12.50 (2h 30m)", with the bare price in group 1.
"""

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Pattern, Tuple

from ..constants import CURRENCY_CODE_TO_FORMAT, CURRENCY_SYMBOLS, TIME_ANNOTATION_PATTERN
from ..diagnostics import get_logger
from ..exceptions import PatternBuildError
from ..locale_format import (
    DEFAULT_FORMAT,
    LocaleFormatResolver,
    detect_format_from_text,
    get_locale_format,
    symbol_for_code,
)
from ..models import LocaleFormat, PriceSettings

logger = get_logger(__name__)

PatternKey = Tuple[Optional[str], Optional[str], str, str]

_THOUSANDS = {
    "commas": ",",
    "spacesAndDots": r"(?:\s|\.)",
}

_DECIMAL = {
    "dot": r"\.",
    "comma": ",",
}


def build_thousands_string(style: str) -> str:
    """Regex fragment for a thousands separator style."""
    try:
        return _THOUSANDS[style]
    except (KeyError, TypeError):
        raise PatternBuildError(f"Not a recognized thousands separator style: {style!r}") from None


def build_decimal_string(style: str) -> str:
    """Regex fragment for a decimal separator style."""
    try:
        return _DECIMAL[style]
    except (KeyError, TypeError):
        raise PatternBuildError(f"Not a recognized decimal separator style: {style!r}") from None


def build_number_pattern(thousands_style: str, decimal_style: str) -> str:
    """Digit groups of exactly three after each separator, optional 1-2 digit tail."""
    thousands = build_thousands_string(thousands_style)
    decimal = build_decimal_string(decimal_style)
    return rf"\d+(?:{thousands}\d{{3}})*(?:{decimal}\d{{1,2}})?"


def _symbol_alternation(escaped_symbol: str, code: Optional[str]) -> str:
    if escaped_symbol and code:
        return f"({escaped_symbol}|{code})"
    if escaped_symbol:
        return f"({escaped_symbol})"
    if code:
        return f"({code})"
    return ""


def build_symbol_before_pattern(escaped_symbol: str, code: Optional[str], number_pattern: str) -> str:
    symbol_part = _symbol_alternation(escaped_symbol, code)
    return rf"{symbol_part}\s?{number_pattern}" if symbol_part else ""


def build_symbol_after_pattern(escaped_symbol: str, code: Optional[str], number_pattern: str) -> str:
    symbol_part = _symbol_alternation(escaped_symbol, code)
    return rf"{number_pattern}\s?{symbol_part}" if symbol_part else ""


def build_currency_code_patterns(code: Optional[str], number_pattern: str) -> List[str]:
    """Codes are never glued to the amount, so whitespace is mandatory."""
    if not code:
        return []
    return [
        rf"{code}\s{number_pattern}",
        rf"{number_pattern}\s{code}",
    ]


def compose_match_source(
    symbol: Optional[str],
    code: Optional[str],
    thousands_style: str,
    decimal_style: str,
    locale_format: LocaleFormat,
) -> str:
    escaped_symbol = re.escape(symbol) if symbol else ""
    code = re.escape(code) if code else None
    number_pattern = build_number_pattern(thousands_style, decimal_style)

    patterns: List[str] = []
    if locale_format.symbols_before_amount:
        before = build_symbol_before_pattern(escaped_symbol, code, number_pattern)
        if before:
            patterns.append(before)

    after = build_symbol_after_pattern(escaped_symbol, code, number_pattern)
    if after and after not in patterns:
        patterns.append(after)

    patterns.extend(build_currency_code_patterns(code, number_pattern))

    if not patterns:
        raise PatternBuildError("A currency symbol or code is required to build a price pattern")
    return "|".join(patterns)


def compose_reverse_source(base_source: str) -> str:
    return f"({base_source}){TIME_ANNOTATION_PATTERN}"


class PatternCache:
    """
    Memo tables for compiled price patterns.

    Keys are the full (symbol, code, thousands style, decimal style) tuple,
    so entries never need invalidation.
    """

    def __init__(self, resolver: Optional[LocaleFormatResolver] = None):
        self.resolver = resolver or LocaleFormatResolver()
        self._match: Dict[PatternKey, Pattern] = {}
        self._reverse: Dict[PatternKey, Pattern] = {}

    def match_pattern(
        self,
        symbol: Optional[str],
        code: Optional[str],
        thousands_style: str,
        decimal_style: str,
    ) -> Pattern:
        key = (symbol, code, thousands_style, decimal_style)
        pattern = self._match.get(key)
        if pattern is None:
            locale_format = self.resolver.resolve(symbol, code)
            source = compose_match_source(symbol, code, thousands_style, decimal_style, locale_format)
            pattern = re.compile(source)
            self._match[key] = pattern
            logger.debug(f"Compiled price pattern for {key}")
        return pattern

    def reverse_pattern(
        self,
        symbol: Optional[str],
        code: Optional[str],
        thousands_style: str,
        decimal_style: str,
    ) -> Pattern:
        key = (symbol, code, thousands_style, decimal_style)
        pattern = self._reverse.get(key)
        if pattern is None:
            base = self.match_pattern(symbol, code, thousands_style, decimal_style)
            pattern = re.compile(compose_reverse_source(base.pattern))
            self._reverse[key] = pattern
        return pattern

    def stats(self) -> Dict[str, int]:
        return {
            "match": len(self._match),
            "reverse": len(self._reverse),
            "locale": len(self.resolver),
        }

    def clear(self) -> None:
        self._match.clear()
        self._reverse.clear()


def build_match_pattern(
    symbol: Optional[str],
    code: Optional[str],
    thousands_style: str,
    decimal_style: str,
    cache: Optional[PatternCache] = None,
) -> Pattern:
    """
    Compile the price pattern for a currency and separator convention.

    With a cache the compiled pattern is memoized by the 4-tuple key.

    Raises:
        PatternBuildError: unknown separator style, or neither symbol nor code
    """
    if cache is not None:
        return cache.match_pattern(symbol, code, thousands_style, decimal_style)
    source = compose_match_source(
        symbol, code, thousands_style, decimal_style, get_locale_format(symbol, code)
    )
    return re.compile(source)


def build_reverse_match_pattern(
    symbol: Optional[str],
    code: Optional[str],
    thousands_style: str,
    decimal_style: str,
    cache: Optional[PatternCache] = None,
) -> Pattern:
    """Price pattern followed by the time annotation; group 1 is the price."""
    if cache is not None:
        return cache.reverse_pattern(symbol, code, thousands_style, decimal_style)
    base = build_match_pattern(symbol, code, thousands_style, decimal_style)
    return re.compile(compose_reverse_source(base.pattern))


@dataclass
class PriceFinderResult:
    """Everything needed to find and normalize prices in one locale"""
    pattern: Pattern
    thousands: Pattern
    decimal: Pattern
    locale_format: LocaleFormat
    thousands_style: str
    decimal_style: str
    currency_symbol: Optional[str]
    currency_code: Optional[str]


def resolve_separator_styles(text: str, settings: PriceSettings) -> Tuple[str, str, bool]:
    """
    Fill missing separator styles.

    Returns (thousands, decimal, explicit) where explicit is False when
    any style came from auto-detection or the US default.
    """
    thousands = settings.thousands_separator_style
    decimal = settings.decimal_separator_style
    if thousands and decimal:
        return thousands, decimal, True

    detected = detect_format_from_text(text) or DEFAULT_FORMAT
    return (
        thousands or detected.thousands_separator_style,
        decimal or detected.decimal_separator_style,
        False,
    )


def find_prices(
    text,
    settings: Optional[PriceSettings],
    reverse: bool = False,
    cache: Optional[PatternCache] = None,
) -> Optional[PriceFinderResult]:
    """Prepare the locale pattern for text under the given settings."""
    if not text or not isinstance(text, str) or settings is None:
        return None

    thousands_style, decimal_style, _ = resolve_separator_styles(text, settings)
    symbol = settings.currency_symbol or symbol_for_code(settings.currency_code)
    code = settings.currency_code

    if reverse:
        pattern = build_reverse_match_pattern(symbol, code, thousands_style, decimal_style, cache)
    else:
        pattern = build_match_pattern(symbol, code, thousands_style, decimal_style, cache)

    resolver = cache.resolver if cache is not None else None
    locale_format = resolver.resolve(symbol, code) if resolver else get_locale_format(symbol, code)

    return PriceFinderResult(
        pattern=pattern,
        thousands=re.compile(build_thousands_string(thousands_style)),
        decimal=re.compile(build_decimal_string(decimal_style)),
        locale_format=locale_format,
        thousands_style=thousands_style,
        decimal_style=decimal_style,
        currency_symbol=symbol,
        currency_code=code,
    )


_NUMERIC_RUN = re.compile(r"\d(?:[\d.,\s]*\d)?")


def normalize_amount(raw: str, thousands_style: str, decimal_style: str) -> Optional[str]:
    """
    Reduce a locale-formatted amount to a plain dot-decimal string.

    "1.234,56" (spacesAndDots/comma) -> "1234.56"
    "1,234.56" (commas/dot)          -> "1234.56"
    """
    if not raw or not isinstance(raw, str):
        return None
    build_thousands_string(thousands_style)
    build_decimal_string(decimal_style)
    decimal_char = "," if decimal_style == "comma" else "."

    run = _NUMERIC_RUN.search(raw)
    if not run:
        return None
    digits = run.group(0)

    head, sep, tail = digits.rpartition(decimal_char)
    if sep and tail.isdigit() and 1 <= len(tail) <= 2:
        whole = re.sub(r"\D", "", head)
        return f"{whole or '0'}.{tail}"
    return re.sub(r"\D", "", digits)


@dataclass
class PriceInfo:
    """First locale price found in a piece of text"""
    amount: float
    currency_code: str
    original: str
    settings: PriceSettings


def _currency_code_in(matched: str, fallback: str) -> str:
    for code in CURRENCY_CODE_TO_FORMAT:
        if code in matched:
            return code
    for symbol, code in CURRENCY_SYMBOLS.items():
        if symbol in matched:
            return code
    return fallback


def get_price_info(
    text,
    settings: Optional[PriceSettings] = None,
    cache: Optional[PatternCache] = None,
) -> Optional[PriceInfo]:
    """Locate the first price in text and reduce it to amount + ISO code."""
    if not text or not isinstance(text, str):
        return None

    if settings is None:
        detected = detect_format_from_text(text) or DEFAULT_FORMAT
        settings = PriceSettings(
            currency_code=detected.currency_codes[0],
            currency_symbol=_first_symbol_in(text, detected) or detected.currency_symbols[0],
            thousands_separator_style=detected.thousands_separator_style,
            decimal_separator_style=detected.decimal_separator_style,
        )

    found = find_prices(text, settings, cache=cache)
    if found is None:
        return None
    match = found.pattern.search(text)
    if not match:
        return None

    original = match.group(0)
    normalized = normalize_amount(original, found.thousands_style, found.decimal_style)
    if normalized is None:
        return None

    return PriceInfo(
        amount=float(normalized),
        currency_code=_currency_code_in(original, settings.currency_code),
        original=original,
        settings=settings,
    )


def _first_symbol_in(text: str, locale_format: LocaleFormat) -> Optional[str]:
    for symbol in locale_format.currency_symbols:
        if symbol in text:
            return symbol
    return None


def revert_time_annotations(
    text,
    settings: Optional[PriceSettings],
    cache: Optional[PatternCache] = None,
) -> str:
    """Strip " (Nh Nm)" annotations that follow a recognized price."""
    if not text or not isinstance(text, str):
        return text
    found = find_prices(text, settings or PriceSettings(), reverse=True, cache=cache)
    if found is None:
        return text
    return found.pattern.sub(lambda m: m.group(1), text)
