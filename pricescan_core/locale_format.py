"""
Locale Format Resolver - currency symbol/code to separator conventions

Symbols win over codes because they are visually unambiguous on a page.
Anything unknown resolves to the US-style format.
"""

from typing import Dict, Optional, Tuple

from .constants import (
    CODE_TO_SYMBOL,
    CURRENCY_CODE_TO_FORMAT,
    CURRENCY_FORMATS,
    CURRENCY_SYMBOL_TO_FORMAT,
    DEFAULT_FORMAT_GROUP,
)
from .models import LocaleFormat


FORMATS: Dict[str, LocaleFormat] = {
    group: LocaleFormat.from_table(entry) for group, entry in CURRENCY_FORMATS.items()
}

DEFAULT_FORMAT = FORMATS[DEFAULT_FORMAT_GROUP]


def format_group_for(symbol: Optional[str], code: Optional[str]) -> str:
    group = CURRENCY_SYMBOL_TO_FORMAT.get(symbol) if symbol else None
    if not group and code:
        group = CURRENCY_CODE_TO_FORMAT.get(code.upper())
    return group or DEFAULT_FORMAT_GROUP


def get_locale_format(symbol: Optional[str], code: Optional[str]) -> LocaleFormat:
    """Resolve the locale format for a (symbol, code) pair. Never raises."""
    return FORMATS[format_group_for(symbol, code)]


def detect_format_from_text(text) -> Optional[LocaleFormat]:
    """
    Guess the locale format from the currency markers present in text.

    Known symbols are scanned first in table order, then known codes.
    """
    if not text or not isinstance(text, str):
        return None

    for symbol, group in CURRENCY_SYMBOL_TO_FORMAT.items():
        if symbol in text:
            return FORMATS[group]

    for code, group in CURRENCY_CODE_TO_FORMAT.items():
        if code in text:
            return FORMATS[group]

    return None


def symbol_for_code(code: Optional[str]) -> Optional[str]:
    if not code:
        return None
    return CODE_TO_SYMBOL.get(code.upper())


class LocaleFormatResolver:
    """
    Memoizing resolver injected into the pattern cache and pipeline.

    Entries are a pure function of their key; a duplicate computation
    stores an identical value.
    """

    def __init__(self):
        self._cache: Dict[Tuple[Optional[str], Optional[str]], LocaleFormat] = {}

    def resolve(self, symbol: Optional[str], code: Optional[str]) -> LocaleFormat:
        key = (symbol, code)
        fmt = self._cache.get(key)
        if fmt is None:
            fmt = get_locale_format(symbol, code)
            self._cache[key] = fmt
        return fmt

    def detect(self, text) -> Optional[LocaleFormat]:
        return detect_format_from_text(text)

    def __len__(self) -> int:
        return len(self._cache)
