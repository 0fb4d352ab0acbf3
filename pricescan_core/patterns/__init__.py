"""
Price patterns - locale pattern builder and text heuristics
"""

from .builder import (
    PatternCache,
    PriceFinderResult,
    PriceInfo,
    build_currency_code_patterns,
    build_decimal_string,
    build_match_pattern,
    build_number_pattern,
    build_reverse_match_pattern,
    build_symbol_after_pattern,
    build_symbol_before_pattern,
    build_thousands_string,
    find_prices,
    get_price_info,
    normalize_amount,
    revert_time_annotations,
)
from .matchers import (
    PatternMatch,
    match_basic_patterns,
    match_contextual_phrases,
    match_large_numbers,
    match_locale_prices,
    match_space_variations,
    match_split_components,
    normalize_price,
    select_best_pattern,
    validate_pattern_match,
)

__all__ = [
    "PatternCache",
    "PriceFinderResult",
    "PriceInfo",
    "build_currency_code_patterns",
    "build_decimal_string",
    "build_match_pattern",
    "build_number_pattern",
    "build_reverse_match_pattern",
    "build_symbol_after_pattern",
    "build_symbol_before_pattern",
    "build_thousands_string",
    "find_prices",
    "get_price_info",
    "normalize_amount",
    "revert_time_annotations",
    "PatternMatch",
    "match_basic_patterns",
    "match_contextual_phrases",
    "match_large_numbers",
    "match_locale_prices",
    "match_space_variations",
    "match_split_components",
    "normalize_price",
    "select_best_pattern",
    "validate_pattern_match",
]
