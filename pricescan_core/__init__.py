"""
pricescan_core package: multi-strategy price detection and extraction

Finds monetary amounts in free text and in structured page elements:
locale-aware pattern building, text heuristics, DOM structure analysis,
per-marketplace handlers and an orchestrating pipeline.

Usage:
    from pricescan_core import extract_price_sync

    extract_price_sync("Under $20")
    # PriceMatch(text='Under $20', value='20', currency='$', ...)
"""
from .config import Config, config
from .exceptions import (
    HandlerRegistrationError,
    InvalidSettingsError,
    PatternBuildError,
    PriceScanError,
)
from .models import (
    ExtractionInput,
    ExtractionOptions,
    LocaleFormat,
    PriceMatch,
    PriceSettings,
)
from .locale_format import LocaleFormatResolver, get_locale_format
from .patterns import (
    PatternCache,
    build_match_pattern,
    build_reverse_match_pattern,
    find_prices,
    get_price_info,
    revert_time_annotations,
    select_best_pattern,
)
from .dom import extract_prices_from_element, get_element_context, parse_html
from .sites import SiteHandler, SiteHandlerRegistry, default_registry
from .extraction_registry import ExtractionReport
from .pipeline import ExtractionPipeline, extract_price, extract_price_sync

__all__ = [
    # Core
    "Config",
    "config",
    "PriceScanError",
    "PatternBuildError",
    "InvalidSettingsError",
    "HandlerRegistrationError",
    # Data model
    "ExtractionInput",
    "ExtractionOptions",
    "LocaleFormat",
    "PriceMatch",
    "PriceSettings",
    # Patterns
    "LocaleFormatResolver",
    "get_locale_format",
    "PatternCache",
    "build_match_pattern",
    "build_reverse_match_pattern",
    "find_prices",
    "get_price_info",
    "revert_time_annotations",
    "select_best_pattern",
    # DOM
    "extract_prices_from_element",
    "get_element_context",
    "parse_html",
    # Sites
    "SiteHandler",
    "SiteHandlerRegistry",
    "default_registry",
    # Pipeline
    "ExtractionReport",
    "ExtractionPipeline",
    "extract_price",
    "extract_price_sync",
]
