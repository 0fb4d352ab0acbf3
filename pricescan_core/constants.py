"""
Currency format tables and shared price vocabulary

Format groups describe separator conventions per currency region.
Lookup tables keep insertion order: detection walks them top to bottom
and the first hit wins.
"""

from typing import Dict, List, Tuple


CURRENCY_FORMATS: Dict[str, Dict] = {
    "US": {
        "locale_id": "en-US",
        "thousands": "commas",
        "decimal": "dot",
        "currency_symbols": ("$", "£", "₹"),
        "currency_codes": ("USD", "GBP", "INR"),
        "symbols_before_amount": True,
    },
    "EU": {
        "locale_id": "de-DE",
        "thousands": "spacesAndDots",
        "decimal": "comma",
        "currency_symbols": ("€", "Fr", "kr", "zł"),
        "currency_codes": ("EUR", "CHF", "SEK", "DKK", "NOK", "PLN"),
        "symbols_before_amount": False,
    },
    "JP": {
        "locale_id": "ja-JP",
        "thousands": "commas",
        "decimal": "dot",
        "currency_symbols": ("¥", "₩", "元", "￥", "円"),
        "currency_codes": ("JPY", "KRW", "CNY"),
        "symbols_before_amount": True,
    },
}

DEFAULT_FORMAT_GROUP = "US"

CURRENCY_SYMBOL_TO_FORMAT: Dict[str, str] = {
    "$": "US",
    "£": "US",
    "₹": "US",
    "€": "EU",
    "Fr": "EU",
    "kr": "EU",
    "zł": "EU",
    "¥": "JP",
    "₩": "JP",
    "元": "JP",
    "￥": "JP",
    "円": "JP",
}

CURRENCY_CODE_TO_FORMAT: Dict[str, str] = {
    "USD": "US",
    "GBP": "US",
    "INR": "US",
    "EUR": "EU",
    "CHF": "EU",
    "SEK": "EU",
    "DKK": "EU",
    "NOK": "EU",
    "PLN": "EU",
    "JPY": "JP",
    "KRW": "JP",
    "CNY": "JP",
}

# Currency symbols and their codes
CURRENCY_SYMBOLS: Dict[str, str] = {
    "$": "USD",
    "£": "GBP",
    "₹": "INR",
    "€": "EUR",
    "Fr": "CHF",
    "kr": "SEK",  # Could be SEK, NOK, DKK
    "zł": "PLN",
    "¥": "JPY",
    "￥": "JPY",
    "円": "JPY",
    "₩": "KRW",
    "元": "CNY",
}

# Default display symbol per ISO code
CODE_TO_SYMBOL: Dict[str, str] = {
    "USD": "$",
    "GBP": "£",
    "INR": "₹",
    "EUR": "€",
    "CHF": "Fr",
    "SEK": "kr",
    "DKK": "kr",
    "NOK": "kr",
    "PLN": "zł",
    "JPY": "¥",
    "KRW": "₩",
    "CNY": "元",
}

THOUSANDS_STYLES: Tuple[str, ...] = ("commas", "spacesAndDots")
DECIMAL_STYLES: Tuple[str, ...] = ("dot", "comma")

# Suffix appended by the badge renderer, e.g. "$12.50 (2h 30m)"
TIME_ANNOTATION_PATTERN = r"\s\(\d+h\s\d+m\)"

# Symbol alternation shared by the text matchers
MATCHER_SYMBOLS = "€£¥$"
MATCHER_CODES = ("USD", "EUR", "GBP", "JPY")

# Accessibility-only price text
SCREEN_READER_CLASSES: Tuple[str, ...] = (
    "a-offscreen",
    "sr-only",
    "visually-hidden",
    "screen-reader-text",
)

INLINE_CURRENCY_TAGS: Tuple[str, ...] = ("span", "em", "strong", "b")

PRICE_CONTAINER_PATTERNS: List[str] = [
    r"price",
    r"cost",
    r"amount",
    r"currency",
    r"money",
    r"product-price",
    r"sale-price",
    r"current-price",
    r"pricing",
    r"checkout",
    r"cart",
    r"total",
]

PRICE_CLASS_PATTERNS: List[str] = [
    r"price",
    r"cost",
    r"amount",
    r"currency",
    r"money",
    r"sale",
    r"current",
    r"original",
    r"regular",
]

PRICE_DATA_ATTRIBUTES: Tuple[str, ...] = (
    "data-price",
    "data-amount",
    "data-value",
    "data-cost",
    "data-currency",
    "data-currency-code",
    "data-original-price",
)

SEMANTIC_CONTEXTS: Dict[str, str] = {
    "cart": r"cart|basket|checkout",
    "shipping": r"shipping|delivery|freight",
    "tax": r"tax|vat|gst",
    "comparison": r"compare|vs|versus",
    "product": r"product|item|goods",
}

PRICE_TYPE_PATTERNS: Dict[str, str] = {
    "sale": r"sale|discount|special",
    "original": r"original|regular|was|before",
    "current": r"current|now|today",
    "shipping": r"shipping|delivery|freight",
    "tax": r"tax|vat|gst",
}

CURRENCY_HINTS: Tuple[Tuple[str, str], ...] = (
    (r"usd|dollar", "USD"),
    (r"eur|euro", "EUR"),
    (r"gbp|pound", "GBP"),
)

EBAY_PRICE_CLASSES: Tuple[str, ...] = (
    "s-item__price",
    "x-price-primary",
    "x-bin-price",
    "x-buybox__price-element",
    "display-price",
    "ux-textspans",
    "ux-price-display",
)

EBAY_PRICE_CONTAINERS: Tuple[str, ...] = ("x-price", "x-buybox", "vim-timer", "vi-price")

EBAY_PRICE_ATTRIBUTES: Tuple[str, ...] = ("data-price", "data-item-price")
