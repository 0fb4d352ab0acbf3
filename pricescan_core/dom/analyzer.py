"""
DOM Structure Analyzer - price extraction from element structure

Strategies, in the order extract_prices_from_element() runs them:

1. attribute   - aria-label, data-price/data-currency, screen-reader text
2. split       - price pieces spread over classed or adjacent children
3. nested      - currency symbol in its own inline child
4. contextual  - "from $20" / "under €50" phrases in the element text
5. text        - plain text fallback, only when 1-4 found nothing
"""

import re
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..config import ContextWeights, config
from ..constants import INLINE_CURRENCY_TAGS, SCREEN_READER_CLASSES
from ..diagnostics import get_logger, sample
from ..models import PriceMatch, clamp_confidence, is_valid_amount
from ..patterns.matchers import match_contextual_phrases
from .context import get_element_context
from .node import PriceNode

logger = get_logger(__name__)

SYMBOL_BEFORE = re.compile(r"([£$€¥])\s*(\d+(?:\.\d{2})?)")
SYMBOL_AFTER = re.compile(r"(\d+(?:\.\d{2})?)\s*([£$€¥])")
CODE_BEFORE = re.compile(r"(USD|EUR|GBP|JPY)\s+(\d+(?:\.\d{2})?)", re.IGNORECASE)
CODE_AFTER = re.compile(r"(\d+(?:\.\d{2})?)\s+(USD|EUR|GBP|JPY)", re.IGNORECASE)

INLINE_SPLIT = re.compile(r"(\d+)\s*€\s+(\d{2})")
LONE_SYMBOL = re.compile(r"^[£$€¥]$")
PLAIN_AMOUNT = re.compile(r"^\d+(?:\.\d{2})?$")


def parse_price(text) -> Optional[Tuple[str, str]]:
    """
    First (value, currency) in text, thousands commas ignored.

    Tries symbol-before, symbol-after, code-before, code-after.
    """
    if not text or not isinstance(text, str):
        return None
    clean = text.replace(",", "")

    m = SYMBOL_BEFORE.search(clean)
    if m:
        return m.group(2), m.group(1)
    m = SYMBOL_AFTER.search(clean)
    if m:
        return m.group(1), m.group(2)
    m = CODE_BEFORE.search(clean)
    if m:
        return m.group(2), m.group(1).upper()
    m = CODE_AFTER.search(clean)
    if m:
        return m.group(1), m.group(2).upper()
    return None


def detect_currency_from_text(text) -> Optional[str]:
    if not text:
        return None
    for symbol in ("$", "€", "£", "¥"):
        if symbol in text:
            return symbol
    upper = text.upper()
    for code in ("USD", "EUR", "GBP", "JPY"):
        if code in upper:
            return code
    return None


def _match(text: str, value: str, currency: str, confidence: float, strategy: str, source: str) -> Optional[PriceMatch]:
    return PriceMatch.build(
        text=text,
        value=value,
        currency=currency,
        confidence=confidence,
        strategy=strategy,
        metadata={"source": source},
    )


def _keep(*matches: Optional[PriceMatch]) -> List[PriceMatch]:
    return [m for m in matches if m is not None]


def extract_from_attributes(element: PriceNode) -> List[PriceMatch]:
    """aria-label (0.95), data-price (0.9), screen-reader-only children (0.85)."""
    prices: List[PriceMatch] = []

    aria_label = element.get_attribute("aria-label")
    if aria_label:
        parsed = parse_price(aria_label)
        if parsed:
            prices.extend(_keep(_match(aria_label, parsed[0], parsed[1], 0.95, "attribute", "aria-label")))

    data_price = element.get_attribute("data-price")
    if data_price:
        currency = element.get_attribute("data-currency") or detect_currency_from_text(data_price)
        value = data_price.strip().replace(",", "")
        if not is_valid_amount(value):
            parsed = parse_price(data_price)
            value = parsed[0] if parsed else value
        if currency:
            prices.extend(_keep(_match(f"{data_price} {currency}", value, currency, 0.9, "attribute", "data-price")))

    for class_name in SCREEN_READER_CLASSES:
        for hidden in element.find_all_by_class(class_name):
            text = hidden.text_content
            parsed = parse_price(text)
            if parsed:
                prices.extend(_keep(_match(text.strip(), parsed[0], parsed[1], 0.85, "attribute", "offscreen")))

    return prices


def _inline_split(element: PriceNode) -> Optional[PriceMatch]:
    text = element.text
    m = INLINE_SPLIT.search(text) if text else None
    if not m:
        return None
    return _match(text, f"{m.group(1)}.{m.group(2)}", "€", 0.9, "split", "inline-split")


def _classed_split(element: PriceNode) -> Optional[PriceMatch]:
    symbol = element.find_by_class("a-price-symbol")
    whole = element.find_by_class("a-price-whole")
    fraction = element.find_by_class("a-price-fraction")
    if not (symbol and whole and fraction):
        return None

    whole_digits = re.sub(r"\D", "", whole.text_content)
    fraction_digits = re.sub(r"\D", "", fraction.text_content)
    currency = symbol.text
    if not whole_digits or not currency:
        return None
    value = f"{whole_digits}.{fraction_digits}" if fraction_digits else whole_digits
    return _match(f"{currency}{value}", value, currency, 0.85, "split", "classed-split")


def _simple_split(element: PriceNode) -> Optional[PriceMatch]:
    children = element.children
    if len(children) < 2:
        return None

    currency = amount = None
    for child in children:
        text = child.text
        if text and LONE_SYMBOL.match(text):
            currency = text
        elif text and PLAIN_AMOUNT.match(text):
            amount = text

    if currency and amount:
        return _match(f"{currency}{amount}", amount, currency, 0.75, "split", "simple-split")
    return None


def assemble_split_components(element: PriceNode, allow_multiple: bool = False) -> List[PriceMatch]:
    """Reassemble prices whose pieces live in separate children."""
    prices = _keep(_inline_split(element), _classed_split(element), _simple_split(element))

    if allow_multiple:
        for child in element.children:
            text = child.text
            parsed = parse_price(text)
            if parsed:
                prices.extend(_keep(_match(text, parsed[0], parsed[1], 0.7, "split", "child-text")))

    return prices


def _woocommerce_currency(element: PriceNode) -> Optional[PriceMatch]:
    symbol_node = element.find_by_class("woocommerce-Price-currencySymbol")
    if symbol_node is None:
        return None
    currency = symbol_node.text
    parent = symbol_node.parent
    if not currency or parent is None:
        return None

    full_text = parent.text
    amount = full_text.replace(currency, "", 1).strip()
    if amount and PLAIN_AMOUNT.match(amount):
        return _match(full_text, amount, currency, 0.8, "nested", "woocommerce")
    return None


def _inline_currency(element: PriceNode) -> Optional[PriceMatch]:
    for child in element.find_all_by_tag(*INLINE_CURRENCY_TAGS):
        symbol = child.text
        if not symbol or not LONE_SYMBOL.match(symbol):
            continue
        parent_text = element.text
        amount = parent_text.replace(symbol, "", 1).strip()
        if amount and PLAIN_AMOUNT.match(amount):
            return _match(parent_text, amount, symbol, 0.75, "nested", "inline-currency")
    return None


def extract_nested_currency(element: PriceNode) -> List[PriceMatch]:
    """Currency symbol in its own inline child next to the amount text."""
    return _keep(_woocommerce_currency(element), _inline_currency(element))


def extract_contextual_prices(element: PriceNode) -> List[PriceMatch]:
    text = element.text
    if not text:
        return []
    return _keep(*[
        m.to_price_match(source="contextual-phrase") for m in match_contextual_phrases(text)
    ])


def extract_from_text_content(element: PriceNode, allow_multiple: bool = False) -> List[PriceMatch]:
    """Last resort: parse the element text (0.6) and, optionally, each child (0.55)."""
    prices: List[PriceMatch] = []

    text = element.text
    parsed = parse_price(text)
    if parsed:
        prices.extend(_keep(_match(text, parsed[0], parsed[1], 0.6, "text", "text-content")))

    if allow_multiple:
        for child in element.children:
            child_text = child.text
            parsed = parse_price(child_text)
            if parsed:
                prices.extend(_keep(_match(child_text, parsed[0], parsed[1], 0.55, "text", "child-element")))

    return prices


@dataclass
class ElementExtraction:
    """Prices found in one element plus how they were found"""
    prices: List[PriceMatch] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)


def context_boost(context_confidence: float, weights: Optional[ContextWeights] = None) -> float:
    """Proportional boost for matches inside a strongly price-like context."""
    weights = weights or config.context_weights
    threshold = weights.boost_threshold
    if context_confidence <= threshold or threshold >= 1:
        return 0.0
    ratio = (context_confidence - threshold) / (1 - threshold)
    return min(weights.boost_max, ratio * weights.boost_max)


def _run(name: str, element: PriceNode, extractor: Callable[[], List[PriceMatch]]) -> List[PriceMatch]:
    try:
        return extractor()
    except Exception as e:
        logger.warning(f"DOM strategy '{name}' failed on {element!r}: {e} [{sample(element.text)}]")
        return []


def extract_prices_from_element(
    element: Optional[PriceNode],
    allow_multiple_results: bool = False,
    weights: Optional[ContextWeights] = None,
) -> ElementExtraction:
    """
    Run every DOM strategy against one element.

    Returns the single most confident price unless allow_multiple_results
    is set. Matches inside a strongly price-like context get a boost.
    """
    started = time.monotonic()

    if element is None or not isinstance(element, PriceNode):
        return ElementExtraction(metadata={
            "error": "Invalid element provided",
            "strategies_attempted": [],
            "extraction_time_ms": 0.0,
        })

    attempted: List[str] = []
    found: List[PriceMatch] = []

    structural = (
        ("attribute", lambda: extract_from_attributes(element)),
        ("split", lambda: assemble_split_components(element, allow_multiple_results)),
        ("nested", lambda: extract_nested_currency(element)),
        ("contextual", lambda: extract_contextual_prices(element)),
    )
    for name, extractor in structural:
        prices = _run(name, element, extractor)
        if prices:
            found.extend(prices)
            attempted.append(name)

    if not found:
        prices = _run("text", element, lambda: extract_from_text_content(element, allow_multiple_results))
        if prices:
            found.extend(prices)
            attempted.append("text")

    context = get_element_context(element, weights=weights)
    boost = context_boost(context.confidence, weights)
    found = [
        m.with_confidence(clamp_confidence(m.confidence + boost)).with_metadata(
            context_confidence=round(context.confidence, 4)
        )
        for m in found
    ]

    found.sort(key=lambda m: m.confidence, reverse=True)
    prices = found if allow_multiple_results else found[:1]

    return ElementExtraction(
        prices=prices,
        metadata={
            "strategies_attempted": attempted,
            "extraction_time_ms": round((time.monotonic() - started) * 1000, 3),
            "element_type": element.tag_name,
            "has_children": bool(element.children),
            "context_confidence": context.confidence,
            "context_boost": boost,
        },
    )
