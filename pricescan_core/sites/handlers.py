"""
Built-in marketplace handlers

Each handler chains its own fallbacks and stops at the first one that
yields a price:

    cdiscount  split "449€ 00" text, split children, superscript spans,
               DOM analyzer, raw text with €
    gearbest   .currency + .value spans, WooCommerce <bdi>, DOM analyzer,
               raw text with $ / US$
    amazon     split-price state machine, screen-reader text
    ebay       price-like text fragments inside known price widgets
"""

import re
from typing import List, Optional

from ..constants import (
    EBAY_PRICE_ATTRIBUTES,
    EBAY_PRICE_CLASSES,
    EBAY_PRICE_CONTAINERS,
    SCREEN_READER_CLASSES,
)
from ..diagnostics import get_logger, sample
from ..dom.analyzer import extract_prices_from_element
from ..dom.node import PriceNode
from ..models import PriceSettings
from ..patterns.matchers import match_split_components
from .registry import PriceCallback, SiteHandler, SiteHandlerRegistry
from .split_state import SplitPart, SplitPriceTracker, SplitState

logger = get_logger(__name__)


def _has_any_class(node: PriceNode, names) -> bool:
    return any(node.has_class(name) for name in names)


def _contains_any_class(node: PriceNode, names) -> bool:
    return any(node.find_by_class(name) is not None for name in names)


def _emit_analyzer_prices(node: PriceNode, callback: PriceCallback) -> bool:
    result = extract_prices_from_element(node)
    for price in result.prices:
        callback(price.text)
    return bool(result.prices)


class CdiscountHandler(SiteHandler):
    name = "cdiscount"
    domains = ("cdiscount.com", "cdiscount.fr")

    TARGET_CLASSES = ("price", "fpPrice", "c-price")
    SPLIT_TEXT = re.compile(r"(\d+)€\s+(\d{2})")

    def is_target_node(self, node: PriceNode) -> bool:
        if node is None:
            return False
        return _has_any_class(node, self.TARGET_CLASSES) or _contains_any_class(node, self.TARGET_CLASSES)

    def process(self, node: PriceNode, callback: PriceCallback, settings: Optional[PriceSettings] = None) -> bool:
        if not self.is_target_node(node):
            return False

        for extractor in (self.extract_split_format, self.extract_superscript_format):
            text = extractor(node)
            if text:
                callback(text)
                return True

        if _emit_analyzer_prices(node, callback):
            return True

        text = node.text
        if text and re.search(r"\d", text) and "€" in text:
            callback(text)
            return True
        return False

    def extract_split_format(self, node: PriceNode) -> Optional[str]:
        m = self.SPLIT_TEXT.search(node.text_content or "")
        if m:
            return f"{m.group(1)}€ {m.group(2)}"

        children = node.children
        if len(children) >= 2:
            matches = match_split_components([child.text for child in children])
            if matches:
                return matches[0].reconstructed
        return None

    def extract_superscript_format(self, node: PriceNode) -> Optional[str]:
        """<span>129</span><span>€</span><span>95</span> -> "129€ 95"."""
        parts = [span.text for span in node.find_all_by_tag("span")]
        if len(parts) != 3:
            return None
        whole, symbol, cents = parts
        if re.match(r"^\d+$", whole) and re.match(r"^[€£$]$", symbol) and re.match(r"^\d{2}$", cents):
            return f"{whole}{symbol} {cents}"
        return None


class GearbestHandler(SiteHandler):
    name = "gearbest"
    domains = ("gearbest.com", "gearbest.ma")

    TARGET_CLASSES = ("goods-price", "my-shop-price", "woocommerce-Price-amount")
    CONTAINED_CLASSES = ("goods-price", "woocommerce-Price-amount")

    def is_target_node(self, node: PriceNode) -> bool:
        if node is None:
            return False
        return _has_any_class(node, self.TARGET_CLASSES) or _contains_any_class(node, self.CONTAINED_CLASSES)

    def process(self, node: PriceNode, callback: PriceCallback, settings: Optional[PriceSettings] = None) -> bool:
        if not self.is_target_node(node):
            return False

        for extractor in (self.extract_nested_currency, self.extract_woocommerce_format):
            text = extractor(node)
            if text:
                callback(text)
                return True

        if _emit_analyzer_prices(node, callback):
            return True

        text = node.text
        if text and re.search(r"\d", text) and "$" in text:
            callback(text)
            return True
        return False

    def extract_nested_currency(self, node: PriceNode) -> Optional[str]:
        currency = node.find_by_class("currency")
        value = node.find_by_class("value")
        if currency is not None and value is not None:
            return f"{currency.text}{value.text}"
        return None

    def extract_woocommerce_format(self, node: PriceNode) -> Optional[str]:
        bdi = next(iter(node.find_all_by_tag("bdi")), None)
        if bdi is not None and re.search(r"\d", bdi.text):
            return bdi.text
        return None


class AmazonHandler(SiteHandler):
    """
    Amazon renders prices as currency / whole / fraction siblings.

    A fresh SplitPriceTracker walks the subtree for every call; a
    fraction consumed right after the whole part is appended to the
    reconstructed price before it is reported.
    """

    name = "amazon"
    domains = ("amazon.com", "amazon.co.uk", "amazon.de", "amazon.fr")

    PART_CLASSES = {
        "sx-price-currency": SplitPart.CURRENCY,
        "a-price-symbol": SplitPart.CURRENCY,
        "sx-price-whole": SplitPart.WHOLE,
        "a-price-whole": SplitPart.WHOLE,
        "sx-price-fractional": SplitPart.FRACTIONAL,
        "a-price-fraction": SplitPart.FRACTIONAL,
    }

    def part_of(self, node: PriceNode) -> SplitPart:
        for cls in node.class_list:
            part = self.PART_CLASSES.get(cls)
            if part is not None:
                return part
        return SplitPart.OTHER

    def is_target_node(self, node: PriceNode) -> bool:
        if node is None:
            return False
        if self.part_of(node) is not SplitPart.OTHER:
            return True
        return any(self.part_of(d) is not SplitPart.OTHER for d in node.descendants())

    def process(self, node: PriceNode, callback: PriceCallback, settings: Optional[PriceSettings] = None) -> bool:
        if not self.is_target_node(node):
            return False

        prices = self.collect_split_prices(node)
        if not prices:
            prices = self.collect_screen_reader_prices(node)
        for text in prices:
            callback(text)
        return bool(prices)

    def collect_split_prices(self, node: PriceNode) -> List[str]:
        tracker = SplitPriceTracker(variant=self.name)
        prices: List[str] = []
        self._walk(node, tracker, prices)
        return prices

    def _walk(self, node: PriceNode, tracker: SplitPriceTracker, prices: List[str]) -> None:
        part = self.part_of(node)
        if part is SplitPart.OTHER:
            tracker.feed(SplitPart.OTHER, "", prices.append)
            for child in node.children:
                self._walk(child, tracker, prices)
            return

        completed = tracker.state is SplitState.COMBINED
        fragment = node.text
        consumed = tracker.feed(part, fragment, prices.append)
        if part is SplitPart.FRACTIONAL and consumed and completed and prices:
            digits = re.sub(r"\D", "", fragment)
            if digits:
                prices[-1] = f"{prices[-1]}.{digits}"

    def collect_screen_reader_prices(self, node: PriceNode) -> List[str]:
        for class_name in SCREEN_READER_CLASSES:
            for hidden in node.find_all_by_class(class_name):
                text = hidden.text
                if text and re.search(r"\d", text):
                    return [text]
        return []


class EbayHandler(SiteHandler):
    name = "ebay"
    domains = ("ebay.com", "ebay.co.uk", "ebay.de", "ebay.fr")

    CURRENCY_CHARS = re.compile(r"[$€£¥₹₽¢]")
    NUMBER = re.compile(r"\d+(\.\d+)?")

    def _looks_like_price(self, text: str) -> bool:
        return bool(self.NUMBER.search(text)) and (bool(self.CURRENCY_CHARS.search(text)) or len(text) < 20)

    def is_target_node(self, node: PriceNode) -> bool:
        if node is None:
            return False
        if _has_any_class(node, EBAY_PRICE_CLASSES):
            return True
        if any(node.has_attribute(attr) for attr in EBAY_PRICE_ATTRIBUTES):
            return True
        for container in EBAY_PRICE_CONTAINERS:
            if node.closest_with_class(container) is not None:
                return self._looks_like_price(node.text_content or "")
        return False

    def process(self, node: PriceNode, callback: PriceCallback, settings: Optional[PriceSettings] = None) -> bool:
        if not self.is_target_node(node):
            return False

        debug = bool(settings and settings.debug_mode)
        if debug:
            logger.info(f"eBay price element detected: {sample(node.text)}")

        candidates = [
            text.strip() for text in node.text_fragments()
            if text.strip() and self._looks_like_price(text)
        ]
        if debug:
            logger.info(f"Found {len(candidates)} potential price text nodes in eBay element")

        processed = False
        for text in candidates:
            try:
                callback(text)
                processed = True
            except Exception as e:
                logger.error(f"Error processing eBay price text '{sample(text)}': {e}")
        return processed


def builtin_handlers() -> List[SiteHandler]:
    return [CdiscountHandler(), GearbestHandler(), AmazonHandler(), EbayHandler()]


def default_registry() -> SiteHandlerRegistry:
    """Registry preloaded with the built-in marketplace handlers."""
    return SiteHandlerRegistry(builtin_handlers())
