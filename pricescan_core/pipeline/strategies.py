"""
Extraction strategies

Default pipeline:      site-specific (1), dom-analyzer (2), pattern-matching (3)
Multi-pass pipeline:   site-specific (1), attribute-extraction (2),
                       structure-analysis (3), pattern-matching (4),
                       contextual-patterns (5)
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional

from ..config import ContextWeights
from ..diagnostics import get_logger
from ..dom.analyzer import (
    assemble_split_components,
    extract_from_attributes,
    extract_nested_currency,
    extract_prices_from_element,
    parse_price,
)
from ..models import ExtractionInput, ExtractionOptions, PriceMatch, PriceSettings
from ..patterns.builder import PatternCache
from ..patterns.matchers import match_contextual_phrases, match_locale_prices, select_best_pattern
from ..sites.registry import SiteHandlerRegistry

logger = get_logger(__name__)

SITE_SPECIFIC = "site-specific"
DOM_ANALYZER = "dom-analyzer"
PATTERN_MATCHING = "pattern-matching"
ATTRIBUTE_EXTRACTION = "attribute-extraction"
STRUCTURE_ANALYSIS = "structure-analysis"
CONTEXTUAL_PATTERNS = "contextual-patterns"

MULTI_PASS_NAMES = (
    SITE_SPECIFIC,
    ATTRIBUTE_EXTRACTION,
    STRUCTURE_ANALYSIS,
    PATTERN_MATCHING,
    CONTEXTUAL_PATTERNS,
)


@dataclass
class ExtractionContext:
    """Per-call resources handed to every strategy"""
    options: ExtractionOptions = field(default_factory=ExtractionOptions)
    settings: Optional[PriceSettings] = None
    cache: PatternCache = field(default_factory=PatternCache)
    weights: Optional[ContextWeights] = None

    @property
    def pattern_context(self) -> Mapping[str, Any]:
        return self.options.pattern_context or {}


class Strategy(ABC):
    """One named extraction algorithm with an explicit priority"""

    name: str = ""
    priority: int = 100

    def __init__(self, priority: Optional[int] = None):
        if priority is not None:
            self.priority = priority

    @abstractmethod
    def can_handle(self, data: ExtractionInput) -> bool:
        pass

    @abstractmethod
    async def extract(self, data: ExtractionInput, context: ExtractionContext) -> List[PriceMatch]:
        pass

    def _tag(self, matches: List[Optional[PriceMatch]]) -> List[PriceMatch]:
        return [m.with_metadata(**{"pass": self.name}) for m in matches if m is not None]

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.name} priority={self.priority}>"


class SiteSpecificStrategy(Strategy):
    """Delegates to the handler registered for the page domain."""

    name = SITE_SPECIFIC
    priority = 1

    def __init__(self, registry: SiteHandlerRegistry, priority: Optional[int] = None):
        super().__init__(priority)
        self.registry = registry

    def can_handle(self, data: ExtractionInput) -> bool:
        return data.element is not None and self.registry.get(data.domain) is not None

    async def extract(self, data: ExtractionInput, context: ExtractionContext) -> List[PriceMatch]:
        handler = self.registry.get(data.domain)
        if handler is None:
            return []

        logger.debug(f"[{self.name}] Using site-specific handler {handler.name}")
        results: List[PriceMatch] = []

        def on_price(text: str):
            match = self.parse_handler_text(text, handler.name)
            if match is not None:
                results.append(match)

        self.registry.process(data.domain, data.element, on_price, context.settings)
        return results

    def parse_handler_text(self, text: str, handler_name: str) -> Optional[PriceMatch]:
        text = (text or "").strip()
        if not text:
            return None

        metadata = {"source": "site-handler", "handler": handler_name, "pass": self.name}
        best = select_best_pattern(text, {"split_components": True})
        if best is not None:
            metadata["pattern"] = best.pattern
            return PriceMatch.build(text, best.value, best.currency, 0.95, self.name, metadata)

        parsed = parse_price(text)
        if parsed is not None:
            return PriceMatch.build(text, parsed[0], parsed[1], 0.95, self.name, metadata)
        return None


class DomAnalyzerStrategy(Strategy):
    """All DOM structure strategies through extract_prices_from_element()."""

    name = DOM_ANALYZER
    priority = 2

    def can_handle(self, data: ExtractionInput) -> bool:
        return data.element is not None

    async def extract(self, data: ExtractionInput, context: ExtractionContext) -> List[PriceMatch]:
        result = extract_prices_from_element(
            data.element,
            allow_multiple_results=context.options.wants_multiple,
            weights=context.weights,
        )
        if not result.prices:
            logger.debug(f"[{self.name}] No prices found in DOM")
            return []
        elapsed = result.metadata.get("extraction_time_ms")
        return [
            m.with_metadata(**{"pass": self.name, "extraction_time_ms": elapsed})
            for m in result.prices
        ]


class PatternMatchingStrategy(Strategy):
    """Best text heuristic plus the settings-driven locale pattern."""

    name = PATTERN_MATCHING
    priority = 3

    def can_handle(self, data: ExtractionInput) -> bool:
        return bool(data.text)

    async def extract(self, data: ExtractionInput, context: ExtractionContext) -> List[PriceMatch]:
        candidates = []
        best = select_best_pattern(data.text, context.pattern_context)
        if best is not None:
            candidates.append(best)
        candidates.extend(match_locale_prices(data.text, context.settings, context.cache))

        if not candidates:
            logger.debug(f"[{self.name}] No pattern match found")
        return self._tag([c.to_price_match(self.name) for c in candidates])


class AttributeExtractionStrategy(Strategy):
    name = ATTRIBUTE_EXTRACTION
    priority = 2

    def can_handle(self, data: ExtractionInput) -> bool:
        return data.element is not None

    async def extract(self, data: ExtractionInput, context: ExtractionContext) -> List[PriceMatch]:
        return self._tag(extract_from_attributes(data.element))


class StructureAnalysisStrategy(Strategy):
    """Split components and nested currency spans."""

    name = STRUCTURE_ANALYSIS
    priority = 3

    def can_handle(self, data: ExtractionInput) -> bool:
        return data.element is not None

    async def extract(self, data: ExtractionInput, context: ExtractionContext) -> List[PriceMatch]:
        found = assemble_split_components(data.element, context.options.wants_multiple)
        found.extend(extract_nested_currency(data.element))
        return self._tag(found)


class ContextualPatternsStrategy(Strategy):
    name = CONTEXTUAL_PATTERNS
    priority = 5

    def can_handle(self, data: ExtractionInput) -> bool:
        return bool(data.text)

    async def extract(self, data: ExtractionInput, context: ExtractionContext) -> List[PriceMatch]:
        return self._tag([m.to_price_match(self.name) for m in match_contextual_phrases(data.text)])


def default_strategies(registry: SiteHandlerRegistry) -> List[Strategy]:
    return [
        SiteSpecificStrategy(registry),
        DomAnalyzerStrategy(),
        PatternMatchingStrategy(),
    ]


def multi_pass_strategies(registry: SiteHandlerRegistry) -> List[Strategy]:
    return [
        SiteSpecificStrategy(registry, priority=1),
        AttributeExtractionStrategy(priority=2),
        StructureAnalysisStrategy(priority=3),
        PatternMatchingStrategy(priority=4),
        ContextualPatternsStrategy(priority=5),
    ]
