"""
Element context scoring

Estimates how likely an element is to hold a price from its surroundings:
ancestor containers, its own classes and data attributes, aria labels,
semantic container names and price-classed siblings.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..config import ContextWeights, config
from ..constants import (
    CURRENCY_HINTS,
    PRICE_CLASS_PATTERNS,
    PRICE_CONTAINER_PATTERNS,
    PRICE_DATA_ATTRIBUTES,
    PRICE_TYPE_PATTERNS,
    SEMANTIC_CONTEXTS,
)
from ..models import clamp_confidence
from .node import PriceNode

_CONTAINER_RES = [re.compile(p, re.IGNORECASE) for p in PRICE_CONTAINER_PATTERNS]
_CLASS_RES = [re.compile(p, re.IGNORECASE) for p in PRICE_CLASS_PATTERNS]
_SEMANTIC_RES = {name: re.compile(p, re.IGNORECASE) for name, p in SEMANTIC_CONTEXTS.items()}
_PRICE_TYPE_RES = {name: re.compile(p, re.IGNORECASE) for name, p in PRICE_TYPE_PATTERNS.items()}
_CURRENCY_HINT_RES = [(re.compile(p, re.IGNORECASE), code) for p, code in CURRENCY_HINTS]


@dataclass
class PriceIndicators:
    has_parent_container: bool = False
    has_price_classes: bool = False
    has_data_attributes: bool = False
    has_semantic_context: bool = False

    def count(self) -> int:
        return sum([
            self.has_parent_container,
            self.has_price_classes,
            self.has_data_attributes,
            self.has_semantic_context,
        ])


@dataclass
class Hierarchy:
    price_container: Optional[PriceNode] = None
    depth: int = 0
    sibling_count: int = 0


@dataclass
class AttributeSignals:
    price_related: List[str] = field(default_factory=list)
    data_attributes: List[str] = field(default_factory=list)
    aria_labels: List[str] = field(default_factory=list)


@dataclass
class Semantics:
    container_type: Optional[str] = None
    price_type: Optional[str] = None
    currency_hint: Optional[str] = None


@dataclass
class ElementContext:
    """Composite context score for one element"""
    element: Optional[PriceNode] = None
    confidence: float = 0.0
    price_indicators: PriceIndicators = field(default_factory=PriceIndicators)
    hierarchy: Hierarchy = field(default_factory=Hierarchy)
    attributes: AttributeSignals = field(default_factory=AttributeSignals)
    semantics: Semantics = field(default_factory=Semantics)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "confidence": round(self.confidence, 4),
            "indicators": {
                "has_parent_container": self.price_indicators.has_parent_container,
                "has_price_classes": self.price_indicators.has_price_classes,
                "has_data_attributes": self.price_indicators.has_data_attributes,
                "has_semantic_context": self.price_indicators.has_semantic_context,
            },
            "container_depth": self.hierarchy.depth,
            "sibling_count": self.hierarchy.sibling_count,
            "container_type": self.semantics.container_type,
            "price_type": self.semantics.price_type,
            "currency_hint": self.semantics.currency_hint,
        }


def _class_and_id(node: PriceNode) -> str:
    return f"{node.class_name} {node.element_id}".lower()


def is_price_container(node: Optional[PriceNode]) -> bool:
    if node is None:
        return False
    combined = _class_and_id(node)
    return any(p.search(combined) for p in _CONTAINER_RES)


def is_price_related_element(node: Optional[PriceNode]) -> bool:
    if node is None:
        return False
    class_name = node.class_name
    return any(p.search(class_name) for p in _CLASS_RES)


def analyze_hierarchy(element: PriceNode, max_depth: int) -> Hierarchy:
    hierarchy = Hierarchy()

    current = element.parent
    depth = 1
    while current is not None and depth <= max_depth:
        if is_price_container(current):
            hierarchy.price_container = current
            hierarchy.depth = depth
            break
        current = current.parent
        depth += 1

    parent = element.parent
    if parent is not None:
        hierarchy.sibling_count = sum(
            1 for sibling in parent.children
            if sibling != element and is_price_related_element(sibling)
        )
    return hierarchy


def analyze_attributes(element: PriceNode) -> AttributeSignals:
    signals = AttributeSignals()
    signals.price_related = [
        cls for cls in element.class_list if any(p.search(cls) for p in _CLASS_RES)
    ]
    signals.data_attributes = [
        name for name in element.attribute_names if name in PRICE_DATA_ATTRIBUTES
    ]
    aria = element.get_attribute("aria-label")
    if aria:
        signals.aria_labels.append(aria)
    return signals


def analyze_semantics(element: PriceNode) -> Semantics:
    """Nearest semantic container and currency hint, stopping at <body>."""
    semantics = Semantics()

    current: Optional[PriceNode] = element
    while current is not None and current.tag_name != "body":
        combined = _class_and_id(current)

        if semantics.container_type is None:
            for name, pattern in _SEMANTIC_RES.items():
                if pattern.search(combined):
                    semantics.container_type = name
                    break

        if semantics.currency_hint is None:
            for pattern, code in _CURRENCY_HINT_RES:
                if pattern.search(combined):
                    semantics.currency_hint = code
                    break

        if semantics.container_type and semantics.currency_hint:
            break
        current = current.parent

    class_name = element.class_name
    for name, pattern in _PRICE_TYPE_RES.items():
        if pattern.search(class_name):
            semantics.price_type = name
            break

    return semantics


def calculate_confidence(context: ElementContext, weights: ContextWeights) -> float:
    indicators = context.price_indicators
    score = 0.0

    if indicators.has_parent_container:
        score += weights.parent_container
    if indicators.has_price_classes:
        score += weights.price_classes
    if indicators.has_data_attributes:
        score += weights.data_attributes
    if indicators.has_semantic_context:
        score += weights.semantic_context

    if context.attributes.aria_labels:
        score += weights.aria_label

    count = indicators.count()
    if count >= 3:
        score += weights.indicators_three
    elif count >= 2:
        score += weights.indicators_two
    elif count >= 1:
        score += weights.indicators_one

    hierarchy = context.hierarchy
    if hierarchy.price_container is not None and hierarchy.depth <= weights.shallow_depth:
        score += weights.shallow_container

    if hierarchy.sibling_count > 0:
        score += min(weights.sibling_cap, hierarchy.sibling_count * weights.sibling_step)

    return clamp_confidence(score)


def get_element_context(
    element: Optional[PriceNode],
    max_depth: Optional[int] = None,
    weights: Optional[ContextWeights] = None,
) -> ElementContext:
    """
    Score the price-likelihood of an element's surroundings.

    Returns an empty context (confidence 0) for a missing element.
    """
    if element is None or not isinstance(element, PriceNode):
        return ElementContext()

    max_depth = max_depth or config.context_max_depth
    weights = weights or config.context_weights

    hierarchy = analyze_hierarchy(element, max_depth)
    attributes = analyze_attributes(element)
    semantics = analyze_semantics(element)

    context = ElementContext(
        element=element,
        hierarchy=hierarchy,
        attributes=attributes,
        semantics=semantics,
        price_indicators=PriceIndicators(
            has_parent_container=hierarchy.price_container is not None,
            has_price_classes=bool(attributes.price_related),
            has_data_attributes=bool(attributes.data_attributes),
            has_semantic_context=semantics.container_type is not None or semantics.price_type is not None,
        ),
    )
    context.confidence = calculate_confidence(context, weights)
    return context
