"""
DOM price analysis - node abstraction, structure strategies, context scoring
"""

from .node import PriceNode, SoupNode, parse_document, parse_html
from .context import ElementContext, get_element_context
from .analyzer import (
    ElementExtraction,
    assemble_split_components,
    extract_contextual_prices,
    extract_from_attributes,
    extract_from_text_content,
    extract_nested_currency,
    extract_prices_from_element,
    parse_price,
)

__all__ = [
    "PriceNode",
    "SoupNode",
    "parse_document",
    "parse_html",
    "ElementContext",
    "get_element_context",
    "ElementExtraction",
    "assemble_split_components",
    "extract_contextual_prices",
    "extract_from_attributes",
    "extract_from_text_content",
    "extract_nested_currency",
    "extract_prices_from_element",
    "parse_price",
]
