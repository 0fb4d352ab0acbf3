"""
Tests for element context scoring
"""

import pytest

from pricescan_core.config import ContextWeights
from pricescan_core.dom.context import (
    get_element_context,
    is_price_container,
    is_price_related_element,
)
from pricescan_core.dom.node import parse_document, parse_html


class TestContainerDetection:

    def test_container_by_class_or_id(self):
        assert is_price_container(parse_html('<div class="cart-total"></div>'))
        assert is_price_container(parse_html('<div id="pricing"></div>'))
        assert not is_price_container(parse_html('<div class="header"></div>'))
        assert not is_price_container(None)

    def test_price_related_classes(self):
        assert is_price_related_element(parse_html('<span class="old-price"></span>'))
        assert not is_price_related_element(parse_html('<span class="title"></span>'))


class TestGetElementContext:

    def test_missing_element(self):
        context = get_element_context(None)
        assert context.confidence == 0.0
        assert context.price_indicators.count() == 0

    def test_plain_element_scores_zero(self):
        context = get_element_context(parse_html("<div>Hello</div>"))
        assert context.confidence == 0.0

    def test_container_semantics_and_depth(self):
        body = parse_document('<div class="cart-total"><div><span class="amount">$5</span></div></div>')
        context = get_element_context(body.find_by_class("amount"))

        assert context.hierarchy.depth == 2
        assert context.hierarchy.price_container.has_class("cart-total")
        assert context.semantics.container_type == "cart"
        assert context.price_indicators.count() == 3
        assert context.confidence == 1.0

    def test_max_depth_limits_container_search(self):
        body = parse_document('<div class="price-box"><div><div><span>5</span></div></div></div>')
        span = body.find_all_by_tag("span")[0]
        assert get_element_context(span, max_depth=3).hierarchy.depth == 3
        assert get_element_context(span, max_depth=2).hierarchy.price_container is None

    def test_sibling_density(self):
        body = parse_document(
            '<div><span class="price">$5</span><span class="old-price">$7</span><span class="label">x</span></div>'
        )
        context = get_element_context(body.find_by_class("price"))
        assert context.hierarchy.sibling_count == 1

        weights = ContextWeights()
        expected = weights.price_classes + weights.indicators_one + weights.sibling_step
        assert context.confidence == pytest.approx(expected)

    def test_custom_weights(self):
        weights = ContextWeights(price_classes=0.1, indicators_one=0.0)
        context = get_element_context(parse_html('<span class="price">5</span>'), weights=weights)
        assert context.confidence == pytest.approx(0.1)

    def test_aria_and_data_attributes(self):
        node = parse_html('<span data-amount="5" aria-label="5 dollars">5</span>')
        context = get_element_context(node)
        assert context.attributes.data_attributes == ["data-amount"]
        assert context.attributes.aria_labels == ["5 dollars"]
        # data attributes 0.3 + aria 0.3 + one indicator 0.05
        assert context.confidence == pytest.approx(0.65)

    def test_price_type_and_currency_hint(self):
        body = parse_document('<div class="price-eur"><span class="sale-price">5</span></div>')
        context = get_element_context(body.find_by_class("sale-price"))
        assert context.semantics.price_type == "sale"
        assert context.semantics.currency_hint == "EUR"

    def test_to_dict(self):
        data = get_element_context(parse_html('<span class="price">5</span>')).to_dict()
        assert set(data) >= {"confidence", "indicators", "container_depth", "container_type"}
        assert data["indicators"]["has_price_classes"] is True
