"""
Tests for the DOM structure analyzer

Markup is parsed with BeautifulSoup and wrapped in SoupNode, the same
adapter the CLI uses.
"""

import pytest

from pricescan_core.dom.analyzer import (
    assemble_split_components,
    context_boost,
    extract_contextual_prices,
    extract_from_attributes,
    extract_from_text_content,
    extract_nested_currency,
    extract_prices_from_element,
    parse_price,
)
from pricescan_core.config import ContextWeights
from pricescan_core.dom.node import parse_document, parse_html


class TestParsePrice:

    @pytest.mark.parametrize("text,expected", [
        ("$1,299.00", ("1299.00", "$")),
        ("12.50 €", ("12.50", "€")),
        ("eur 15", ("15", "EUR")),
        ("45.00 USD", ("45.00", "USD")),
    ])
    def test_forms(self, text, expected):
        assert parse_price(text) == expected

    def test_no_price(self):
        assert parse_price("Add to cart") is None
        assert parse_price(None) is None


class TestSoupNode:

    def test_parse_html_first_element(self):
        node = parse_html('<span class="price big" id="p1">$5</span><b>x</b>')
        assert node.tag_name == "span"
        assert node.class_list == ["price", "big"]
        assert node.element_id == "p1"
        assert node.text == "$5"

    def test_selector(self):
        node = parse_html('<div><p class="a">1</p><p class="b">2</p></div>', ".b")
        assert node.text == "2"
        assert parse_html("<div></div>", ".missing") is None

    def test_tree_navigation(self):
        body = parse_document('<div class="outer"><span class="inner">x</span></div>')
        inner = body.find_by_class("inner")
        assert inner.parent.has_class("outer")
        assert inner.closest_with_class("outer") is not None
        assert [n.tag_name for n in body.descendants()] == ["div", "span"]


class TestAttributeStrategy:

    def test_aria_label(self):
        node = parse_html('<span aria-label="Price: $19.99">19.99</span>')
        matches = extract_from_attributes(node)
        assert matches[0].value == "19.99"
        assert matches[0].currency == "$"
        assert matches[0].confidence == 0.95
        assert matches[0].metadata["source"] == "aria-label"

    def test_data_price_with_currency(self):
        node = parse_html('<div data-price="1299.00" data-currency="EUR">1.299,00 €</div>')
        match = extract_from_attributes(node)[0]
        assert match.value == "1299.00"
        assert match.currency == "EUR"
        assert match.confidence == 0.9

    def test_screen_reader_text(self):
        node = parse_html('<span class="a-price"><span class="a-offscreen">$24.99</span></span>')
        match = extract_from_attributes(node)[0]
        assert match.value == "24.99"
        assert match.confidence == 0.85
        assert match.metadata["source"] == "offscreen"


class TestSplitStrategy:

    def test_classed_split(self):
        node = parse_html(
            '<span class="a-price">'
            '<span class="a-price-symbol">$</span>'
            '<span class="a-price-whole">24<span class="a-price-decimal">.</span></span>'
            '<span class="a-price-fraction">99</span>'
            '</span>'
        )
        matches = assemble_split_components(node)
        classed = [m for m in matches if m.metadata["source"] == "classed-split"]
        assert classed[0].value == "24.99"
        assert classed[0].confidence == 0.85

    def test_inline_split(self):
        node = parse_html("<div>449€ 00</div>")
        match = assemble_split_components(node)[0]
        assert match.value == "449.00"
        assert match.currency == "€"
        assert match.confidence == 0.9

    def test_simple_split(self):
        node = parse_html("<div><span>€</span><span>15.50</span></div>")
        match = assemble_split_components(node)[0]
        assert match.value == "15.50"
        assert match.confidence == 0.75

    def test_children_only_when_multiple(self):
        node = parse_html("<ul><li>$10.00</li><li>$20.00</li></ul>")
        assert assemble_split_components(node) == []
        values = [m.value for m in assemble_split_components(node, allow_multiple=True)]
        assert values == ["10.00", "20.00"]


class TestNestedCurrency:

    def test_woocommerce(self):
        node = parse_html(
            '<span class="woocommerce-Price-amount amount"><bdi>'
            '<span class="woocommerce-Price-currencySymbol">$</span>35.00'
            '</bdi></span>'
        )
        matches = extract_nested_currency(node)
        assert matches[0].value == "35.00"
        assert matches[0].confidence == 0.8
        assert matches[0].metadata["source"] == "woocommerce"

    def test_inline_symbol(self):
        node = parse_html("<p><strong>£</strong> 8.40</p>")
        match = extract_nested_currency(node)[0]
        assert match.currency == "£"
        assert match.value == "8.40"
        assert match.confidence == 0.75


class TestTextStrategies:

    def test_contextual(self):
        node = parse_html("<p>Plans starting at $9.99 per month</p>")
        match = extract_contextual_prices(node)[0]
        assert match.value == "9.99"
        assert match.strategy == "contextual"
        assert match.confidence == 0.88

    def test_text_content(self):
        node = parse_html("<div>Total 45.00 USD</div>")
        match = extract_from_text_content(node)[0]
        assert match.currency == "USD"
        assert match.confidence == 0.6


class TestExtractPricesFromElement:

    def test_invalid_element(self):
        result = extract_prices_from_element(None)
        assert result.prices == []
        assert result.metadata["error"] == "Invalid element provided"

    def test_returns_top_hit(self):
        node = parse_html("<div><span>€</span><span>15.50</span></div>")
        result = extract_prices_from_element(node)
        assert len(result.prices) == 1
        assert result.prices[0].strategy == "split"
        assert result.metadata["element_type"] == "div"
        assert result.metadata["has_children"] is True

    def test_text_fallback_only_when_nothing_found(self):
        result = extract_prices_from_element(parse_html("<div>Total 45.00 USD</div>"))
        assert result.metadata["strategies_attempted"] == ["text"]
        assert result.prices[0].strategy == "text"

        result = extract_prices_from_element(parse_html('<div aria-label="$5.00">Total 45.00 USD</div>'))
        assert "text" not in result.metadata["strategies_attempted"]
        assert result.prices[0].value == "5.00"

    def test_multiple_results_sorted(self):
        node = parse_html("<ul><li>$10.00</li><li>$20.00</li></ul>")
        result = extract_prices_from_element(node, allow_multiple_results=True)
        assert len(result.prices) == 2
        confidences = [m.confidence for m in result.prices]
        assert confidences == sorted(confidences, reverse=True)

    def test_no_price(self):
        assert extract_prices_from_element(parse_html("<div>Hello</div>")).prices == []

    def test_context_boost_applied(self):
        body = parse_document(
            '<div class="product-price" id="main-price">'
            '<span class="price sale-price" data-price="19.99" data-currency="$" aria-label="$19.99">$19.99</span>'
            '</div>'
        )
        node = body.find_by_class("sale-price")
        result = extract_prices_from_element(node)
        assert result.metadata["context_confidence"] == 1.0
        assert result.metadata["context_boost"] == pytest.approx(0.2)
        assert result.prices[0].confidence == 1.0
        assert result.prices[0].metadata["context_confidence"] == 1.0

    def test_context_boost_curve(self):
        assert context_boost(0.5) == 0.0
        assert context_boost(0.7) == 0.0
        assert context_boost(0.85) == pytest.approx(0.1)
        assert context_boost(1.0) == pytest.approx(0.2)

    def test_context_boost_uses_given_weights(self):
        weights = ContextWeights(boost_threshold=0.5, boost_max=0.1)
        assert context_boost(0.5, weights) == 0.0
        assert context_boost(0.75, weights) == pytest.approx(0.05)
        assert context_boost(1.0, weights) == pytest.approx(0.1)

    def test_extract_honours_boost_weights(self):
        body = parse_document(
            '<div class="product-price" id="main-price">'
            '<span class="price sale-price" data-price="19.99" data-currency="$" aria-label="$19.99">$19.99</span>'
            '</div>'
        )
        node = body.find_by_class("sale-price")
        result = extract_prices_from_element(node, weights=ContextWeights(boost_max=0.0))
        assert result.metadata["context_confidence"] == 1.0
        assert result.metadata["context_boost"] == 0.0
