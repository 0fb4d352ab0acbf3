"""Tests for the pricescan command line."""

import json

import pytest

from pricescan_core.cli.scan import build_parser, main


AMAZON_HTML = """
<html><body>
  <div id="title">Widget</div>
  <span class="a-price">
    <span class="a-price-symbol">$</span>
    <span class="a-price-whole">19.</span>
    <span class="a-price-fraction">99</span>
  </span>
</body></html>
"""


class TestScanCommand:

    def test_scan_text(self, capsys):
        assert main(["scan", "--text", "Under $20"]) == 0
        result = json.loads(capsys.readouterr().out)
        assert result["value"] == "20"
        assert result["currency"] == "$"
        assert result["strategy"] == "contextual"

    def test_scan_multiple(self, capsys):
        assert main(["scan", "--text", "From $10 or under $30", "--multiple"]) == 0
        values = [m["value"] for m in json.loads(capsys.readouterr().out)]
        assert "10" in values
        assert "30" in values

    def test_scan_with_report(self, capsys):
        assert main(["scan", "--text", "Under $20", "--report"]) == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["result"]["value"] == "20"
        assert payload["report"]["summary"]["strategies_tried"] == ["pattern-matching"]

    def test_scan_file_with_site_handler(self, capsys, tmp_path):
        page = tmp_path / "page.html"
        page.write_text(AMAZON_HTML, encoding="utf-8")

        code = main([
            "scan", "--file", str(page), "--selector", ".a-price",
            "--url", "https://www.amazon.com/dp/B000",
        ])
        assert code == 0
        result = json.loads(capsys.readouterr().out)
        assert result["value"] == "19.99"
        assert result["strategy"] == "site-specific"

    def test_scan_eu_settings(self, capsys):
        code = main([
            "scan", "--text", "Preis: 1.234,56 €",
            "--currency-code", "EUR", "--thousands", "spacesAndDots", "--decimal", "comma",
        ])
        assert code == 0
        assert json.loads(capsys.readouterr().out)["value"] == "1234.56"

    def test_no_price(self, capsys):
        assert main(["scan", "--text", "nothing to see"]) == 1
        assert json.loads(capsys.readouterr().out) is None

    def test_missing_file(self, tmp_path):
        assert main(["scan", "--file", str(tmp_path / "missing.html")]) == 1

    def test_selector_without_match(self, tmp_path):
        page = tmp_path / "page.html"
        page.write_text(AMAZON_HTML, encoding="utf-8")
        assert main(["scan", "--file", str(page), "--selector", ".nope"]) == 1

    def test_invalid_style_rejected(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["scan", "--text", "$5", "--thousands", "tabs"])

    def test_text_and_file_are_exclusive(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["scan", "--text", "$5", "--file", "x.html"])


class TestOtherCommands:

    def test_revert(self, capsys):
        assert main(["revert", "--text", "Now $12.99 (2h 30m)"]) == 0
        assert capsys.readouterr().out.strip() == "Now $12.99"

    def test_handlers(self, capsys):
        assert main(["handlers"]) == 0
        out = capsys.readouterr().out
        for name in ("cdiscount", "gearbest", "amazon", "ebay"):
            assert name in out

    def test_no_command(self, capsys):
        assert main([]) == 1
