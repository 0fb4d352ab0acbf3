#!/usr/bin/env python3
"""
pricescan CLI - find prices in text or HTML

Usage:
    pricescan scan --text "Under $20"
    pricescan scan --file page.html --selector ".price" --url https://www.amazon.com/dp/X
    pricescan revert --text "$12.99 (2h 30m)"
    pricescan handlers
"""

import sys
import argparse
import json
from pathlib import Path
from typing import Any, Dict, Optional

from ..constants import DECIMAL_STYLES, THOUSANDS_STYLES
from ..diagnostics import get_logger, set_log_level
from ..dom.node import parse_document, parse_html
from ..exceptions import PriceScanError
from ..models import ExtractionInput, ExtractionOptions, PriceSettings
from ..patterns.builder import revert_time_annotations
from ..pipeline.orchestrator import ExtractionPipeline, normalize_input
from ..pipeline.strategies import MULTI_PASS_NAMES, DOM_ANALYZER
from ..sites.handlers import default_registry

logger = get_logger(__name__)


def _configure_logging(args):
    if getattr(args, "verbose", False):
        set_log_level("DEBUG")
    elif getattr(args, "quiet", False):
        set_log_level("ERROR")


def _build_settings(args) -> Optional[PriceSettings]:
    values: Dict[str, Any] = {}
    if args.currency_code:
        values["currency_code"] = args.currency_code
    if args.currency_symbol:
        values["currency_symbol"] = args.currency_symbol
    if args.thousands:
        values["thousands_separator_style"] = args.thousands
    if args.decimal:
        values["decimal_separator_style"] = args.decimal
    if getattr(args, "verbose", False):
        values["debug_mode"] = True
    if not values:
        return None
    return PriceSettings.from_mapping(values)


def _build_options(args) -> ExtractionOptions:
    return ExtractionOptions(
        return_multiple=args.multiple,
        min_confidence=args.min_confidence,
        exhaustive=args.exhaustive,
        only_pass=args.only_pass,
        multi_pass_mode=args.multi_pass,
    )


def _load_input(args) -> Optional[ExtractionInput]:
    if args.file:
        markup = Path(args.file).read_text(encoding="utf-8")
        node = parse_html(markup, args.selector) if args.selector else parse_document(markup)
        if node is None:
            raise ValueError(f"No element found in {args.file}" + (f" for {args.selector}" if args.selector else ""))
        return normalize_input({"element": node, "domain": args.url})
    return normalize_input({"text": args.text, "domain": args.url})


def cmd_scan(args):
    """Extract prices and print them as JSON"""
    _configure_logging(args)
    try:
        settings = _build_settings(args)
        data = _load_input(args)
    except (OSError, ValueError, PriceScanError) as e:
        logger.error(e)
        return 1

    options = _build_options(args)
    if data is None:
        print(json.dumps([] if options.return_multiple else None))
        return 1

    pipeline = ExtractionPipeline(multi_pass=options.multi_pass_mode)
    results, report = pipeline.run_sync(data, options, settings)

    if options.return_multiple:
        payload: Any = [m.to_dict() for m in results]
    else:
        payload = results[0].to_dict() if results else None

    if args.report:
        payload = {"result": payload, "report": report.get_transparency_report()}

    print(json.dumps(payload, indent=2, ensure_ascii=False))
    return 0 if results else 1


def cmd_revert(args):
    """Strip time annotations that follow prices"""
    _configure_logging(args)
    try:
        settings = _build_settings(args)
    except PriceScanError as e:
        logger.error(e)
        return 1
    print(revert_time_annotations(args.text, settings))
    return 0


def cmd_handlers(args):
    """List registered site handlers"""
    registry = default_registry()
    print("\nSite handlers:")
    print("=" * 60)
    for entry in registry.list_handlers():
        print(f"{entry['name']:<12} {', '.join(entry['domains'])}")
    print("=" * 60)
    print(f"Total: {len(registry)} domains")
    return 0


def _add_settings_arguments(parser):
    parser.add_argument("--currency-code", help="ISO currency code (e.g. USD, EUR)")
    parser.add_argument("--currency-symbol", help="Currency symbol (e.g. $, €)")
    parser.add_argument("--thousands", choices=THOUSANDS_STYLES, help="Thousands separator style")
    parser.add_argument("--decimal", choices=DECIMAL_STYLES, help="Decimal separator style")
    parser.add_argument("--verbose", action="store_true", help="Verbose output")
    parser.add_argument("--quiet", "-q", action="store_true", help="Quiet mode")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="pricescan - multi-strategy price detection",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Scan command
    scan_parser = subparsers.add_parser("scan", help="Find prices in text or HTML")
    source = scan_parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--text", "-t", help="Text to scan")
    source.add_argument("--file", "-f", help="HTML file to scan")
    scan_parser.add_argument("--selector", "-s", help="CSS selector of the element to analyze (with --file)")
    scan_parser.add_argument("--url", "-u", help="Page URL or domain, selects a site handler")
    scan_parser.add_argument("--multiple", "-m", action="store_true", help="Return every match")
    scan_parser.add_argument("--multi-pass", action="store_true", help="Use the multi-pass pipeline")
    scan_parser.add_argument(
        "--only-pass",
        choices=sorted(set(MULTI_PASS_NAMES) | {DOM_ANALYZER}),
        help="Run a single strategy",
    )
    scan_parser.add_argument("--exhaustive", action="store_true", help="Disable early exit")
    scan_parser.add_argument("--min-confidence", type=float, default=0.0, help="Drop matches below this confidence")
    scan_parser.add_argument("--report", action="store_true", help="Include the extraction report")
    _add_settings_arguments(scan_parser)
    scan_parser.set_defaults(func=cmd_scan)

    # Revert command
    revert_parser = subparsers.add_parser("revert", help="Strip time annotations after prices")
    revert_parser.add_argument("--text", "-t", required=True, help="Text to clean")
    _add_settings_arguments(revert_parser)
    revert_parser.set_defaults(func=cmd_revert)

    # Handlers command
    handlers_parser = subparsers.add_parser("handlers", help="List site handlers")
    handlers_parser.set_defaults(func=cmd_handlers)

    return parser


def main(argv=None):
    """Main CLI entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
