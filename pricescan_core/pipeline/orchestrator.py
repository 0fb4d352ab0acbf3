"""
Extraction pipeline orchestrator

Runs strategies in priority order, isolates their failures, stops early
on a confident hit and merges everything into a ranked list:

1. Skip strategies that cannot handle the input, are excluded, or are
   not the requested only_pass
2. Await each remaining strategy in sequence
3. Exit early once a match reaches early_exit_confidence (unless the
   caller wants every match)
4. Filter by min_confidence, collapse (value, currency) duplicates,
   sort by confidence
"""

import asyncio
import time
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from bs4 import Tag

from ..config import ContextWeights, config
from ..diagnostics import get_logger, sample
from ..dom.node import PriceNode, SoupNode
from ..exceptions import PriceScanError
from ..extraction_registry import ExtractionReport
from ..models import ExtractionInput, ExtractionOptions, PriceMatch, PriceSettings
from ..patterns.builder import PatternCache
from ..sites.handlers import default_registry
from ..sites.registry import SiteHandlerRegistry
from .strategies import ExtractionContext, Strategy, default_strategies, multi_pass_strategies

logger = get_logger(__name__)

PriceResult = Union[Optional[PriceMatch], List[PriceMatch]]


def _as_node(element: Any) -> Optional[PriceNode]:
    if isinstance(element, PriceNode):
        return element
    if isinstance(element, Tag):
        return SoupNode(element)
    return None


def normalize_input(data: Any, domain: Optional[str] = None) -> Optional[ExtractionInput]:
    """
    Coerce caller input into an ExtractionInput.

    Accepts a PriceNode (or bs4 Tag), a plain string, or a mapping with
    ``element`` / ``text`` / ``domain`` (or ``url``) keys. Returns None for
    anything unusable.
    """
    if isinstance(data, ExtractionInput):
        result = ExtractionInput(data.element, data.text, data.domain or domain)
    elif isinstance(data, str):
        result = ExtractionInput(text=data, domain=domain)
    elif isinstance(data, Mapping):
        element = data.get("element")
        node = _as_node(element)
        if element is not None and node is None:
            return None
        result = ExtractionInput(
            element=node,
            text=data.get("text"),
            domain=data.get("domain") or data.get("url") or domain,
        )
    else:
        node = _as_node(data)
        if node is None:
            return None
        result = ExtractionInput(element=node, domain=domain)

    if result.text is not None and not isinstance(result.text, str):
        return None
    if result.element is not None and not result.text:
        result.text = result.element.text
    if result.text is not None:
        result.text = result.text.strip()
    if result.is_empty:
        return None
    return result


def _input_kind(data: ExtractionInput) -> str:
    if data.element is not None:
        return "element"
    return "text"


def dedupe_matches(matches: Sequence[PriceMatch]) -> List[PriceMatch]:
    """
    Collapse matches sharing (value, currency), keeping the most confident.

    On equal confidence the earliest match wins. Distinct occurrences of
    the same amount in one input collapse to a single entry.
    """
    best: Dict[Tuple[str, str], PriceMatch] = {}
    for match in matches:
        existing = best.get(match.key)
        if existing is None or match.confidence > existing.confidence:
            best[match.key] = match
    return sorted(best.values(), key=lambda m: m.confidence, reverse=True)


class ExtractionPipeline:
    """Priority-ordered strategy runner; holds no per-call state"""

    def __init__(
        self,
        strategies: Optional[List[Strategy]] = None,
        registry: Optional[SiteHandlerRegistry] = None,
        cache: Optional[PatternCache] = None,
        multi_pass: bool = False,
        weights: Optional[ContextWeights] = None,
    ):
        self.registry = registry if registry is not None else default_registry()
        if strategies is None:
            strategies = multi_pass_strategies(self.registry) if multi_pass else default_strategies(self.registry)
        self.strategies = sorted(strategies, key=lambda s: s.priority)
        self.cache = cache if cache is not None else PatternCache()
        self.weights = weights
        self.multi_pass = multi_pass

    @property
    def strategy_names(self) -> List[str]:
        return [s.name for s in self.strategies]

    def _skip_reason(self, strategy: Strategy, data: ExtractionInput, options: ExtractionOptions) -> Optional[str]:
        if options.only_pass and strategy.name != options.only_pass:
            return f"only_pass={options.only_pass}"
        if strategy.name in options.exclude_strategies:
            return "excluded"
        if not strategy.can_handle(data):
            return "cannot handle input"
        return None

    async def extract_with_report(
        self,
        data: ExtractionInput,
        options: Optional[ExtractionOptions] = None,
        settings: Optional[PriceSettings] = None,
    ) -> Tuple[List[PriceMatch], ExtractionReport]:
        """Run the pipeline and return the ranked matches plus an audit trail."""
        options = options or ExtractionOptions()
        report = ExtractionReport(_input_kind(data), data.domain)
        context = ExtractionContext(options=options, settings=settings, cache=self.cache, weights=self.weights)
        threshold = options.early_exit_confidence
        if threshold is None:
            threshold = config.early_exit_confidence
        may_exit_early = not (options.exhaustive or options.return_multiple)

        candidates: List[PriceMatch] = []
        for strategy in self.strategies:
            attempt = report.start_attempt(strategy.name, strategy.priority)
            start = time.perf_counter()
            try:
                reason = self._skip_reason(strategy, data, options)
                if reason:
                    attempt.skip(reason)
                    continue
                found = await strategy.extract(data, context)
            except Exception as e:
                elapsed = round((time.perf_counter() - start) * 1000, 3)
                attempt.set_error(e, elapsed)
                logger.warning(f"Strategy {strategy.name} failed: {e} [{sample(data.text)}]")
                continue

            found = [m for m in found or [] if m is not None]
            elapsed = round((time.perf_counter() - start) * 1000, 3)
            attempt.set_result(len(found), max((m.confidence for m in found), default=0.0), elapsed)
            candidates.extend(found)

            if may_exit_early and any(m.confidence >= threshold for m in candidates):
                report.mark_early_exit(strategy.name)
                logger.debug(f"Early exit after {strategy.name} (confidence >= {threshold})")
                break

        report.candidate_count = len(candidates)
        filtered = [m for m in candidates if m.confidence >= options.min_confidence]
        results = dedupe_matches(filtered)
        report.final_count = len(results)

        if config.enable_debug or (settings is not None and settings.debug_mode):
            summary = report.get_transparency_report()["summary"]
            logger.info(f"Attempted strategies: {summary['strategies_tried']}")
            logger.info(f"Result counts: {summary['result_counts']} -> {len(results)} after post-processing")

        return results, report

    async def extract(
        self,
        data: ExtractionInput,
        options: Optional[ExtractionOptions] = None,
        settings: Optional[PriceSettings] = None,
    ) -> List[PriceMatch]:
        results, _ = await self.extract_with_report(data, options, settings)
        return results

    def run_sync(
        self,
        data: ExtractionInput,
        options: Optional[ExtractionOptions] = None,
        settings: Optional[PriceSettings] = None,
    ) -> Tuple[List[PriceMatch], ExtractionReport]:
        return asyncio.run(self.extract_with_report(data, options, settings))


_PIPELINES: Dict[bool, ExtractionPipeline] = {}


def get_pipeline(multi_pass: bool = False) -> ExtractionPipeline:
    """Shared default pipeline for the requested mode."""
    pipeline = _PIPELINES.get(multi_pass)
    if pipeline is None:
        pipeline = ExtractionPipeline(multi_pass=multi_pass)
        _PIPELINES[multi_pass] = pipeline
    return pipeline


def _empty(options: Optional[ExtractionOptions]) -> PriceResult:
    return [] if options is not None and options.return_multiple else None


async def extract_price(
    data: Any,
    options: Union[ExtractionOptions, Mapping[str, Any], None] = None,
    settings: Union[PriceSettings, Mapping[str, Any], None] = None,
    pipeline: Optional[ExtractionPipeline] = None,
    domain: Optional[str] = None,
) -> PriceResult:
    """
    Find the price(s) in a node, a string, or an element/text/domain mapping.

    Returns the best PriceMatch (or None), or the ranked list when
    ``return_multiple`` is set. Never raises: malformed input or settings
    give an empty result.
    """
    try:
        parsed = ExtractionOptions.from_mapping(options)
    except (TypeError, ValueError) as e:
        logger.warning(f"Invalid extraction options: {e}")
        return [] if ExtractionOptions.wants_multiple_in(options) else None
    options = parsed
    try:
        settings = PriceSettings.from_mapping(settings) if settings is not None else None
    except PriceScanError as e:
        logger.warning(f"Invalid price settings: {e}")
        return _empty(options)

    normalized = normalize_input(data, domain)
    if normalized is None:
        logger.debug(f"Nothing to extract from input: {sample(data)}")
        return _empty(options)

    if pipeline is None:
        pipeline = get_pipeline(options.multi_pass_mode)

    results = await pipeline.extract(normalized, options, settings)
    if options.return_multiple:
        return results
    return results[0] if results else None


def extract_price_sync(
    data: Any,
    options: Union[ExtractionOptions, Mapping[str, Any], None] = None,
    settings: Union[PriceSettings, Mapping[str, Any], None] = None,
    pipeline: Optional[ExtractionPipeline] = None,
    domain: Optional[str] = None,
) -> PriceResult:
    """Blocking wrapper around extract_price() for scripts and the CLI."""
    return asyncio.run(extract_price(data, options, settings, pipeline, domain))
