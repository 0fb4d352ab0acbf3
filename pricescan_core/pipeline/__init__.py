"""
Extraction pipeline - prioritized strategies with early exit and ranking
"""

from .strategies import (
    ATTRIBUTE_EXTRACTION,
    CONTEXTUAL_PATTERNS,
    DOM_ANALYZER,
    PATTERN_MATCHING,
    SITE_SPECIFIC,
    STRUCTURE_ANALYSIS,
    AttributeExtractionStrategy,
    ContextualPatternsStrategy,
    DomAnalyzerStrategy,
    ExtractionContext,
    PatternMatchingStrategy,
    SiteSpecificStrategy,
    Strategy,
    StructureAnalysisStrategy,
    default_strategies,
    multi_pass_strategies,
)
from .orchestrator import (
    ExtractionPipeline,
    dedupe_matches,
    extract_price,
    extract_price_sync,
    get_pipeline,
    normalize_input,
)

__all__ = [
    "ATTRIBUTE_EXTRACTION",
    "CONTEXTUAL_PATTERNS",
    "DOM_ANALYZER",
    "PATTERN_MATCHING",
    "SITE_SPECIFIC",
    "STRUCTURE_ANALYSIS",
    "AttributeExtractionStrategy",
    "ContextualPatternsStrategy",
    "DomAnalyzerStrategy",
    "ExtractionContext",
    "PatternMatchingStrategy",
    "SiteSpecificStrategy",
    "Strategy",
    "StructureAnalysisStrategy",
    "default_strategies",
    "multi_pass_strategies",
    "ExtractionPipeline",
    "dedupe_matches",
    "extract_price",
    "extract_price_sync",
    "get_pipeline",
    "normalize_input",
]
