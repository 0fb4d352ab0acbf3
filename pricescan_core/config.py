#!/usr/bin/env python3
from dataclasses import dataclass, field
import os
from dotenv import load_dotenv

load_dotenv()


@dataclass
class ContextWeights:
    """Weights used by the element context scorer"""
    parent_container: float = 0.4
    price_classes: float = 0.4
    data_attributes: float = 0.3
    semantic_context: float = 0.25
    aria_label: float = 0.3
    indicators_three: float = 0.15
    indicators_two: float = 0.1
    indicators_one: float = 0.05
    shallow_container: float = 0.15
    shallow_depth: int = 2
    sibling_step: float = 0.075
    sibling_cap: float = 0.15
    # Matches in contexts scoring above boost_threshold gain up to boost_max
    boost_threshold: float = float(os.getenv("PRICESCAN_CONTEXT_BOOST_THRESHOLD", "0.7"))
    boost_max: float = float(os.getenv("PRICESCAN_CONTEXT_BOOST_MAX", "0.2"))


@dataclass
class Config:
    """Application configuration"""
    enable_debug: bool = os.getenv("PRICESCAN_DEBUG", "false").lower() == "true"
    early_exit_confidence: float = float(os.getenv("PRICESCAN_EARLY_EXIT_CONFIDENCE", "0.9"))
    context_max_depth: int = int(os.getenv("PRICESCAN_CONTEXT_MAX_DEPTH", "5"))
    log_sample_chars: int = int(os.getenv("PRICESCAN_LOG_SAMPLE_CHARS", "100"))
    default_currency_code: str = os.getenv("PRICESCAN_DEFAULT_CURRENCY", "USD")

    # Context scoring (empirically tuned defaults)
    context_weights: ContextWeights = field(default_factory=ContextWeights)


config = Config()
