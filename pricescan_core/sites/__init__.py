"""
Site handlers - per-marketplace extraction overrides
"""

from .registry import SiteHandler, SiteHandlerRegistry, normalize_domain
from .split_state import SplitPart, SplitPriceTracker, SplitState
from .handlers import (
    AmazonHandler,
    CdiscountHandler,
    EbayHandler,
    GearbestHandler,
    builtin_handlers,
    default_registry,
)

__all__ = [
    "SiteHandler",
    "SiteHandlerRegistry",
    "normalize_domain",
    "SplitPart",
    "SplitPriceTracker",
    "SplitState",
    "AmazonHandler",
    "CdiscountHandler",
    "EbayHandler",
    "GearbestHandler",
    "builtin_handlers",
    "default_registry",
]
