"""
Split-price state machine

Marketplace widgets render one price as sibling nodes, e.g.

    <span class="sx-price-currency">€</span>
    <span class="sx-price-whole">449</span>
    <span class="sx-price-fractional">00</span>

The tracker is fed each node's part during a depth-first traversal:

    IDLE          --currency-->    CURRENCY_SEEN   (store fragment)
    CURRENCY_SEEN --whole-->       COMBINED        (emit currency+whole)
    CURRENCY_SEEN/COMBINED --fractional--> IDLE    (finalize)
    not IDLE      --other-->       IDLE            (abandon, no emit)

One tracker belongs to exactly one traversal call.
"""

from enum import Enum
from typing import Callable, Optional

from ..diagnostics import get_logger

logger = get_logger(__name__)


class SplitState(Enum):
    IDLE = "idle"
    CURRENCY_SEEN = "currency_seen"
    COMBINED = "combined"


class SplitPart(Enum):
    CURRENCY = "currency"
    WHOLE = "whole"
    FRACTIONAL = "fractional"
    OTHER = "other"


class SplitPriceTracker:
    """Accumulates split price fragments for a single traversal"""

    def __init__(self, variant: Optional[str] = None):
        self.variant = variant
        self.state = SplitState.IDLE
        self.currency_fragment: Optional[str] = None
        self.whole_fragment: Optional[str] = None

    @property
    def active(self) -> bool:
        return self.state is not SplitState.IDLE

    def reset(self) -> None:
        self.state = SplitState.IDLE
        self.currency_fragment = None
        self.whole_fragment = None

    def feed(self, part: SplitPart, fragment: str, on_price: Callable[[str], None]) -> bool:
        """
        Apply one node to the machine.

        Returns True when the node was consumed as a price component.
        on_price receives the reconstructed "currency+whole" text.
        """
        fragment = (fragment or "").strip()

        if part is SplitPart.CURRENCY:
            if self.state is not SplitState.IDLE:
                self.reset()
            self.currency_fragment = fragment
            self.state = SplitState.CURRENCY_SEEN
            return True

        if part is SplitPart.WHOLE:
            if self.state is not SplitState.CURRENCY_SEEN:
                if self.active:
                    self.reset()
                return False
            self.whole_fragment = fragment.rstrip(".,")
            combined = f"{self.currency_fragment}{self.whole_fragment}"
            self.state = SplitState.COMBINED
            logger.debug(f"Split price reconstructed: {combined}")
            on_price(combined)
            return True

        if part is SplitPart.FRACTIONAL:
            if self.state is SplitState.IDLE:
                return False
            self.reset()
            return True

        if self.active:
            self.reset()
        return False
