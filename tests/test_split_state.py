"""
Tests for the split-price state machine
"""

from pricescan_core.sites.split_state import SplitPart, SplitPriceTracker, SplitState


def run(events):
    tracker = SplitPriceTracker()
    emitted = []
    for part, fragment in events:
        tracker.feed(part, fragment, emitted.append)
    return tracker, emitted


class TestTransitions:

    def test_currency_whole_fractional(self):
        tracker, emitted = run([
            (SplitPart.CURRENCY, "€"),
            (SplitPart.WHOLE, "449"),
            (SplitPart.FRACTIONAL, "00"),
        ])
        assert emitted == ["€449"]
        assert tracker.state is SplitState.IDLE

    def test_unrelated_node_abandons(self):
        tracker, emitted = run([
            (SplitPart.CURRENCY, "€"),
            (SplitPart.OTHER, "Sponsored"),
            (SplitPart.WHOLE, "449"),
        ])
        assert emitted == []
        assert tracker.state is SplitState.IDLE

    def test_whole_without_currency_ignored(self):
        tracker = SplitPriceTracker()
        assert tracker.feed(SplitPart.WHOLE, "12", lambda text: None) is False
        assert tracker.state is SplitState.IDLE

    def test_trailing_decimal_point_stripped(self):
        _, emitted = run([(SplitPart.CURRENCY, "$"), (SplitPart.WHOLE, "19.")])
        assert emitted == ["$19"]

    def test_fractional_from_currency_seen_finalizes(self):
        tracker, emitted = run([(SplitPart.CURRENCY, "$"), (SplitPart.FRACTIONAL, "99")])
        assert emitted == []
        assert tracker.state is SplitState.IDLE
        assert tracker.currency_fragment is None

    def test_other_after_combined_resets(self):
        tracker, emitted = run([
            (SplitPart.CURRENCY, "$"),
            (SplitPart.WHOLE, "5"),
            (SplitPart.OTHER, ""),
        ])
        assert emitted == ["$5"]
        assert tracker.state is SplitState.IDLE

    def test_new_currency_restarts(self):
        _, emitted = run([
            (SplitPart.CURRENCY, "$"),
            (SplitPart.CURRENCY, "£"),
            (SplitPart.WHOLE, "7"),
        ])
        assert emitted == ["£7"]

    def test_two_prices_in_sequence(self):
        _, emitted = run([
            (SplitPart.CURRENCY, "$"), (SplitPart.WHOLE, "5"), (SplitPart.FRACTIONAL, "00"),
            (SplitPart.CURRENCY, "$"), (SplitPart.WHOLE, "9"), (SplitPart.FRACTIONAL, "50"),
        ])
        assert emitted == ["$5", "$9"]


class TestIsolation:
    """Each traversal owns its tracker"""

    def test_independent_instances(self):
        first = SplitPriceTracker()
        second = SplitPriceTracker()
        first.feed(SplitPart.CURRENCY, "€", lambda text: None)

        assert first.state is SplitState.CURRENCY_SEEN
        assert second.state is SplitState.IDLE

        emitted = []
        second.feed(SplitPart.WHOLE, "449", emitted.append)
        assert emitted == []
