"""
Tests for config, logging helpers and the extraction report
"""

import logging

from pricescan_core.config import Config, ContextWeights, config
from pricescan_core.diagnostics import get_logger, sample, set_log_level
from pricescan_core.extraction_registry import AttemptStatus, ExtractionReport


class TestConfig:

    def test_defaults(self):
        cfg = Config()
        assert cfg.early_exit_confidence == 0.9
        assert cfg.context_max_depth == 5
        assert isinstance(cfg.context_weights, ContextWeights)
        assert cfg.context_weights.boost_threshold == 0.7
        assert cfg.context_weights.boost_max == 0.2

    def test_weights_are_independent(self):
        first, second = Config(), Config()
        first.context_weights.price_classes = 0.0
        assert second.context_weights.price_classes == 0.4


class TestLogging:

    def test_logger_is_cached(self):
        assert get_logger("pricescan_core.test") is get_logger("pricescan_core.test")
        assert len(get_logger("pricescan_core.test").handlers) == 1

    def test_starting_level_follows_config(self, monkeypatch):
        monkeypatch.setattr(config, "enable_debug", True)
        assert get_logger("pricescan_core.debug_on").level == logging.DEBUG
        monkeypatch.setattr(config, "enable_debug", False)
        assert get_logger("pricescan_core.debug_off").level == logging.INFO

    def test_set_log_level(self):
        lg = get_logger("pricescan_core.level")
        set_log_level("error")
        assert lg.level == logging.ERROR
        set_log_level("INFO")
        assert lg.level == logging.INFO

    def test_sample_truncates(self):
        assert sample("short") == "short"
        assert sample("a   b\n c") == "a b c"
        assert sample("x" * 20, limit=5) == "xxxxx..."
        assert sample(None) == "None"


class TestExtractionReport:

    def test_attempt_lifecycle(self):
        report = ExtractionReport("text", "amazon.com")
        skipped = report.start_attempt("site-specific", 1)
        skipped.skip("cannot handle input")
        ran = report.start_attempt("pattern-matching", 3)
        ran.set_result(2, 0.9, 1.5)
        empty = report.start_attempt("contextual-patterns", 5)
        empty.set_result(0)
        report.mark_early_exit("pattern-matching")

        assert report.attempted_strategies == ["pattern-matching", "contextual-patterns"]
        assert empty.status is AttemptStatus.NO_DATA

        data = report.get_transparency_report()
        assert data["early_exit_after"] == "pattern-matching"
        assert data["summary"]["skipped"] == ["site-specific"]
        assert data["summary"]["successful"] == ["pattern-matching"]
        assert data["summary"]["result_counts"] == {"pattern-matching": 2, "contextual-patterns": 0}
        assert data["attempts"][0]["skip_reason"] == "cannot handle input"
