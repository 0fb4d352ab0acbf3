"""
Extraction Attempt Registry

Per-call audit trail of the extraction pipeline:
1. Which strategies were attempted, skipped or failed
2. How many candidates each produced, and the best confidence
3. Whether the pipeline exited early
4. What survived post-processing
"""

from typing import Any, Dict, List, Optional
from enum import Enum
from datetime import datetime


class AttemptStatus(Enum):
    """Status of a strategy attempt"""
    SUCCESS = "success"
    NO_DATA = "no_data"
    ERROR = "error"
    SKIPPED = "skipped"


class ExtractionAttempt:
    """Single strategy attempt"""

    def __init__(self, strategy: str, priority: int):
        self.strategy = strategy
        self.priority = priority
        self.timestamp = datetime.now().isoformat()
        self.status = AttemptStatus.SKIPPED
        self.skip_reason: Optional[str] = None
        self.result_count = 0
        self.best_confidence = 0.0
        self.error_message: Optional[str] = None
        self.duration_ms = 0.0

    def skip(self, reason: str):
        self.status = AttemptStatus.SKIPPED
        self.skip_reason = reason

    def set_result(self, result_count: int, best_confidence: float = 0.0, duration_ms: float = 0.0):
        """Log strategy output"""
        self.status = AttemptStatus.SUCCESS if result_count else AttemptStatus.NO_DATA
        self.result_count = result_count
        self.best_confidence = best_confidence
        self.duration_ms = duration_ms

    def set_error(self, error: Exception, duration_ms: float = 0.0):
        self.status = AttemptStatus.ERROR
        self.error_message = f"{type(error).__name__}: {error}"
        self.duration_ms = duration_ms

    @property
    def ran(self) -> bool:
        return self.status is not AttemptStatus.SKIPPED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "strategy": self.strategy,
            "priority": self.priority,
            "timestamp": self.timestamp,
            "status": self.status.value,
            "skip_reason": self.skip_reason,
            "result_count": self.result_count,
            "best_confidence": round(self.best_confidence, 4),
            "error": self.error_message,
            "duration_ms": self.duration_ms,
        }


class ExtractionReport:
    """
    Transparency report for one pipeline call

    Collects an ExtractionAttempt per strategy in priority order plus the
    early-exit decision and the final match count.
    """

    def __init__(self, input_kind: str, domain: Optional[str] = None):
        self.input_kind = input_kind
        self.domain = domain
        self.attempts: List[ExtractionAttempt] = []
        self.early_exit = False
        self.early_exit_after: Optional[str] = None
        self.candidate_count = 0
        self.final_count = 0

    def start_attempt(self, strategy: str, priority: int) -> ExtractionAttempt:
        attempt = ExtractionAttempt(strategy, priority)
        self.attempts.append(attempt)
        return attempt

    def mark_early_exit(self, strategy: str):
        self.early_exit = True
        self.early_exit_after = strategy

    @property
    def attempted_strategies(self) -> List[str]:
        """Strategies that actually ran, in execution order."""
        return [a.strategy for a in self.attempts if a.ran]

    def get_transparency_report(self) -> Dict[str, Any]:
        return {
            "input": self.input_kind,
            "domain": self.domain,
            "early_exit": self.early_exit,
            "early_exit_after": self.early_exit_after,
            "candidates": self.candidate_count,
            "results": self.final_count,
            "attempts": [attempt.to_dict() for attempt in self.attempts],
            "summary": self._generate_summary(),
        }

    def to_dict(self) -> Dict[str, Any]:
        return self.get_transparency_report()

    def _generate_summary(self) -> Dict[str, Any]:
        """Generate summary statistics"""
        return {
            "total_attempts": len(self.attempts),
            "strategies_tried": self.attempted_strategies,
            "successful": [
                a.strategy for a in self.attempts if a.status == AttemptStatus.SUCCESS
            ],
            "failed": [
                a.strategy for a in self.attempts if a.status == AttemptStatus.ERROR
            ],
            "skipped": [
                a.strategy for a in self.attempts if a.status == AttemptStatus.SKIPPED
            ],
            "result_counts": {a.strategy: a.result_count for a in self.attempts if a.ran},
        }
