"""Structured logging of strategy attempts for a single extraction call."""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

logger = logging.getLogger('extraction')


@dataclass
class StrategyAttempt:
    """One strategy invocation within a field pipeline."""
    field_id: str
    strategy: str
    success: bool
    duration_ms: float
    error: Optional[str] = None


@dataclass
class ExtractionTrace:
    """
    Attempts recorded while serving one request.

    Created per call and discarded with the result; nothing is aggregated
    across calls.
    """
    source: str
    start_time: float = field(default_factory=time.perf_counter)
    attempts: List[StrategyAttempt] = field(default_factory=list)

    def record(self, field_id: str, strategy: str, success: bool,
               duration_ms: float, error: Optional[str] = None) -> None:
        """Record a strategy attempt and log it."""
        self.attempts.append(StrategyAttempt(field_id, strategy, success, duration_ms, error))

        log_level = logging.DEBUG if success or not error else logging.WARNING
        logger.log(log_level, f"Strategy {field_id}/{strategy}: {'success' if success else 'miss'}", extra={
            'event': 'strategy_attempt',
            'field': field_id,
            'strategy': strategy,
            'success': success,
            'duration_ms': round(duration_ms, 2),
            'error': error
        })

    def complete(self, succeeded: List[str], failed: List[str]) -> None:
        """Log the end of the call with its field partition."""
        total_ms = (time.perf_counter() - self.start_time) * 1000
        logger.info("Extraction completed", extra={
            'event': 'extraction_complete',
            **self.to_dict(),
            'duration_ms': round(total_ms, 2),
            'succeeded': succeeded,
            'failed': failed
        })

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging."""
        return {
            'source': self.source[:100],
            'strategies_tried': len(self.attempts),
            'errors_count': sum(1 for attempt in self.attempts if attempt.error),
        }
