"""Ordered fallback evaluation of field strategies."""

import time
from typing import Any, Callable, Iterable, Optional, TypeVar

from .extraction_logger import ExtractionTrace
from .models import ExtractedField, Strategy


S = TypeVar('S')


def _identity(raw: str) -> Optional[str]:
    return raw


def run_strategies(
    field_id: Any,
    strategies: Iterable[Strategy[S]],
    source: S,
    coerce: Callable[[str], Any] = _identity,
    trace: Optional[ExtractionTrace] = None,
) -> ExtractedField:
    """
    Try strategies in priority order; the first coerced value wins.

    A strategy that returns nothing, or whose raw value ``coerce`` rejects
    (returns None), is a miss and the next strategy is tried. An exception
    escaping a strategy is recorded on the trace and also treated as a miss.

    Returns:
        ExtractedField with ``value`` None when every strategy missed
    """
    field_name = getattr(field_id, 'value', str(field_id))

    for strategy in sorted(strategies, key=lambda s: s.priority):
        started = time.perf_counter()
        error = None
        value = None
        raw = None

        try:
            raw = strategy.extract(source)
            if raw is not None and str(raw).strip():
                value = coerce(raw)
        except Exception as e:
            error = f"{type(e).__name__}: {e}"
            value = None

        duration_ms = (time.perf_counter() - started) * 1000
        if trace is not None:
            trace.record(field_name, strategy.name, value is not None, duration_ms, error)

        if value is not None:
            return ExtractedField(
                field_id=field_id,
                value=value,
                method_used=strategy.name,
                raw_value=raw if isinstance(raw, str) else str(raw),
            )

    return ExtractedField(field_id=field_id)
