"""
Simple synchronous analytics bus.
"""
from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Iterable, Mapping

from selective_testing.core.analytics.analytics_sink import AnalyticsSink

if TYPE_CHECKING:
    from selective_testing.core.domain.cache import CacheItem, SelectiveTestsAnalytics


class AnalyticsBus:
    """Dispatches run analytics to registered sinks."""

    def __init__(self, sinks: Iterable[AnalyticsSink] | None = None) -> None:
        self._sinks: list[AnalyticsSink] = list(sinks) if sinks is not None else []
        self._closed = False

    def register(self, sink: AnalyticsSink) -> None:
        """Register a new sink."""
        self._sinks.append(sink)

    def record(
        self,
        *,
        run_id: str,
        analytics: SelectiveTestsAnalytics,
        cache_items: Mapping[Path, Mapping[str, CacheItem]],
    ) -> None:
        """Forward the run analytics to all sinks."""
        for sink in self._sinks:
            sink.record(run_id=run_id, analytics=analytics, cache_items=cache_items)

    def close(self) -> None:
        """
        Finalize all sinks that expose a close() method.
        """
        if self._closed:
            return

        for sink in self._sinks:
            close_fn = getattr(sink, "close", None)
            if callable(close_fn):
                close_fn()

        self._closed = True
