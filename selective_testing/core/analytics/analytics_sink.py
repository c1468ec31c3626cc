"""
Analytics sink interface.

Sinks receive the selective testing outcome of a run exactly once.
"""
from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Mapping, Protocol

if TYPE_CHECKING:
    from selective_testing.core.domain.cache import CacheItem, SelectiveTestsAnalytics


class AnalyticsSink(Protocol):
    def record(
        self,
        *,
        run_id: str,
        analytics: SelectiveTestsAnalytics,
        cache_items: Mapping[Path, Mapping[str, CacheItem]],
    ) -> None:
        """Consume the analytics of a finished run."""
