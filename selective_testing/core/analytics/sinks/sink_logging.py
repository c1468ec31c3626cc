"""
Logging analytics sink.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Mapping

if TYPE_CHECKING:
    from selective_testing.core.domain.cache import CacheItem, SelectiveTestsAnalytics


class LoggingAnalyticsSink:
    """Logs run analytics using the standard logging module."""

    def __init__(self, logger: logging.Logger) -> None:
        self._logger = logger

    def record(
        self,
        *,
        run_id: str,
        analytics: SelectiveTestsAnalytics,
        cache_items: Mapping[Path, Mapping[str, CacheItem]],
    ) -> None:
        self._logger.info(
            "selective_tests_analytics",
            extra={
                "run_id": run_id,
                "test_targets": sorted(analytics.test_targets),
                "local_hits": sorted(analytics.local_test_target_hits),
                "remote_hits": sorted(analytics.remote_test_target_hits),
                "cache_items": sum(len(items) for items in cache_items.values()),
            },
        )
