from __future__ import annotations

from typing import Any

from selective_testing.core.analytics.analytics_bus import AnalyticsBus


class _NullSink:
    """Analytics sink that discards everything."""

    def record(self, **_: Any) -> None:
        return


class NullAnalyticsBus(AnalyticsBus):
    """AnalyticsBus that discards all analytics (used for tests)."""

    def __init__(self) -> None:
        super().__init__(sinks=[_NullSink()])
