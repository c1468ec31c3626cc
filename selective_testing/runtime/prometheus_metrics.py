from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING, Mapping

from prometheus_client import CollectorRegistry, Gauge, push_to_gateway

if TYPE_CHECKING:
    from selective_testing.core.domain.cache import CacheItem, SelectiveTestsAnalytics

LOGGER = logging.getLogger(__name__)

PUSHGATEWAY_URL_ENV = "PROMETHEUS_PUSHGATEWAY_URL"
GROUPING_KEY_ENV = "PROMETHEUS_PUSHGATEWAY_GROUPING_KEY_JSON"


def load_grouping_key(raw: str | None) -> dict[str, str]:
    """Parse the Pushgateway grouping key; invalid input yields no key."""
    if not raw:
        return {}

    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        LOGGER.warning("Invalid %s; ignoring", GROUPING_KEY_ENV)
        return {}

    if not isinstance(data, dict):
        return {}

    return {
        key: value
        for key, value in data.items()
        if isinstance(key, str) and isinstance(value, str)
    }


class PrometheusAnalyticsSink:
    """Pushes selective testing gauges to a Prometheus Pushgateway.

    Expected environment:
    - PROMETHEUS_PUSHGATEWAY_URL: URL to the Pushgateway.
      Example: http://pushgateway.monitoring.svc.cluster.local:9091

    Optional:
    - PROMETHEUS_PUSHGATEWAY_GROUPING_KEY_JSON: JSON object used as grouping
      key, e.g. {"pipeline": "ios-main"}. Without it, pushes from different
      CI jobs overwrite each other.

    Delivery is best-effort: a failed push is logged and never fails the run.
    """

    def __init__(
        self,
        *,
        job: str = "selective_tests",
        pushgateway_url: str | None = None,
        grouping_key: dict[str, str] | None = None,
    ) -> None:
        self._job = job
        self._pushgateway_url = pushgateway_url or os.environ.get(PUSHGATEWAY_URL_ENV)
        self._grouping_key = (
            grouping_key
            if grouping_key is not None
            else load_grouping_key(os.environ.get(GROUPING_KEY_ENV))
        )
        self._registry = CollectorRegistry()

        self._test_targets = Gauge(
            "selective_tests_targets",
            "Test targets considered by the run",
            labelnames=["run_id"],
            registry=self._registry,
        )
        self._hits = Gauge(
            "selective_tests_cache_hits",
            "Test targets skipped thanks to a cache hit",
            labelnames=["run_id", "source"],
            registry=self._registry,
        )
        self._cache_items = Gauge(
            "selective_tests_cache_items",
            "Cache items known to the run",
            labelnames=["run_id"],
            registry=self._registry,
        )

    @property
    def registry(self) -> CollectorRegistry:
        return self._registry

    def is_enabled(self) -> bool:
        return self._pushgateway_url is not None

    def record(
        self,
        *,
        run_id: str,
        analytics: SelectiveTestsAnalytics,
        cache_items: Mapping[Path, Mapping[str, CacheItem]],
    ) -> None:
        self._test_targets.labels(run_id=run_id).set(len(analytics.test_targets))
        self._hits.labels(run_id=run_id, source="local").set(
            len(analytics.local_test_target_hits)
        )
        self._hits.labels(run_id=run_id, source="remote").set(
            len(analytics.remote_test_target_hits)
        )
        self._cache_items.labels(run_id=run_id).set(
            sum(len(items) for items in cache_items.values())
        )

        if not self.is_enabled():
            return

        try:
            push_to_gateway(
                gateway=self._pushgateway_url,
                job=self._job,
                registry=self._registry,
                grouping_key=self._grouping_key,
            )
        except Exception:
            LOGGER.exception("Prometheus push failed")
            return

        LOGGER.info(
            "Prometheus metrics pushed",
            extra={"job": self._job, "grouping_key": self._grouping_key},
        )
