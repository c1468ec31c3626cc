from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING, Mapping

import mlflow

if TYPE_CHECKING:
    from selective_testing.core.domain.cache import CacheItem, SelectiveTestsAnalytics

LOGGER = logging.getLogger(__name__)


class MlflowAnalyticsSink:
    """Logs each run's selective testing outcome to MLflow.

    Tracking is configured via environment variables:
    - MLFLOW_TRACKING_URI: HTTP(S) address of the MLflow tracking server.
      Example: http://mlflow.ci.svc.cluster.local:5000

    The sink is disabled when no tracking URI is set. Logging is
    best-effort; failures are logged and swallowed.
    """

    def __init__(self, *, experiment: str = "selective-tests") -> None:
        self._experiment = experiment
        self._tracking_uri = os.environ.get("MLFLOW_TRACKING_URI")
        if self._tracking_uri:
            mlflow.set_tracking_uri(self._tracking_uri)

    def is_enabled(self) -> bool:
        return bool(self._tracking_uri)

    def record(
        self,
        *,
        run_id: str,
        analytics: SelectiveTestsAnalytics,
        cache_items: Mapping[Path, Mapping[str, CacheItem]],
    ) -> None:
        if not self.is_enabled():
            return

        try:
            self._log(run_id=run_id, analytics=analytics, cache_items=cache_items)
        except Exception:
            LOGGER.exception("MLflow logging failed")

    def _log(
        self,
        *,
        run_id: str,
        analytics: SelectiveTestsAnalytics,
        cache_items: Mapping[Path, Mapping[str, CacheItem]],
    ) -> None:
        # set_experiment creates the experiment if it does not exist.
        mlflow.set_experiment(self._experiment)

        with mlflow.start_run(run_name=run_id):
            mlflow.log_param("test_targets", len(analytics.test_targets))

            mlflow.log_metric("local_hits", len(analytics.local_test_target_hits))
            mlflow.log_metric("remote_hits", len(analytics.remote_test_target_hits))
            mlflow.log_metric(
                "cache_items",
                sum(len(items) for items in cache_items.values()),
            )

            mlflow.set_tag("run_id", run_id)

        LOGGER.info(
            "MLflow run log submitted",
            extra={"run_id": run_id, "experiment": self._experiment},
        )
