"""
Append-only file recorder sink.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Mapping

if TYPE_CHECKING:
    from selective_testing.core.domain.cache import CacheItem, SelectiveTestsAnalytics


class FileRecorderSink:
    """Writes each run's analytics as a JSON line to a file."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._fh = self._path.open("a", encoding="utf-8")
        self._closed = False

    def record(
        self,
        *,
        run_id: str,
        analytics: SelectiveTestsAnalytics,
        cache_items: Mapping[Path, Mapping[str, CacheItem]],
    ) -> None:
        record = {
            "run_id": run_id,
            "analytics": analytics.model_dump(mode="json"),
            "cache_items": {
                str(project_path): {
                    name: {
                        "hash": item.hash,
                        "source": item.source.value,
                        "cache_category": item.cache_category.value,
                    }
                    for name, item in items.items()
                }
                for project_path, items in cache_items.items()
            },
        }
        self._fh.write(json.dumps(record, sort_keys=True) + "\n")
        self._fh.flush()

    def close(self) -> None:
        if self._closed:
            return
        self._fh.flush()
        self._fh.close()
        self._closed = True
