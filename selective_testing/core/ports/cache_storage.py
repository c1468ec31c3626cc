"""Cache storage protocols.

Two instances of the same capability exist per run: the configured
(possibly remote) store and a local-only store. Stores are append-only
from the test service's point of view.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Mapping, Protocol

if TYPE_CHECKING:
    from selective_testing.core.domain.cache import CacheCategory, CacheStorableItem
    from selective_testing.runtime.config import Config


class CacheStoring(Protocol):
    def store(
        self,
        items: Mapping[CacheStorableItem, list[Path]],
        cache_category: CacheCategory,
    ) -> None:
        """Persist ``items`` under ``cache_category``; never overwrite."""


class CacheStorageFactoring(Protocol):
    def cache_storage(self, config: Config) -> CacheStoring:
        """Return the store selected by ``config``."""

    def cache_local_storage(self) -> CacheStoring:
        """Return a store that never leaves the machine."""
