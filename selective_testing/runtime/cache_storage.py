"""Cache stores used for selective-testing write-back.

Both stores are append-only: an entry that already exists is never
rewritten. An entry is complete once its ``_DONE`` marker exists.
"""

from __future__ import annotations

import logging
import shutil
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Mapping

from selective_testing.core.ports.directories import CacheDirectoryKind
from selective_testing.io.object_storage import OCIObjectStorageShim

if TYPE_CHECKING:
    from selective_testing.core.domain.cache import CacheCategory, CacheStorableItem
    from selective_testing.core.ports.cache_storage import CacheStoring
    from selective_testing.core.ports.directories import CacheDirectoriesProviding
    from selective_testing.runtime.config import Config, RemoteCacheConfig

LOGGER = logging.getLogger(__name__)

_DONE_MARKER = "_DONE"


class LocalCacheStorage:
    """
    Stores cache entries on the local file system.

    Layout:

        <root>/<category>/<name>/<hash>/
            <payload files...>
            _DONE
    """

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root)

    def entry_dir(self, item: CacheStorableItem, cache_category: CacheCategory) -> Path:
        return self._root / cache_category.value / item.name / item.hash

    def exists(self, item: CacheStorableItem, cache_category: CacheCategory) -> bool:
        return (self.entry_dir(item, cache_category) / _DONE_MARKER).exists()

    def store(
        self,
        items: Mapping[CacheStorableItem, list[Path]],
        cache_category: CacheCategory,
    ) -> None:
        for item, payload in items.items():
            if self.exists(item, cache_category):
                continue

            entry_dir = self.entry_dir(item, cache_category)
            entry_dir.mkdir(parents=True, exist_ok=True)

            for path in payload:
                shutil.copy2(path, entry_dir / Path(path).name)

            (entry_dir / _DONE_MARKER).write_text(
                datetime.now(timezone.utc).isoformat(),
                encoding="utf-8",
            )

        LOGGER.info(
            "Stored cache entries locally",
            extra={"count": len(items), "cache_category": cache_category.value},
        )


class RemoteCacheStorage:
    """
    Stores cache entries in OCI Object Storage.

    Object keys mirror the local layout under ``prefix``:

        <prefix>/<category>/<name>/<hash>/<payload file>
        <prefix>/<category>/<name>/<hash>/_DONE
    """

    def __init__(
        self,
        *,
        shim: OCIObjectStorageShim,
        bucket: str,
        prefix: str = "selective-tests",
    ) -> None:
        self._shim = shim
        self._bucket = bucket
        self._prefix = prefix.rstrip("/")

    def _base_key(self, item: CacheStorableItem, cache_category: CacheCategory) -> str:
        return (
            f"{self._prefix}/"
            f"{cache_category.value}/"
            f"{item.name}/"
            f"{item.hash}"
        )

    def exists(self, item: CacheStorableItem, cache_category: CacheCategory) -> bool:
        marker_key = f"{self._base_key(item, cache_category)}/{_DONE_MARKER}"
        return self._shim.object_exists(bucket=self._bucket, key=marker_key)

    def store(
        self,
        items: Mapping[CacheStorableItem, list[Path]],
        cache_category: CacheCategory,
    ) -> None:
        for item, payload in items.items():
            if self.exists(item, cache_category):
                continue

            base_key = self._base_key(item, cache_category)

            for path in payload:
                self._shim.put_object(
                    bucket=self._bucket,
                    key=f"{base_key}/{Path(path).name}",
                    body=Path(path).read_bytes(),
                )

            # Marker is written last so a partial upload is never a hit.
            self._shim.put_object(
                bucket=self._bucket,
                key=f"{base_key}/{_DONE_MARKER}",
                body=datetime.now(timezone.utc).isoformat().encode("utf-8"),
                content_type="text/plain",
            )

        LOGGER.info(
            "Stored cache entries remotely",
            extra={
                "count": len(items),
                "cache_category": cache_category.value,
                "bucket": self._bucket,
            },
        )


def _default_shim(cache_config: RemoteCacheConfig) -> OCIObjectStorageShim:
    return OCIObjectStorageShim(
        region=cache_config.region,
        auth_mode=cache_config.auth_mode,
        oci_config_file=cache_config.oci_config_file,
        oci_profile=cache_config.oci_profile,
    )


class CacheStorageFactory:
    """Builds the configured store and the local-only store."""

    def __init__(
        self,
        *,
        directories: CacheDirectoriesProviding,
        shim_factory: Callable[[RemoteCacheConfig], OCIObjectStorageShim] = _default_shim,
    ) -> None:
        self._directories = directories
        self._shim_factory = shim_factory

    def cache_storage(self, config: Config) -> CacheStoring:
        if config.cache is None:
            return self.cache_local_storage()

        return RemoteCacheStorage(
            shim=self._shim_factory(config.cache),
            bucket=config.cache.bucket,
            prefix=config.cache.prefix,
        )

    def cache_local_storage(self) -> CacheStoring:
        return LocalCacheStorage(
            self._directories.directory_for(CacheDirectoryKind.SELECTIVE_TESTS)
        )
