"""Persists selective-testing cache entries for targets that ran."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Iterable

from selective_testing.core.domain.cache import CacheCategory, CacheStorableItem

if TYPE_CHECKING:
    from selective_testing.core.domain.graph import RunEnvironment, TargetReference
    from selective_testing.core.ports.cache_storage import CacheStoring

LOGGER = logging.getLogger(__name__)


class ExecutedTargets:
    """
    Per-project union of targets that were actually run.

    Only targets of schemes that executed and that were in the scheme's
    runnable set are recorded.
    """

    def __init__(self) -> None:
        self._by_project: dict[Path, list[str]] = {}

    def record(self, references: Iterable[TargetReference]) -> None:
        for reference in references:
            names = self._by_project.setdefault(reference.project_path, [])
            if reference.name not in names:
                names.append(reference.name)

    def items(self) -> list[tuple[Path, str]]:
        return [
            (project_path, name)
            for project_path, names in self._by_project.items()
            for name in names
        ]

    def __len__(self) -> int:
        return sum(len(names) for names in self._by_project.values())


class CacheWriteback:
    """Builds the write-back batch and hands it to one store."""

    def storable_items(
        self,
        *,
        executed: ExecutedTargets,
        environment: RunEnvironment,
    ) -> dict[CacheStorableItem, list[Path]]:
        items: dict[CacheStorableItem, list[Path]] = {}

        for project_path, name in executed.items():
            hashes = environment.target_test_hashes.get(project_path, {})
            target_hash = hashes.get(name)

            if target_hash is None:
                LOGGER.warning(
                    "No test hash for executed target; not caching it",
                    extra={"project_path": str(project_path), "target": name},
                )
                continue

            items[CacheStorableItem(name=name, hash=target_hash)] = []

        return items

    def store(
        self,
        *,
        executed: ExecutedTargets,
        environment: RunEnvironment,
        storage: CacheStoring,
    ) -> dict[CacheStorableItem, list[Path]]:
        """Submit one batch under the selective-tests category."""
        items = self.storable_items(executed=executed, environment=environment)

        storage.store(items, CacheCategory.SELECTIVE_TESTS)

        LOGGER.info(
            "Selective test results stored",
            extra={"stored_targets": sorted(item.name for item in items)},
        )
        return items
