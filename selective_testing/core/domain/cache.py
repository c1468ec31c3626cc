"""Cache data models.

CacheItem records are produced by the hashing/lookup subsystem and are
only read here. CacheStorableItem is the key written back after a
successful run. SelectiveTestsAnalytics is the per-run report and is
treated as a schema definition (see ``core/schemas``).
"""

# pylint: disable=missing-class-docstring
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class CacheSource(str, Enum):
    LOCAL = "local"
    REMOTE = "remote"
    MISS = "miss"


class CacheCategory(str, Enum):
    BINARIES = "binaries"
    SELECTIVE_TESTS = "selective_tests"


@dataclass(frozen=True, slots=True)
class CacheItem:
    name: str
    hash: str
    source: CacheSource
    cache_category: CacheCategory

    def is_hit(self, category: CacheCategory) -> bool:
        return self.cache_category == category and self.source in (
            CacheSource.LOCAL,
            CacheSource.REMOTE,
        )


@dataclass(frozen=True, slots=True)
class CacheStorableItem:
    name: str
    hash: str


class SelectiveTestsAnalytics(BaseModel):
    """Selective testing outcome of one run, reported exactly once."""

    test_targets: set[str] = Field(default_factory=set)
    local_test_target_hits: set[str] = Field(default_factory=set)
    remote_test_target_hits: set[str] = Field(default_factory=set)

    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_serializer("test_targets", "local_test_target_hits", "remote_test_target_hits")
    def _serialize_sorted(self, value: set[str]) -> list[str]:
        return sorted(value)

    @property
    def hit_count(self) -> int:
        return len(self.local_test_target_hits) + len(self.remote_test_target_hits)
