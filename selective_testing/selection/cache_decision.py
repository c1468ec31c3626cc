"""
Cache-aware skip-vs-run decisions.

A target is skipped when the run environment carries a selective-tests
cache hit for it (local or remote). Everything else the pruned graph
still declares is run. Decisions are a pure function of the run
environment; nothing here performs I/O.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Sequence

from selective_testing.core.domain.cache import (
    CacheCategory,
    CacheSource,
    SelectiveTestsAnalytics,
)

if TYPE_CHECKING:
    from selective_testing.core.domain.graph import RunEnvironment, TargetReference


@dataclass(frozen=True, slots=True)
class CacheDecision:
    """
    Outcome for one scheme. Both lists keep scheme declaration order.
    """

    runnable_targets: list[TargetReference]
    skipped_targets: list[TargetReference]

    @property
    def runnable_names(self) -> list[str]:
        return [reference.name for reference in self.runnable_targets]

    @property
    def skipped_names(self) -> list[str]:
        return [reference.name for reference in self.skipped_targets]

    def has_runnable_targets(self) -> bool:
        return bool(self.runnable_targets)


@dataclass(slots=True)
class SelectiveTestsAnalyticsBuilder:
    """Accumulates run-wide analytics across scheme decisions."""

    test_targets: set[str] = field(default_factory=set)
    local_test_target_hits: set[str] = field(default_factory=set)
    remote_test_target_hits: set[str] = field(default_factory=set)

    def build(self) -> SelectiveTestsAnalytics:
        return SelectiveTestsAnalytics(
            test_targets=set(self.test_targets),
            local_test_target_hits=set(self.local_test_target_hits),
            remote_test_target_hits=set(self.remote_test_target_hits),
        )


def decide_scheme(
    *,
    declared_targets: Sequence[TargetReference],
    current_targets: Sequence[TargetReference],
    environment: RunEnvironment,
    analytics: SelectiveTestsAnalyticsBuilder,
) -> CacheDecision:
    """
    Split a scheme's targets into runnable and skipped ones.

    Parameters
    ----------
    declared_targets:
        Effective targets of the scheme before pruning (initial graph),
        or the current targets when no initial graph exists.

    current_targets:
        Effective targets the pruned graph still declares. A declared
        target that is neither a cache hit nor still declared was
        filtered out upstream and is ignored.

    environment:
        Source of the per-project cache item index.

    analytics:
        Run-wide accumulator updated in place.
    """
    still_declared = set(current_targets)

    runnable: list[TargetReference] = []
    skipped: list[TargetReference] = []

    # Declared targets first, then anything only the pruned graph knows.
    candidates = list(declared_targets)
    declared = set(declared_targets)
    candidates.extend(ref for ref in current_targets if ref not in declared)

    seen: set[TargetReference] = set()
    for reference in candidates:
        if reference in seen:
            continue
        seen.add(reference)

        item = environment.cache_item(reference)

        if item is not None and item.is_hit(CacheCategory.SELECTIVE_TESTS):
            skipped.append(reference)
            analytics.test_targets.add(reference.name)
            if item.source == CacheSource.LOCAL:
                analytics.local_test_target_hits.add(reference.name)
            else:
                analytics.remote_test_target_hits.add(reference.name)
            continue

        if reference in still_declared:
            runnable.append(reference)
            analytics.test_targets.add(reference.name)

    return CacheDecision(runnable_targets=runnable, skipped_targets=skipped)
