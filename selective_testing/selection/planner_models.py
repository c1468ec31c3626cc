"""
Planning model definitions.

This module contains immutable planning structures describing which
schemes a test run executes and which targets it skips.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from selective_testing.core.domain.cache import SelectiveTestsAnalytics
    from selective_testing.core.domain.graph import Scheme, TargetReference
    from selective_testing.selection.cache_decision import CacheDecision


@dataclass(frozen=True, slots=True)
class SchemeRun:
    """
    Execution plan for a single scheme.
    """

    scheme: Scheme
    test_plan: str | None
    decision: CacheDecision

    @property
    def name(self) -> str:
        return self.scheme.name

    @property
    def runnable_targets(self) -> list[TargetReference]:
        return self.decision.runnable_targets


@dataclass(frozen=True, slots=True)
class TestRunPlan:
    """
    High-level execution plan for a test run.

    ``scheme_runs`` is in universe order. ``skipped_targets`` lists the
    cached target names across all schemes, in scheme target order.
    """

    __test__ = False

    scheme_runs: list[SchemeRun]
    skipped_targets: list[str]
    analytics: SelectiveTestsAnalytics

    def is_empty(self) -> bool:
        return not self.scheme_runs
