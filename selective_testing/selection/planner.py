from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from selective_testing.core.domain.errors import SchemeNotFound, TestPlanNotFound
from selective_testing.selection.cache_decision import (
    SelectiveTestsAnalyticsBuilder,
    decide_scheme,
)
from selective_testing.selection.graph_inspector import (
    GraphInspector,
    effective_test_targets,
)
from selective_testing.selection.planner_models import SchemeRun, TestRunPlan

if TYPE_CHECKING:
    from selective_testing.core.domain.graph import Graph, RunEnvironment, Scheme

LOGGER = logging.getLogger(__name__)


def _no_tests_notice(scheme_name: str) -> None:
    LOGGER.info(
        "The scheme %s's test action has no tests to run, finishing early.",
        scheme_name,
        extra={"scheme": scheme_name},
    )


def _unique_names(schemes: list[Scheme]) -> list[str]:
    names: list[str] = []
    for scheme in schemes:
        if scheme.name not in names:
            names.append(scheme.name)
    return names


def resolve_universe(
    *,
    graph: Graph,
    environment: RunEnvironment,
    scheme_name: str | None,
    inspector: GraphInspector,
) -> list[Scheme] | None:
    """
    Resolve the schemes a run considers, in execution order.

    Returns None when the named scheme only exists in the initial graph,
    i.e. pruning removed it because nothing in it needs to run.

    Raises
    ------
    SchemeNotFound
        The named scheme exists in neither the current nor the initial graph.
    """
    current = inspector.testable_schemes(graph) + inspector.workspace_schemes(graph)

    if scheme_name is None:
        return [
            scheme
            for scheme in inspector.workspace_schemes(graph)
            if scheme.test_action is not None
        ]

    for scheme in current:
        if scheme.name == scheme_name:
            return [scheme]

    reference_graph = environment.initial_graph or graph
    reference_names = _unique_names(reference_graph.schemes())

    if environment.initial_graph is not None and scheme_name in reference_names:
        _no_tests_notice(scheme_name)
        return None

    existing = _unique_names(current)
    existing.extend(name for name in reference_names if name not in existing)

    raise SchemeNotFound(scheme=scheme_name, existing=existing)


def resolve_test_plan(scheme: Scheme, test_plan: str | None) -> str | None:
    """
    Pick the test plan a scheme runs with.

    An explicit name must exist on the scheme. Without one, the test
    action's default plan is used, if any.
    """
    action = scheme.test_action
    plans = action.test_plans if action is not None else []

    if test_plan is not None:
        if not any(plan.name == test_plan for plan in plans):
            raise TestPlanNotFound(
                scheme=scheme.name,
                passed_test_plan=test_plan,
                existing=[plan.name for plan in plans],
            )
        return test_plan

    if action is not None and action.default_test_plan is not None:
        return action.default_test_plan.name

    return None


def _declared_scheme(
    scheme: Scheme,
    graph: Graph,
    environment: RunEnvironment,
) -> Scheme:
    """
    Same scheme as declared in the initial graph, falling back to ``scheme``.

    Project schemes are matched by (project path, name) so two projects
    sharing a scheme name never read each other's targets.
    """
    initial = environment.initial_graph
    if initial is None:
        return scheme

    owner = graph.scheme_owner(scheme)
    if owner is None:
        candidates = initial.workspace.schemes
    else:
        project = initial.project(owner)
        candidates = project.schemes if project is not None else []

    for candidate in candidates:
        if candidate.name == scheme.name:
            return candidate

    return scheme


def plan_test_run(
    *,
    graph: Graph,
    environment: RunEnvironment,
    scheme_name: str | None,
    test_plan: str | None,
    inspector: GraphInspector,
) -> TestRunPlan | None:
    """
    Build a deterministic test run plan.

    This function performs *planning only*. It does not touch the file
    system, does not invoke the runner, and does not write the cache.

    Responsibilities:
    - resolve the scheme universe (named scheme or default universe)
    - resolve each scheme's test plan
    - drop schemes without tests
    - split targets into runnable and cached ones
    - drop schemes whose targets are all cached

    Returns
    -------
    TestRunPlan | None
        None when the named scheme was pruned entirely or has no tests
        (the scheme notice has been logged); an empty plan when nothing is
        left to run.
    """

    # ------------------------------------------------------------------
    # 1. Resolve the scheme universe
    # ------------------------------------------------------------------

    universe = resolve_universe(
        graph=graph,
        environment=environment,
        scheme_name=scheme_name,
        inspector=inspector,
    )
    if universe is None:
        return None

    # ------------------------------------------------------------------
    # 2. Decide per scheme, in universe order
    # ------------------------------------------------------------------

    analytics = SelectiveTestsAnalyticsBuilder()
    scheme_runs: list[SchemeRun] = []
    skipped_targets: list[str] = []

    for scheme in universe:
        resolved_plan = resolve_test_plan(scheme, test_plan)

        declared = _declared_scheme(scheme, graph, environment)
        declared_targets = effective_test_targets(declared, resolved_plan)

        if not declared_targets:
            _no_tests_notice(scheme.name)
            if scheme_name is not None:
                return None
            continue

        decision = decide_scheme(
            declared_targets=declared_targets,
            current_targets=effective_test_targets(scheme, resolved_plan),
            environment=environment,
            analytics=analytics,
        )

        skipped_targets.extend(
            name for name in decision.skipped_names if name not in skipped_targets
        )

        if not decision.has_runnable_targets():
            LOGGER.debug(
                "All targets of scheme are cached",
                extra={"scheme": scheme.name},
            )
            continue

        scheme_runs.append(
            SchemeRun(
                scheme=scheme,
                test_plan=resolved_plan,
                decision=decision,
            )
        )

    # ------------------------------------------------------------------
    # 3. Return final plan
    # ------------------------------------------------------------------

    return TestRunPlan(
        scheme_runs=scheme_runs,
        skipped_targets=skipped_targets,
        analytics=analytics.build(),
    )
