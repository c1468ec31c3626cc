"""
Read-only queries over a build graph.

Every method is a pure function of its arguments; the inspector keeps no
state and performs no caching.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Sequence

if TYPE_CHECKING:
    from selective_testing.core.domain.graph import (
        Graph,
        Project,
        Scheme,
        Target,
        TargetReference,
    )
    from selective_testing.core.domain.test_identifier import TestIdentifier


# Simulator SDK used to build tests for each platform.
_PLATFORM_SDKS: dict[str, str] = {
    "ios": "iphonesimulator",
    "tvos": "appletvsimulator",
    "watchos": "watchsimulator",
    "visionos": "xrsimulator",
    "macos": "macosx",
}

_SKIP_SIGNING_ARGUMENTS: tuple[str, ...] = (
    "CODE_SIGN_IDENTITY=",
    "CODE_SIGNING_REQUIRED=NO",
    "CODE_SIGNING_ALLOWED=NO",
)


def effective_test_targets(
    scheme: Scheme,
    test_plan: str | None,
) -> list[TargetReference]:
    """
    Target references a scheme tests.

    A named test plan wins, then the default plan, then the test
    action's own targets. Unknown plan names yield no targets.
    """
    action = scheme.test_action
    if action is None:
        return []

    if test_plan is not None:
        plan = action.test_plan(test_plan)
        return list(plan.test_targets) if plan is not None else []

    default_plan = action.default_test_plan
    if default_plan is not None:
        return list(default_plan.test_targets)

    return list(action.targets)


def _dedupe_by_name(schemes: Iterable[Scheme]) -> list[Scheme]:
    seen: set[str] = set()
    unique: list[Scheme] = []
    for scheme in schemes:
        if scheme.name in seen:
            continue
        seen.add(scheme.name)
        unique.append(scheme)
    return unique


class GraphInspector:
    """Graph query facade used by the test service."""

    def testable_schemes(self, graph: Graph) -> list[Scheme]:
        """Schemes whose test action references at least one target."""
        testable = [
            scheme
            for scheme in graph.schemes()
            if scheme.test_action is not None and scheme.test_action.has_test_targets()
        ]
        return sorted(_dedupe_by_name(testable), key=lambda scheme: scheme.name)

    def workspace_schemes(self, graph: Graph) -> list[Scheme]:
        """
        Default scheme universe.

        Workspace-level schemes come first. Each project then contributes
        the schemes a workspace scheme of the same name does not cover.
        """
        workspace = list(graph.workspace.schemes)
        covered = {scheme.name for scheme in workspace}

        # Projects are distinct owners; only workspace names shadow them.
        return workspace + [
            scheme
            for _, scheme in graph.project_schemes()
            if scheme.name not in covered
        ]

    def testable_target(
        self,
        *,
        scheme: Scheme,
        test_plan: str | None,
        test_targets: Sequence[TestIdentifier],
        skip_test_targets: Sequence[TestIdentifier],
        graph: Graph,
    ) -> tuple[Project, Target] | None:
        """
        Resolve the target a scheme's include/exclude filters apply to.

        Skip identifiers without a class exclude the whole target. When
        include identifiers are given, only their targets qualify.
        """
        included = {identifier.target for identifier in test_targets}
        excluded = {
            identifier.target
            for identifier in skip_test_targets
            if identifier.class_name is None
        }

        for reference in effective_test_targets(scheme, test_plan):
            if reference.name in excluded:
                continue
            if included and reference.name not in included:
                continue

            resolved = graph.target(reference)
            if resolved is not None:
                return resolved

        return None

    def build_arguments(
        self,
        *,
        project: Project,
        target: Target,
        configuration: str | None,
        skip_signing: bool,
    ) -> list[str]:
        """Build settings the runner needs for ``target`` of ``project``."""
        arguments: list[str] = []

        if configuration is not None:
            arguments.extend(["-configuration", configuration])

        sdk = _PLATFORM_SDKS.get(target.platform.lower())
        if sdk is not None:
            arguments.extend(["-sdk", sdk])

        if skip_signing:
            arguments.extend(_SKIP_SIGNING_ARGUMENTS)

        return arguments
