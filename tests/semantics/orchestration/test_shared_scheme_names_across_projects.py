"""
Semantic test: project schemes sharing a name.

Invariant:
Without a scheme name, every project contributes its own schemes; only
a workspace scheme of the same name shadows a project scheme. Two
projects declaring a scheme with the same name are both run, and the
targets of both are written back.
"""

from __future__ import annotations

from pathlib import Path

from selective_testing.core.domain.cache import CacheCategory, CacheStorableItem
from selective_testing.core.domain.graph import (
    Graph,
    Project,
    RunEnvironment,
    Scheme,
    Target,
    TargetReference,
    TestAction,
    Workspace,
)
from selective_testing.core.domain.test_identifier import TestIdentifier

X = Path("/workspace/X")
Y = Path("/workspace/Y")


def _project(path: Path, target: str) -> Project:
    return Project(
        path=path,
        name=path.name,
        targets=[Target(name=target, bundle_id=f"io.{path.name}.{target}")],
        schemes=[
            Scheme(
                name="Tests",
                test_action=TestAction(targets=[TargetReference(project_path=path, name=target)]),
            )
        ],
    )


def _graph(workspace_schemes: list[Scheme] | None = None) -> Graph:
    return Graph(
        workspace=Workspace(
            name="App",
            path=Path("/workspace/App.xcworkspace"),
            schemes=list(workspace_schemes or []),
        ),
        projects={X: _project(X, "XTests"), Y: _project(Y, "YTests")},
    )


ENVIRONMENT = RunEnvironment(target_test_hashes={X: {"XTests": "hash-x"}, Y: {"YTests": "hash-y"}})


def test_both_projects_run_their_scheme(make_harness) -> None:
    harness = make_harness(_graph(), ENVIRONMENT)

    harness.run()

    assert harness.runner.schemes == ["Tests", "Tests"]
    assert [call["test_targets"] for call in harness.runner.calls] == [
        [TestIdentifier(target="XTests")],
        [TestIdentifier(target="YTests")],
    ]
    assert harness.storages.configured.calls == [
        (
            {
                CacheStorableItem(name="XTests", hash="hash-x"): [],
                CacheStorableItem(name="YTests", hash="hash-y"): [],
            },
            CacheCategory.SELECTIVE_TESTS,
        )
    ]
    assert harness.analytics_sink.records[0]["analytics"].test_targets == {"XTests", "YTests"}


def test_workspace_scheme_shadows_project_schemes(make_harness) -> None:
    workspace_tests = Scheme(
        name="Tests",
        test_action=TestAction(targets=[TargetReference(project_path=X, name="XTests")]),
    )
    harness = make_harness(_graph([workspace_tests]), ENVIRONMENT)

    harness.run()

    assert harness.runner.schemes == ["Tests"]
    assert harness.runner.calls[0]["test_targets"] == [TestIdentifier(target="XTests")]
