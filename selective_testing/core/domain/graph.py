"""
Build graph definitions.

A Graph is an immutable snapshot produced once per generation cycle.
It is never mutated by the test service.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Mapping

if TYPE_CHECKING:
    from selective_testing.core.domain.cache import CacheItem


@dataclass(frozen=True, slots=True)
class TargetReference:
    project_path: Path
    name: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "project_path", Path(self.project_path))


@dataclass(frozen=True, slots=True)
class Target:
    """
    A single buildable unit of a project. Identity is ``name``.
    """

    name: str
    bundle_id: str
    platform: str = "ios"
    product: str = "unit_tests"
    deployment_target: str | None = None


@dataclass(frozen=True, slots=True)
class TestPlan:
    __test__ = False

    path: Path
    test_targets: list[TargetReference] = field(default_factory=list)
    is_default: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", Path(self.path))

    @property
    def name(self) -> str:
        return self.path.stem


@dataclass(frozen=True, slots=True)
class TestAction:
    __test__ = False

    targets: list[TargetReference] = field(default_factory=list)
    test_plans: list[TestPlan] = field(default_factory=list)

    @property
    def default_test_plan(self) -> TestPlan | None:
        for plan in self.test_plans:
            if plan.is_default:
                return plan
        return None

    def test_plan(self, name: str) -> TestPlan | None:
        for plan in self.test_plans:
            if plan.name == name:
                return plan
        return None

    def has_test_targets(self) -> bool:
        if self.targets:
            return True
        return any(plan.test_targets for plan in self.test_plans)


@dataclass(frozen=True, slots=True)
class Scheme:
    name: str
    test_action: TestAction | None = None


@dataclass(frozen=True, slots=True)
class Project:
    path: Path
    name: str
    targets: list[Target] = field(default_factory=list)
    schemes: list[Scheme] = field(default_factory=list)

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", Path(self.path))

    def target(self, name: str) -> Target | None:
        for target in self.targets:
            if target.name == name:
                return target
        return None


@dataclass(frozen=True, slots=True)
class Workspace:
    name: str
    path: Path
    schemes: list[Scheme] = field(default_factory=list)

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", Path(self.path))


@dataclass(frozen=True, slots=True)
class Graph:
    """
    Immutable project graph: one workspace plus the projects keyed by path.
    """

    workspace: Workspace
    projects: Mapping[Path, Project] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "projects", {Path(path): project for path, project in self.projects.items()}
        )

    def schemes(self) -> list[Scheme]:
        """Workspace schemes followed by every project's schemes."""
        schemes = list(self.workspace.schemes)
        for project in self.projects.values():
            schemes.extend(project.schemes)
        return schemes

    def project_schemes(self) -> list[tuple[Path, Scheme]]:
        """Every project-level scheme paired with its project path."""
        return [
            (path, scheme)
            for path, project in self.projects.items()
            for scheme in project.schemes
        ]

    def scheme_owner(self, scheme: Scheme) -> Path | None:
        """Path of the project declaring ``scheme``; None for workspace schemes."""
        for path, candidate in self.project_schemes():
            if candidate is scheme:
                return path
        return None

    def project(self, path: Path) -> Project | None:
        return self.projects.get(Path(path))

    def target(self, reference: TargetReference) -> tuple[Project, Target] | None:
        project = self.project(reference.project_path)
        if project is None:
            return None

        target = project.target(reference.name)
        if target is None:
            return None

        return project, target


@dataclass(frozen=True, slots=True)
class RunEnvironment:
    """
    Side channel produced during generation.

    ``initial_graph`` is the graph before already-cached targets were
    pruned. The indices are keyed by project path, then target name.
    """

    initial_graph: Graph | None = None
    target_test_hashes: Mapping[Path, Mapping[str, str]] = field(default_factory=dict)
    target_cache_items: Mapping[Path, Mapping[str, CacheItem]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Lookups go through TargetReference, whose project_path is a Path.
        object.__setattr__(
            self,
            "target_test_hashes",
            {Path(path): dict(hashes) for path, hashes in self.target_test_hashes.items()},
        )
        object.__setattr__(
            self,
            "target_cache_items",
            {Path(path): dict(items) for path, items in self.target_cache_items.items()},
        )

    def test_hash(self, reference: TargetReference) -> str | None:
        return self.target_test_hashes.get(reference.project_path, {}).get(reference.name)

    def cache_item(self, reference: TargetReference) -> CacheItem | None:
        return self.target_cache_items.get(reference.project_path, {}).get(reference.name)
