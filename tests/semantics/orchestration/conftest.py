"""
Fakes for the test service ports.

Every fake records what it was asked to do so tests can assert on the
interaction without a real generator, runner, device list or cache.
"""

# pylint: disable=missing-function-docstring,missing-class-docstring
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

import pytest

from selective_testing.core.domain.cache import CacheCategory, CacheItem, CacheSource
from selective_testing.core.domain.errors import DeviceNotFound
from selective_testing.core.domain.graph import (
    Graph,
    Project,
    RunEnvironment,
    Scheme,
    Target,
    TargetReference,
    TestAction,
    TestPlan,
    Workspace,
)
from selective_testing.core.ports.device_selector import Device
from selective_testing.runtime.directories import CacheDirectoriesProvider
from selective_testing.runtime.test_service import TestService

PROJECT_PATH = Path("/workspace/App")
OUTPUT_PATH = Path("/workspace/App.xcworkspace")


# ---------------------------------------------------------------------------
# Graph building
# ---------------------------------------------------------------------------

class GraphFactory:
    """Builds single-project graphs keyed by PROJECT_PATH."""

    project_path = PROJECT_PATH

    def ref(self, name: str) -> TargetReference:
        return TargetReference(project_path=self.project_path, name=name)

    def test_plan(self, name: str, targets: list[str], *, is_default: bool = False) -> TestPlan:
        return TestPlan(
            path=self.project_path / f"{name}.xctestplan",
            test_targets=[self.ref(t) for t in targets],
            is_default=is_default,
        )

    def scheme(
        self,
        name: str,
        targets: list[str] | None = None,
        test_plans: list[TestPlan] | None = None,
    ) -> Scheme:
        return Scheme(
            name=name,
            test_action=TestAction(
                targets=[self.ref(t) for t in targets or []],
                test_plans=list(test_plans or []),
            ),
        )

    def graph(
        self,
        *,
        targets: list[str],
        schemes: list[Scheme] | None = None,
        workspace_schemes: list[Scheme] | None = None,
    ) -> Graph:
        project = Project(
            path=self.project_path,
            name="App",
            targets=[
                Target(name=t, bundle_id=f"io.app.{t}", deployment_target="17.0")
                for t in targets
            ],
            schemes=list(schemes or []),
        )
        return Graph(
            workspace=Workspace(
                name="App",
                path=OUTPUT_PATH,
                schemes=list(workspace_schemes or []),
            ),
            projects={self.project_path: project},
        )

    def hashes(self, *names: str) -> dict[Path, dict[str, str]]:
        return {self.project_path: {name: f"hash-{name.lower()}" for name in names}}

    def cache_items(self, **sources: CacheSource) -> dict[Path, dict[str, CacheItem]]:
        return {
            self.project_path: {
                name: CacheItem(
                    name=name,
                    hash=f"hash-{name.lower()}",
                    source=source,
                    cache_category=CacheCategory.SELECTIVE_TESTS,
                )
                for name, source in sources.items()
            }
        }


@pytest.fixture
def graphs() -> GraphFactory:
    return GraphFactory()


# ---------------------------------------------------------------------------
# Port fakes
# ---------------------------------------------------------------------------

class RunnerFailed(RuntimeError):
    pass


class RecordingRunner:
    def __init__(self, fail_on: str | None = None) -> None:
        self.calls: list[dict[str, Any]] = []
        self._fail_on = fail_on

    def test(self, project_path: Path, **kwargs: Any) -> None:
        self.calls.append({"project_path": project_path, **kwargs})
        if kwargs["scheme"] == self._fail_on:
            raise RunnerFailed(f"{kwargs['scheme']} failed")

    @property
    def schemes(self) -> list[str]:
        return [call["scheme"] for call in self.calls]


class FakeGenerator:
    def __init__(self, graph: Graph, environment: RunEnvironment) -> None:
        self._graph = graph
        self._environment = environment
        self.generated_paths: list[Path] = []

    def generate_with_graph(self, path: Path) -> tuple[Path, Graph, RunEnvironment]:
        self.generated_paths.append(path)
        return OUTPUT_PATH, self._graph, self._environment


class FakeGeneratorFactory:
    def __init__(self, generator: FakeGenerator) -> None:
        self.generator = generator
        self.calls: list[dict[str, Any]] = []

    def testing(self, **kwargs: Any) -> FakeGenerator:
        self.calls.append(kwargs)
        return self.generator


class RecordingStorage:
    def __init__(self, label: str) -> None:
        self.label = label
        self.calls: list[tuple[dict, CacheCategory]] = []

    def store(self, items, cache_category: CacheCategory) -> None:
        self.calls.append((dict(items), cache_category))


class FakeCacheStorageFactory:
    def __init__(self) -> None:
        self.configured = RecordingStorage("configured")
        self.local = RecordingStorage("local")

    def cache_storage(self, config) -> RecordingStorage:
        return self.configured

    def cache_local_storage(self) -> RecordingStorage:
        return self.local


class FakeDeviceSelector:
    def __init__(self, device: Device | None = None) -> None:
        self._device = device
        self.calls: list[dict[str, Any]] = []

    def find_available_device(self, **kwargs: Any) -> Device:
        self.calls.append(kwargs)
        if self._device is None:
            raise DeviceNotFound(
                platform=kwargs["platform"],
                os_version=kwargs["os_version"],
                device_name=kwargs["device_name"],
            )
        return self._device


@pytest.fixture
def make_runner() -> Callable[..., RecordingRunner]:
    return RecordingRunner


class RecordingAnalyticsSink:
    def __init__(self) -> None:
        self.records: list[dict[str, Any]] = []

    def record(self, **kwargs: Any) -> None:
        self.records.append(kwargs)


# ---------------------------------------------------------------------------
# Harness
# ---------------------------------------------------------------------------

@dataclass
class Harness:
    service: TestService
    runner: RecordingRunner
    generator_factory: FakeGeneratorFactory
    storages: FakeCacheStorageFactory
    device_selector: FakeDeviceSelector
    analytics_sink: RecordingAnalyticsSink
    directories: CacheDirectoriesProvider
    project_dir: Path

    def run(self, **overrides: Any) -> None:
        kwargs: dict[str, Any] = {
            "run_id": "run-1",
            "path": self.project_dir,
            "analytics_sink": self.analytics_sink,
        }
        kwargs.update(overrides)
        self.service.run(**kwargs)


@pytest.fixture
def make_harness(tmp_path: Path) -> Callable[..., Harness]:
    def _make(
        graph: Graph,
        environment: RunEnvironment | None = None,
        *,
        runner: RecordingRunner | None = None,
        device: Device | None = None,
    ) -> Harness:
        project_dir = tmp_path / "project"
        project_dir.mkdir(exist_ok=True)

        runner = runner or RecordingRunner()
        generator_factory = FakeGeneratorFactory(
            FakeGenerator(graph, environment or RunEnvironment())
        )
        storages = FakeCacheStorageFactory()
        device_selector = FakeDeviceSelector(device)
        directories = CacheDirectoriesProvider(tmp_path / "cache")

        service = TestService(
            generator_factory=generator_factory,
            cache_storage_factory=storages,
            test_runner=runner,
            device_selector=device_selector,
            directories=directories,
        )
        return Harness(
            service=service,
            runner=runner,
            generator_factory=generator_factory,
            storages=storages,
            device_selector=device_selector,
            analytics_sink=RecordingAnalyticsSink(),
            directories=directories,
            project_dir=project_dir,
        )

    return _make
