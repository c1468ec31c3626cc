"""Generator protocols.

Project generation is an external concern. The test service only asks a
generator for the output path, the (possibly pruned) graph, and the run
environment that carries the pre-pruning graph plus hash/cache indices.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from selective_testing.core.domain.graph import Graph, RunEnvironment
    from selective_testing.core.ports.cache_storage import CacheStoring
    from selective_testing.runtime.config import Config


class Generator(Protocol):
    def generate_with_graph(self, path: Path) -> tuple[Path, Graph, RunEnvironment]:
        """Generate the project at ``path``. Failures propagate as fatal."""


class GeneratorFactory(Protocol):
    def testing(
        self,
        *,
        config: Config,
        test_plan: str | None,
        included_targets: set[str],
        excluded_targets: set[str],
        skip_ui_tests: bool,
        configuration: str | None,
        ignore_binary_cache: bool,
        ignore_selective_testing: bool,
        cache_storage: CacheStoring,
    ) -> Generator:
        """Return a generator configured for a test run."""
