"""Run-artifact directory protocol."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Protocol


class CacheDirectoryKind(str, Enum):
    RUNS = "runs"
    SELECTIVE_TESTS = "selective_tests"


class CacheDirectoriesProviding(Protocol):
    def directory_for(self, kind: CacheDirectoryKind) -> Path:
        """Return the directory for ``kind`` (it may not exist yet)."""
