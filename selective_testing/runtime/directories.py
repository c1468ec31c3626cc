from __future__ import annotations

import os
from pathlib import Path

from selective_testing.core.ports.directories import CacheDirectoryKind

CACHE_DIR_ENV = "SELECTIVE_TESTING_CACHE_DIR"


class CacheDirectoriesProvider:
    """
    Resolves run-artifact and cache directories.

    The root is ``$SELECTIVE_TESTING_CACHE_DIR`` when set, else
    ``~/.cache/selective-testing``. Directories are not created here.
    """

    def __init__(self, root: str | Path | None = None) -> None:
        if root is None:
            env_root = os.environ.get(CACHE_DIR_ENV)
            root = env_root if env_root else Path.home() / ".cache" / "selective-testing"
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    def directory_for(self, kind: CacheDirectoryKind) -> Path:
        return self._root / kind.value
