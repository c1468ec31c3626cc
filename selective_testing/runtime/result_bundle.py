from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from selective_testing.core.ports.directories import CacheDirectoryKind

if TYPE_CHECKING:
    from selective_testing.core.ports.directories import CacheDirectoriesProviding
    from selective_testing.runtime.config import Config

LOGGER = logging.getLogger(__name__)

RESULT_BUNDLE_NAME = "result-bundle"
RESULT_BUNDLE_SUFFIX = ".xcresult"


class ResultBundleLocator:
    """
    Decides where the runner writes its result bundle.

    The canonical location of a run's bundle is

        <runs dir>/<run_id>/result-bundle.xcresult

    so downstream tooling can find it by run id alone.
    """

    def __init__(self, *, directories: CacheDirectoriesProviding) -> None:
        self._directories = directories

    def run_result_bundle_path(self, run_id: str) -> Path:
        return (
            self._directories.directory_for(CacheDirectoryKind.RUNS)
            / run_id
            / f"{RESULT_BUNDLE_NAME}{RESULT_BUNDLE_SUFFIX}"
        )

    def resolve(
        self,
        *,
        run_id: str,
        passed_path: Path | None,
        config: Config,
    ) -> Path:
        """
        Return the path handed to the runner.

        - no path passed: the canonical per-run path
        - a symlink to an ``.xcresult`` directory: the symlink target
        - anything else: the passed path as given

        When the run is associated with a remote project handle, a passed
        path is additionally linked from the canonical location.
        """
        run_path = self.run_result_bundle_path(run_id)

        if passed_path is None:
            run_path.parent.mkdir(parents=True, exist_ok=True)
            return run_path

        resolved = self._resolve_passed(Path(passed_path))

        if config.full_handle is not None:
            self._link_into_run_directory(run_path=run_path, bundle_path=resolved)

        return resolved

    @staticmethod
    def _resolve_passed(path: Path) -> Path:
        # Symlink probe first; a symlink is never treated as a plain directory.
        if path.is_symlink():
            target = path.resolve()
            if target.suffix == RESULT_BUNDLE_SUFFIX and target.is_dir():
                return target
            return path

        return path

    @staticmethod
    def _link_into_run_directory(*, run_path: Path, bundle_path: Path) -> None:
        if run_path.exists() or run_path.is_symlink():
            return

        run_path.parent.mkdir(parents=True, exist_ok=True)
        run_path.symlink_to(bundle_path, target_is_directory=True)

        LOGGER.info(
            "Result bundle linked into run directory",
            extra={"run_path": str(run_path), "bundle_path": str(bundle_path)},
        )
