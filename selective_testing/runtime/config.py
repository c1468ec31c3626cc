"""Run configuration models and loading.

The configuration lives in a ``selective-testing.toml`` file at the root
of the project (or any parent directory of the path a run targets).

TOML example:
    full_handle = "acme/app"

    [cache]
    bucket = "build-cache"
    prefix = "selective-tests"
    region = "eu-frankfurt-1"
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

LOGGER = logging.getLogger(__name__)

CONFIG_FILE_NAME = "selective-testing.toml"

_MAX_PARENT_LOOKUPS = 20


class RemoteCacheConfig(BaseModel):
    """Object storage location of the shared cache."""

    bucket: str = Field(..., min_length=1)
    prefix: str = Field(default="selective-tests", min_length=1)
    region: str | None = None
    auth_mode: Literal["instance_principal", "api_key"] = "instance_principal"
    oci_config_file: str | None = None
    oci_profile: str = "DEFAULT"

    model_config = ConfigDict(extra="forbid")


class Config(BaseModel):
    """Project-level configuration of the test service."""

    # Remote project handle ("organization/project"). Runs associated with
    # a handle record their result bundle under the per-run directory.
    full_handle: str | None = Field(default=None, min_length=1)
    cache: RemoteCacheConfig | None = None

    model_config = ConfigDict(extra="forbid")

    @classmethod
    def from_toml_obj(cls, data: dict[str, Any]) -> Config:
        return cls.model_validate(data)


class TestPlanConfiguration(BaseModel):
    """Test plan selection for a run.

    ``configurations`` / ``skip_configurations`` narrow the plan's
    configurations and are handed to the runner verbatim.
    """

    __test__ = False

    test_plan: str = Field(..., min_length=1)
    configurations: list[str] = Field(default_factory=list)
    skip_configurations: list[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid", frozen=True)


class ConfigLoader:
    """Loads Config from the nearest ``selective-testing.toml``."""

    def __init__(self, file_name: str = CONFIG_FILE_NAME) -> None:
        self._file_name = file_name

    def locate(self, path: Path) -> Path | None:
        """Walk upwards from ``path`` until the config file is found."""

        current = Path(path).resolve()
        for _ in range(_MAX_PARENT_LOOKUPS):
            candidate = current / self._file_name
            if candidate.is_file():
                return candidate
            if current.parent == current:
                return None
            current = current.parent
        return None

    def load_config(self, path: Path) -> Config:
        config_path = self.locate(path)
        if config_path is None:
            LOGGER.debug("No config file found, using defaults", extra={"path": str(path)})
            return Config()

        data = tomllib.loads(config_path.read_text(encoding="utf-8"))

        LOGGER.debug("Loaded config", extra={"config_path": str(config_path)})
        return Config.from_toml_obj(data)
