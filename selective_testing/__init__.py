"""Public API for the selective_testing package.

Only symbols imported here are considered part of the stable,
supported external interface.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

# ----------------------------------------------------------------------
# Analytics
# ----------------------------------------------------------------------
from selective_testing.core.analytics.analytics_bus import AnalyticsBus
from selective_testing.core.analytics.analytics_sink import AnalyticsSink

# ----------------------------------------------------------------------
# Domain Types
# ----------------------------------------------------------------------
from selective_testing.core.domain.cache import (
    CacheCategory,
    CacheItem,
    CacheSource,
    CacheStorableItem,
    SelectiveTestsAnalytics,
)
from selective_testing.core.domain.errors import (
    DeviceNotFound,
    DuplicatedTestTargets,
    NothingToSkip,
    SchemeNotFound,
    SchemeWithoutTestableTargets,
    TestIdentifierError,
    TestPlanNotFound,
    TestServiceError,
)
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
from selective_testing.core.domain.test_identifier import TestIdentifier

# ----------------------------------------------------------------------
# Ports (implemented by consumers)
# ----------------------------------------------------------------------
from selective_testing.core.ports.device_selector import Device, DeviceSelector
from selective_testing.core.ports.generator import Generator, GeneratorFactory
from selective_testing.core.ports.test_runner import TestRunner

# ----------------------------------------------------------------------
# Config API
# ----------------------------------------------------------------------
from selective_testing.runtime.cache_storage import CacheStorageFactory
from selective_testing.runtime.config import Config, ConfigLoader, TestPlanConfiguration
from selective_testing.runtime.directories import CacheDirectoriesProvider

# ----------------------------------------------------------------------
# Test Service
# ----------------------------------------------------------------------
from selective_testing.runtime.test_service import TestService
from selective_testing.selection.graph_inspector import GraphInspector

# ----------------------------------------------------------------------
# Public API definition
# ----------------------------------------------------------------------

__all__ = [
    # Service
    "TestService",
    "GraphInspector",

    # Config
    "Config",
    "ConfigLoader",
    "TestPlanConfiguration",
    "CacheDirectoriesProvider",
    "CacheStorageFactory",

    # Ports
    "Generator",
    "GeneratorFactory",
    "TestRunner",
    "Device",
    "DeviceSelector",

    # Analytics
    "AnalyticsBus",
    "AnalyticsSink",

    # Domain
    "TestIdentifier",
    "Graph",
    "Project",
    "RunEnvironment",
    "Scheme",
    "Target",
    "TargetReference",
    "TestAction",
    "TestPlan",
    "Workspace",
    "CacheCategory",
    "CacheItem",
    "CacheSource",
    "CacheStorableItem",
    "SelectiveTestsAnalytics",

    # Errors
    "TestServiceError",
    "TestIdentifierError",
    "DuplicatedTestTargets",
    "NothingToSkip",
    "SchemeNotFound",
    "TestPlanNotFound",
    "SchemeWithoutTestableTargets",
    "DeviceNotFound",

    # Version
    "__version__",
]

# ----------------------------------------------------------------------
# Package version
# ----------------------------------------------------------------------

try:
    __version__ = version("selective-testing")
except PackageNotFoundError:
    __version__ = "0.0.0"
