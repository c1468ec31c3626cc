"""Error taxonomy of the selective test service.

Every error is fatal for the run that raised it. Errors carry the
structured fields they were built from so callers can inspect them
without parsing the message.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from selective_testing.core.domain.test_identifier import TestIdentifier


class TestServiceError(Exception):
    """Base class for errors raised while selecting and running tests."""

    # Not a pytest test class despite the name.
    __test__ = False


class TestIdentifierError(TestServiceError, ValueError):
    """A test identifier could not be parsed or is inconsistent."""

    def __init__(self, value: str, reason: str) -> None:
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid test identifier '{value}': {reason}")


class DuplicatedTestTargets(TestServiceError):
    def __init__(self, identifiers: Iterable[TestIdentifier]) -> None:
        self.identifiers = frozenset(identifiers)
        rendered = ", ".join(sorted(str(identifier) for identifier in self.identifiers))
        super().__init__(
            "The same test identifiers cannot be both included and skipped "
            f"(were specified: {rendered})"
        )


class NothingToSkip(TestServiceError):
    def __init__(
        self,
        *,
        skipped: Iterable[TestIdentifier],
        included: Iterable[TestIdentifier],
    ) -> None:
        self.skipped = list(skipped)
        self.included = list(included)
        super().__init__(
            "Some of the skipped test identifiers are not part of the included ones. "
            f"Skipped: {', '.join(str(s) for s in self.skipped)}. "
            f"Included: {', '.join(str(i) for i in self.included)}"
        )


class SchemeNotFound(TestServiceError):
    def __init__(self, *, scheme: str, existing: Iterable[str]) -> None:
        self.scheme = scheme
        self.existing = list(existing)
        super().__init__(
            f"Couldn't find scheme {scheme}. "
            f"The available schemes are: {', '.join(self.existing)}."
        )


class TestPlanNotFound(TestServiceError):
    def __init__(
        self,
        *,
        scheme: str,
        passed_test_plan: str,
        existing: Iterable[str],
    ) -> None:
        self.scheme = scheme
        self.passed_test_plan = passed_test_plan
        self.existing = list(existing)
        super().__init__(
            f"The test plan '{passed_test_plan}' does not exist in scheme '{scheme}'. "
            f"Available test plans: {', '.join(self.existing)}."
        )


class SchemeWithoutTestableTargets(TestServiceError):
    def __init__(self, *, scheme: str, test_plan: str | None) -> None:
        self.scheme = scheme
        self.test_plan = test_plan
        detail = f" and test plan {test_plan}" if test_plan is not None else ""
        super().__init__(
            f"The scheme {scheme}{detail} does not reference any testable target."
        )


class DeviceNotFound(TestServiceError):
    def __init__(
        self,
        *,
        platform: str | None,
        os_version: str | None,
        device_name: str | None,
    ) -> None:
        self.platform = platform
        self.os_version = os_version
        self.device_name = device_name
        super().__init__(
            "No available device matches "
            f"platform={platform}, os_version={os_version}, name={device_name}"
        )
