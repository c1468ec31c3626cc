"""
Semantic test: identifier parsing.

Invariant:
"t/c/m" parses to target t, class c, method m and re-serializes to the
same string; "t" addresses the whole target. Malformed identifiers are
rejected.
"""

from __future__ import annotations

import pytest

from selective_testing.core.domain.errors import TestIdentifierError
from selective_testing.core.domain.test_identifier import TestIdentifier


def test_full_identifier_round_trips() -> None:
    identifier = TestIdentifier.from_string("t/c/m")

    assert identifier == TestIdentifier(target="t", class_name="c", method="m")
    assert str(identifier) == "t/c/m"


def test_target_only_identifier() -> None:
    identifier = TestIdentifier.from_string("t")

    assert identifier.target == "t"
    assert identifier.class_name is None
    assert identifier.method is None
    assert str(identifier) == "t"


@pytest.mark.parametrize("value", ["", "t//m", "/c", "t/c/", "t/c/m/x"])
def test_malformed_identifiers_are_rejected(value: str) -> None:
    with pytest.raises(TestIdentifierError):
        TestIdentifier.from_string(value)


def test_method_requires_class() -> None:
    with pytest.raises(TestIdentifierError):
        TestIdentifier(target="t", method="m")


def test_identifier_error_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        TestIdentifier(target="")
