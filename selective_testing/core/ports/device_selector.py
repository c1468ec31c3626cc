"""Device selection protocol."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True, slots=True)
class Device:
    udid: str
    name: str
    platform: str
    os_version: str


class DeviceSelector(Protocol):
    def find_available_device(
        self,
        *,
        platform: str,
        os_version: str | None,
        min_version: str | None,
        device_name: str | None,
    ) -> Device:
        """Return a matching device or raise DeviceNotFound."""
