"""Device command adapter interface."""

from __future__ import annotations

from typing import Protocol


class DeviceCommandAdapter(Protocol):
    def read(self, name: str) -> str:
        """Return the current value token of attribute ``name``, or ``""``."""

    def write(self, command: str, value: str) -> bool:
        """Run ``command value`` against the device.

        ``True`` means the command executed, not that the device accepted it.
        """
