"""Stable public API for building tooling on top of v4lsync.

This module is the supported integration surface for third-party callers
(services exposing get/set requests, GUIs driving the reconfigure loop).
Avoid importing from private/internal modules unless intentionally depending
on non-stable internals.
"""

from __future__ import annotations

from pathlib import Path

from v4lsync.core.errors import (
    AttributeResolutionError,
    EngineStateError,
    ProfileLoadError,
    ProfileSelectionError,
    ProfileValidationError,
    V4lsyncError,
    ValueValidationError,
)
from v4lsync.core.model import (
    AttributeSpec,
    DeviceProfile,
    GetRequest,
    GetResponse,
    Kind,
    Revision,
    SetRequest,
    SetResponse,
    Value,
    WriteRecord,
)
from v4lsync.core.service import DEFAULT_PROFILE, V4lService
from v4lsync.transports.base import DeviceCommandAdapter
from v4lsync.transports.v4lctl import DEFAULT_DEVICE, DEFAULT_TOOL, V4lctlAdapter

__all__ = [
    "V4lsyncError",
    "AttributeResolutionError",
    "EngineStateError",
    "ProfileLoadError",
    "ProfileSelectionError",
    "ProfileValidationError",
    "ValueValidationError",
    "AttributeSpec",
    "DeviceProfile",
    "GetRequest",
    "GetResponse",
    "Kind",
    "Revision",
    "SetRequest",
    "SetResponse",
    "WriteRecord",
    "DeviceCommandAdapter",
    "V4lctlAdapter",
    "Client",
]


class Client:
    """Public client for one v4lctl-controlled device.

    Use as a context manager to get the full lifecycle: the snapshot file is
    replayed to the device and the device read on entry, and the snapshot is
    written back on exit.
    """

    def __init__(
        self,
        *,
        device: str = DEFAULT_DEVICE,
        profile_id: str = DEFAULT_PROFILE,
        snapshot_path: str | Path = "",
        tool: str = DEFAULT_TOOL,
        adapter: DeviceCommandAdapter | None = None,
    ) -> None:
        self._service = V4lService(
            device=device,
            profile_id=profile_id,
            snapshot_path=snapshot_path,
            tool=tool,
            adapter=adapter,
        )

    def __enter__(self) -> Client:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    @property
    def load_warnings(self) -> tuple[str, ...]:
        return self._service.load_warnings

    @property
    def runtime_warnings(self) -> tuple[str, ...]:
        return self._service.runtime_warnings

    @property
    def profile(self) -> DeviceProfile:
        return self._service.profile

    def start(self) -> None:
        self._service.start()

    def stop(self) -> None:
        self._service.stop()

    def get(self, name: str) -> str:
        """Read attribute ``name`` from the device; ``""`` when the read fails."""
        return self._service.get(name)

    def set(self, name: str, value: str) -> bool:
        """Send ``name value`` to the device.

        ``True`` means the control utility ran, not that the device accepted the value.
        """
        return self._service.set(name, value)

    def current(self) -> Revision:
        return self._service.current()

    def configure(self, **changes: Value) -> list[WriteRecord]:
        return self._service.configure(changes)

    def restore_defaults(self) -> list[WriteRecord]:
        return self._service.restore_defaults()
