"""Service layer used by CLI and future UI frontends."""

from __future__ import annotations

import logging
from pathlib import Path

from v4lsync.core.engine import SyncEngine
from v4lsync.core.errors import ProfileSelectionError
from v4lsync.core.handlers import RequestHandlers
from v4lsync.core.model import DeviceProfile, GetRequest, Revision, SetRequest, Value, WriteRecord
from v4lsync.core.profile_loader import load_profiles
from v4lsync.transports.base import DeviceCommandAdapter
from v4lsync.transports.v4lctl import DEFAULT_DEVICE, DEFAULT_TOOL, V4lctlAdapter

LOGGER = logging.getLogger(__name__)

DEFAULT_PROFILE = "osprey440"


class V4lService:
    """Wires profile, adapter, snapshot file and engine for one device.

    ``start()`` replays the snapshot and reads the device, ``stop()`` writes
    the snapshot back.
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
        loaded = load_profiles()
        self.profiles = loaded.profiles
        self.load_warnings = loaded.warnings
        profile = self.profiles.get(profile_id)
        if profile is None:
            available = ", ".join(sorted(self.profiles))
            raise ProfileSelectionError(f"Unknown profile '{profile_id}'. Available: {available}")
        self.profile: DeviceProfile = profile
        self.snapshot_path = snapshot_path
        if adapter is None:
            adapter = V4lctlAdapter(device, tool=tool)
        self.adapter = adapter
        self.runtime_warnings = _runtime_warnings(adapter)
        self.engine = SyncEngine(profile, adapter)
        self.handlers = RequestHandlers(self.engine)

    def list_profiles(self) -> list[DeviceProfile]:
        return sorted(self.profiles.values(), key=lambda p: p.id)

    def start(self, *, replay: bool = True, read_device: bool = True) -> None:
        if replay:
            self.engine.restore(self.snapshot_path)
        else:
            # keep earlier entries so the next flush does not drop them
            self.engine.store.merge(self.engine.store.load(self.snapshot_path))
        if read_device:
            self.engine.initialize()

    def stop(self) -> None:
        self.engine.flush(self.snapshot_path)

    def get(self, name: str) -> str:
        return self.handlers.get(GetRequest(name=name)).result

    def set(self, name: str, value: str) -> bool:
        return self.handlers.set(SetRequest(name=name, value=value)).success

    def current(self) -> Revision:
        if not self.engine.initialized:
            self.engine.initialize()
        return self.engine.current

    def configure(self, changes: dict[str, Value]) -> list[WriteRecord]:
        for field_name in changes:
            self.profile.attribute(field_name)
        return self.engine.update(**changes)

    def restore_defaults(self) -> list[WriteRecord]:
        return self.engine.restore_defaults()


def _runtime_warnings(adapter: DeviceCommandAdapter) -> tuple[str, ...]:
    warnings: list[str] = []
    available = getattr(adapter, "available", None)
    if available is not None and not available():
        tool = getattr(adapter, "tool", DEFAULT_TOOL)
        warnings.append(f"'{tool}' not found on PATH; device reads will be empty and writes will fail.")
    return tuple(warnings)
