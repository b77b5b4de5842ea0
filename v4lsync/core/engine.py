"""Parameter synchronization between typed revisions and the device."""

from __future__ import annotations

import logging
from pathlib import Path

from v4lsync.core import codec
from v4lsync.core.errors import AttributeResolutionError, EngineStateError
from v4lsync.core.model import DeviceProfile, Revision, Value, WriteRecord
from v4lsync.core.snapshot import SnapshotStore
from v4lsync.transports.base import DeviceCommandAdapter

LOGGER = logging.getLogger(__name__)


class SyncEngine:
    """Owns the current revision and the snapshot store for one device.

    Calls are expected to be serialized by the caller; nothing here locks.
    """

    def __init__(
        self,
        profile: DeviceProfile,
        adapter: DeviceCommandAdapter,
        store: SnapshotStore | None = None,
    ) -> None:
        self.profile = profile
        self.adapter = adapter
        self.store = store if store is not None else SnapshotStore()
        self._current: Revision | None = None

    @property
    def current(self) -> Revision:
        if self._current is None:
            raise EngineStateError("Engine has no current revision; call initialize() first")
        return self._current

    @property
    def initialized(self) -> bool:
        return self._current is not None

    def read_revision(self, use_defaults: bool = False) -> Revision:
        values: dict[str, Value] = {}
        for spec in self.profile.attributes:
            raw = "" if use_defaults else self.adapter.read(spec.name)
            values[spec.field] = codec.decode(spec, raw, use_defaults)
        return Revision(values)

    def initialize(self, use_defaults: bool = False) -> Revision:
        self._current = self.read_revision(use_defaults)
        LOGGER.info("Initialized %s from %s", self.profile.id, "defaults" if use_defaults else "device")
        return self._current

    def write(self, command: str, value: str) -> bool:
        if not self.adapter.write(command, value):
            return False
        self.store.record(command, value)
        return True

    def reconcile(self, new: Revision) -> list[WriteRecord]:
        """Write every field of ``new`` that differs from the current revision.

        Fields are processed in profile order. Failed writes are reported but
        neither retried nor rolled back; ``new`` becomes current either way.
        Changed values are checked against their attribute before the first
        write; a rejected value leaves all state as it was.
        """
        current = self.current
        changed = []
        for spec in self.profile.attributes:
            if spec.field not in new:
                raise AttributeResolutionError(f"Revision is missing field '{spec.field}'")
            value = new[spec.field]
            if value == current[spec.field] and type(value) is type(current[spec.field]):
                continue
            codec.check_value(spec, value)
            changed.append((spec, value))

        records: list[WriteRecord] = []
        for spec, value in changed:
            text = codec.encode(spec, value)
            success = self.write(spec.command, text)
            if not success:
                LOGGER.warning("Write of %s=%s failed", spec.field, text)
            records.append(WriteRecord(field=spec.field, command=spec.command, value=text, success=success))
        self._current = new
        return records

    def update(self, **changes: Value) -> list[WriteRecord]:
        return self.reconcile(self.current.replace(**changes))

    def restore_defaults(self) -> list[WriteRecord]:
        return self.reconcile(self.read_revision(use_defaults=True))

    def restore(self, path: str | Path) -> int:
        """Replay a snapshot file to the device; returns the number of executed writes."""
        executed = 0
        for key, value in self.store.load(path).items():
            if self.write(codec.demangle(key), value):
                executed += 1
        if executed:
            LOGGER.info("Restored %d value(s) from %s", executed, path)
        return executed

    def flush(self, path: str | Path) -> None:
        self.store.flush(path)
