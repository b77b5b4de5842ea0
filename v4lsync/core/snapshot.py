"""Persistent mirror of every value successfully written to the device."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import yaml

from v4lsync.core.codec import mangle
from v4lsync.core.errors import DuplicateKeyError
from v4lsync.core.yamlio import load_yaml

LOGGER = logging.getLogger(__name__)


class SnapshotStore:
    """Mapping of mangled write command to the last value that command was sent with.

    Entries are only added for writes the device adapter reported as executed.
    The backing file is a flat YAML mapping; an empty path disables persistence.
    """

    def __init__(self) -> None:
        self._entries: dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def get(self, key: str) -> str | None:
        return self._entries.get(key)

    def items(self) -> list[tuple[str, str]]:
        return list(self._entries.items())

    def as_dict(self) -> dict[str, str]:
        return dict(self._entries)

    def record(self, command: str, value: str) -> None:
        self._entries[mangle(command)] = value

    def merge(self, entries: dict[str, str]) -> None:
        """Adopt already-mangled entries, e.g. the result of :meth:`load`."""
        self._entries.update(entries)

    def load(self, path: str | Path) -> dict[str, str]:
        """Read a snapshot file without touching the in-memory entries.

        Missing, unreadable or malformed files mean "no prior state" and give
        an empty mapping.
        """
        if not path:
            return {}
        try:
            content = Path(path).read_text(encoding="utf-8")
        except FileNotFoundError:
            LOGGER.info("No snapshot at %s", path)
            return {}
        except OSError as exc:
            LOGGER.warning("Could not read snapshot %s: %s", path, exc)
            return {}

        try:
            loaded = load_yaml(content)
        except (yaml.YAMLError, DuplicateKeyError) as exc:
            LOGGER.warning("Ignoring malformed snapshot %s: %s", path, exc)
            return {}

        if loaded is None:
            return {}
        if not isinstance(loaded, dict):
            LOGGER.warning("Ignoring snapshot %s: root is not a mapping", path)
            return {}
        entries: dict[str, str] = {}
        for key, value in loaded.items():
            if value is None:
                LOGGER.warning("Ignoring snapshot entry %s without a value", key)
                continue
            entries[str(key)] = str(value)
        return entries

    def flush(self, path: str | Path) -> None:
        if not path:
            return
        try:
            Path(path).write_text(
                yaml.safe_dump(self._entries, default_flow_style=False, sort_keys=True),
                encoding="utf-8",
            )
        except OSError as exc:
            LOGGER.warning("Could not write snapshot %s: %s", path, exc)
            return
        LOGGER.info("Wrote %d snapshot entries to %s", len(self._entries), path)
