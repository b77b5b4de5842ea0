"""Device profile loading and validation for YAML-based v4lsync profiles."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError, validators

from v4lsync.core.errors import DuplicateKeyError, ProfileLoadError, ProfileValidationError
from v4lsync.core.model import AttributeSpec, DeviceProfile, Kind, Value
from v4lsync.core.yamlio import load_yaml

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadedProfiles:
    profiles: dict[str, DeviceProfile]
    warnings: tuple[str, ...]


def _load_schema_validator() -> Any:
    schema_text = resources.files("v4lsync.schemas").joinpath("profile.schema.json").read_text(
        encoding="utf-8"
    )
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def _profile_dirs() -> tuple[Path, Path]:
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    xdg_data = Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local/share"))
    return xdg_config / "v4lsync/profiles", xdg_data / "v4lsync/profiles"


def _read_yaml(path: Path | Traversable) -> dict[str, Any]:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ProfileLoadError(f"Could not read profile file {path}: {exc}") from exc

    try:
        loaded = load_yaml(content)
    except DuplicateKeyError as exc:
        raise ProfileValidationError(f"{exc} ({path})") from exc
    except yaml.YAMLError as exc:
        raise ProfileValidationError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(loaded, dict):
        raise ProfileValidationError(f"Profile file {path} must contain a mapping at root")
    return loaded


def _normalize_bool(value: Any, *, context: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "on"}:
            return True
        if lowered in {"false", "off"}:
            return False
    raise ProfileValidationError(f"{context} must be boolean on/off or true/false")


def _normalize_int(value: Any, *, context: str) -> int:
    if isinstance(value, bool):
        raise ProfileValidationError(f"{context} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ProfileValidationError(f"{context} must be an integer") from exc


def _optional_int(entry: dict[str, Any], key: str, *, context: str) -> int | None:
    if key not in entry:
        return None
    return _normalize_int(entry[key], context=f"{context}.{key}")


def _build_attribute(entry: dict[str, Any], *, profile_id: str) -> AttributeSpec:
    context = f"{profile_id}.{entry['field']}"
    kind = Kind(entry["kind"])
    hardware_max = _optional_int(entry, "hardware_max", context=context)
    minimum = _optional_int(entry, "minimum", context=context)
    maximum = _optional_int(entry, "maximum", context=context)
    choices = tuple(str(choice) for choice in entry.get("choices", []))

    default: Value
    if kind is Kind.BOOL:
        default = _normalize_bool(entry["default"], context=f"{context}.default")
    elif kind is Kind.CHOICE:
        default = str(entry["default"])
        if choices and default not in choices:
            raise ProfileValidationError(f"{context}.default '{default}' is not one of its choices")
    else:
        default = _normalize_int(entry["default"], context=f"{context}.default")

    if kind is Kind.PERCENT:
        if hardware_max is None or hardware_max <= 0:
            raise ProfileValidationError(f"{context} is a percent attribute and needs a positive hardware_max")
        if not 0 <= default <= 100:
            raise ProfileValidationError(f"{context}.default must be within 0..100")
    elif hardware_max is not None:
        raise ProfileValidationError(f"{context}.hardware_max only applies to percent attributes")

    if kind is Kind.INT:
        if minimum is not None and default < minimum:
            raise ProfileValidationError(f"{context}.default is below minimum {minimum}")
        if maximum is not None and default > maximum:
            raise ProfileValidationError(f"{context}.default is above maximum {maximum}")

    return AttributeSpec(
        field=entry["field"],
        name=entry["name"],
        kind=kind,
        default=default,
        command=entry["command"].strip(),
        hardware_max=hardware_max,
        minimum=minimum,
        maximum=maximum,
        choices=choices,
    )


def _build_profile(doc: dict[str, Any], source: Path | Traversable) -> DeviceProfile:
    validator = _load_schema_validator()
    try:
        validator.validate(doc)
    except ValidationError as exc:
        path = ".".join(str(p) for p in exc.path)
        where = f" ({path})" if path else ""
        raise ProfileValidationError(f"Schema validation failed for {source}{where}: {exc.message}") from exc

    attributes = tuple(_build_attribute(entry, profile_id=doc["id"]) for entry in doc["attributes"])

    seen: set[str] = set()
    for spec in attributes:
        if spec.field in seen:
            raise ProfileValidationError(f"Duplicate field '{spec.field}' in {source}")
        seen.add(spec.field)

    return DeviceProfile(id=doc["id"], name=doc["name"], attributes=attributes)


def _iter_packaged_profile_paths() -> list[Traversable]:
    profile_root = resources.files("v4lsync.profiles")
    return [item for item in profile_root.iterdir() if item.name.endswith((".yml", ".yaml"))]


def _iter_user_profile_paths() -> list[Path]:
    paths: list[Path] = []
    for directory in _profile_dirs():
        if not directory.exists() or not directory.is_dir():
            continue
        paths.extend(sorted(p for p in directory.iterdir() if p.suffix in {".yml", ".yaml"}))
    return paths


def load_profiles() -> LoadedProfiles:
    profiles: dict[str, DeviceProfile] = {}
    warnings: list[str] = []

    for path in sorted(_iter_packaged_profile_paths(), key=lambda p: p.name):
        doc = _read_yaml(path)
        profile = _build_profile(doc, path)
        profiles[profile.id] = profile

    for path in _iter_user_profile_paths():
        doc = _read_yaml(path)
        profile = _build_profile(doc, path)
        if profile.id in profiles:
            warning = f"User profile '{profile.id}' overrides packaged profile"
            LOGGER.warning(warning)
            warnings.append(warning)
        profiles[profile.id] = profile

    return LoadedProfiles(profiles=profiles, warnings=tuple(warnings))
