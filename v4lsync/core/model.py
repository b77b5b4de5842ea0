"""Core data models used across profile loader, engine, and CLI."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType

from v4lsync.core.errors import AttributeResolutionError

Value = str | bool | int


class Kind(str, Enum):
    CHOICE = "choice"
    BOOL = "bool"
    INT = "int"
    PERCENT = "percent"


@dataclass(frozen=True)
class AttributeSpec:
    field: str
    name: str
    kind: Kind
    default: Value
    command: str
    hardware_max: int | None = None
    minimum: int | None = None
    maximum: int | None = None
    choices: tuple[str, ...] = ()


@dataclass(frozen=True)
class DeviceProfile:
    id: str
    name: str
    attributes: tuple[AttributeSpec, ...]

    def attribute(self, field_name: str) -> AttributeSpec:
        for spec in self.attributes:
            if spec.field == field_name:
                return spec
        available = ", ".join(spec.field for spec in self.attributes)
        raise AttributeResolutionError(
            f"Profile '{self.id}' does not define field '{field_name}'. Available: {available}"
        )


@dataclass(frozen=True)
class Revision(Mapping[str, Value]):
    """Immutable snapshot of every attribute value at one point in time."""

    values: Mapping[str, Value] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))

    def __getitem__(self, key: str) -> Value:
        return self.values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Revision):
            return dict(self.values) == dict(other.values)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(tuple(self.values.items()))

    def replace(self, **changes: Value) -> Revision:
        unknown = sorted(set(changes) - set(self.values))
        if unknown:
            raise AttributeResolutionError(f"Unknown revision field(s): {', '.join(unknown)}")
        merged = dict(self.values)
        merged.update(changes)
        return Revision(merged)


@dataclass(frozen=True)
class WriteRecord:
    field: str
    command: str
    value: str
    success: bool


@dataclass(frozen=True)
class GetRequest:
    name: str


@dataclass(frozen=True)
class GetResponse:
    result: str


@dataclass(frozen=True)
class SetRequest:
    name: str
    value: str


@dataclass(frozen=True)
class SetResponse:
    success: bool
