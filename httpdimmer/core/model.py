"""Core data models used across loader, registry, controller, and CLI."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from httpdimmer.core.controller import DeviceController

DEFAULT_MANUFACTURER = "HTTP JSON Dimmer"
DEFAULT_MODEL = "HTTP-JSON-DIMMER"
DEFAULT_SERIAL = "http-json-dimmer"


class Scale(str, Enum):
    ZERO_TO_HUNDRED = "0-100"
    ZERO_TO_ONE = "0-1"
    ZERO_TO_255 = "0-255"

    @classmethod
    def parse(cls, value: Any, default: Scale | None = None) -> Scale:
        """Return the scale named by `value`, or `default` for absent/unknown values."""
        fallback = default or cls.ZERO_TO_HUNDRED
        if isinstance(value, cls):
            return value
        if value is None:
            return fallback
        try:
            return cls(str(value).strip())
        except ValueError:
            return fallback


@dataclass(frozen=True)
class DeviceConfig:
    name: str | None = None
    id: str | None = None
    manufacturer: str | None = None
    model: str | None = None
    serial: str | None = None
    on_url: str | None = None
    off_url: str | None = None
    status_url: str | None = None
    get_brightness_url: str | None = None
    set_brightness_url: str | None = None
    on_json_path: str | None = None
    brightness_json_path: str | None = None
    brightness_scale: str | None = None
    brightness_write_scale: str | None = None
    timeout_ms: float | None = None

    @property
    def stable_key(self) -> str:
        return str(self.id or self.name)

    @property
    def is_valid(self) -> bool:
        return bool(self.name and self.on_url and self.off_url)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> DeviceConfig:
        known = {f.name for f in fields(cls)}
        values = {key: value for key, value in data.items() if key in known}
        if not values.get("on_json_path") and data.get("status_on_json_path"):
            values["on_json_path"] = data["status_on_json_path"]
        if values.get("id") is not None:
            values["id"] = str(values["id"])
        return cls(**values)

    def to_mapping(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}


@dataclass
class DeviceState:
    is_on: bool = False
    brightness: int = 0


@dataclass(frozen=True)
class AccessoryInformation:
    manufacturer: str
    model: str
    serial_number: str

    @classmethod
    def for_device(cls, device: DeviceConfig) -> AccessoryInformation:
        return cls(
            manufacturer=device.manufacturer or DEFAULT_MANUFACTURER,
            model=device.model or DEFAULT_MODEL,
            serial_number=device.serial or device.id or device.name or DEFAULT_SERIAL,
        )


@dataclass
class AccessoryRecord:
    uuid: str
    display_name: str
    context: DeviceConfig
    information: AccessoryInformation | None = None
    controller: DeviceController | None = field(default=None, repr=False, compare=False)


@dataclass(frozen=True)
class HttpResponse:
    ok: bool
    status: int
    body: str


@dataclass(frozen=True)
class CharacteristicResult:
    value: Any
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class SyncReport:
    added: tuple[AccessoryRecord, ...] = ()
    updated: tuple[AccessoryRecord, ...] = ()
    removed: tuple[AccessoryRecord, ...] = ()
