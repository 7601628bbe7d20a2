"""Stable public API for building tooling on top of httpdimmer.

This module is the supported integration surface for third-party callers.
Avoid importing from private/internal modules unless intentionally depending on
non-stable internals.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from httpdimmer.core.errors import (
    ConfigLoadError,
    ConfigValidationError,
    DeviceSelectionError,
    HttpDimmerError,
    TransportConnectError,
    TransportError,
    TransportTimeoutError,
)
from httpdimmer.core.host import AccessoryHost, AccessoryStore, LocalHost
from httpdimmer.core.model import (
    AccessoryInformation,
    AccessoryRecord,
    CharacteristicResult,
    DeviceConfig,
    Scale,
    SyncReport,
)
from httpdimmer.core.service import DimmerService
from httpdimmer.transports.base import Transport
from httpdimmer.transports.http import HttpTransport

__all__ = [
    "HttpDimmerError",
    "ConfigLoadError",
    "ConfigValidationError",
    "DeviceSelectionError",
    "TransportError",
    "TransportConnectError",
    "TransportTimeoutError",
    "AccessoryHost",
    "AccessoryStore",
    "LocalHost",
    "AccessoryInformation",
    "AccessoryRecord",
    "CharacteristicResult",
    "DeviceConfig",
    "Scale",
    "SyncReport",
    "HttpTransport",
    "Transport",
    "LightState",
    "Client",
]


@dataclass(frozen=True)
class LightState:
    """On/off and brightness as last reported for one accessory."""

    accessory: AccessoryRecord
    on: CharacteristicResult
    brightness: CharacteristicResult


class Client:
    """Public client for interacting with httpdimmer core capabilities.

    A `Client` instance wraps configuration loading, accessory reconciliation
    and per-device HTTP control behind a stable API intended for third-party
    tools (dashboards/services/scripts).
    """

    def __init__(
        self,
        config_path: Path | None = None,
        *,
        transport: Transport | None = None,
        host: AccessoryHost | None = None,
    ) -> None:
        self._service = DimmerService(config_path, transport=transport, host=host)

    @property
    def load_warnings(self) -> tuple[str, ...]:
        return self._service.load_warnings

    def list_devices(self) -> list[DeviceConfig]:
        return [device for device, _ in self._service.list_devices()]

    def list_accessories(self) -> list[AccessoryRecord]:
        return self._service.list_accessories()

    def sync(self, devices: list[DeviceConfig] | None = None) -> SyncReport:
        return self._service.sync(tuple(devices) if devices is not None else None)

    def get_state(self, device: str) -> LightState:
        record, on_result, brightness_result = self._service.status(device)
        return LightState(accessory=record, on=on_result, brightness=brightness_result)

    def turn_on(self, device: str) -> CharacteristicResult:
        return self._service.set_on(device, True)[1]

    def turn_off(self, device: str) -> CharacteristicResult:
        return self._service.set_on(device, False)[1]

    def set_brightness(self, device: str, value: int) -> CharacteristicResult:
        return self._service.set_brightness(device, value)[1]
