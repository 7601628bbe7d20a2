"""Service layer used by CLI and the public client."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable
from pathlib import Path
from typing import Any, TypeVar

from httpdimmer.core.config_loader import load_config
from httpdimmer.core.controller import DeviceController
from httpdimmer.core.errors import DeviceSelectionError
from httpdimmer.core.host import AccessoryHost, LocalHost
from httpdimmer.core.model import AccessoryRecord, CharacteristicResult, DeviceConfig, SyncReport
from httpdimmer.core.registry import AccessoryRegistry, accessory_uuid, reconcile_accessories
from httpdimmer.transports.base import Transport
from httpdimmer.transports.http import HttpTransport

T = TypeVar("T")
LOGGER = logging.getLogger(__name__)


class DimmerService:
    """Owns the accessory registry and keeps it in step with the configured devices.

    Construction loads the configuration, restores persisted accessories from the
    host and reconciles them once, so a fresh service is ready to serve reads and
    writes for every valid device.

    Each operation runs in its own `asyncio.run` loop and closes the transport
    afterwards, so the transport must be able to reopen its session per call
    (the default `HttpTransport()` does).
    """

    def __init__(
        self,
        config_path: Path | None = None,
        *,
        transport: Transport | None = None,
        host: AccessoryHost | None = None,
    ) -> None:
        loaded = load_config(config_path)
        self.config_path = loaded.source
        self.devices: tuple[DeviceConfig, ...] = loaded.devices
        self.load_warnings = loaded.warnings
        self.transport = transport or HttpTransport()
        self.host = host or LocalHost()
        self.registry = AccessoryRegistry()

        restore = getattr(self.host, "restore", None)
        if restore is not None:
            restored = restore(self.registry)
            LOGGER.debug("Restored %s cached accessory(ies)", restored)

        self.last_report = self.sync()

    def _controller_for(self, device: DeviceConfig) -> DeviceController:
        return DeviceController(device, self.transport)

    def sync(self, devices: tuple[DeviceConfig, ...] | None = None) -> SyncReport:
        if devices is not None:
            self.devices = devices
        return reconcile_accessories(
            self.devices,
            self.registry,
            host=self.host,
            controller_factory=self._controller_for,
        )

    def list_devices(self) -> list[tuple[DeviceConfig, str | None]]:
        """Configured devices with their accessory uuid, or ``None`` for skipped entries."""
        return [
            (device, accessory_uuid(device.stable_key) if device.is_valid else None)
            for device in self.devices
        ]

    def list_accessories(self) -> list[AccessoryRecord]:
        return sorted(self.registry, key=lambda r: r.display_name.lower())

    def resolve_accessory(self, hint: str) -> AccessoryRecord:
        records = self.list_accessories()
        if not records:
            raise DeviceSelectionError(f"No accessories registered. Check {self.config_path}.")

        needle = hint.strip().lower()
        exact = [
            r
            for r in records
            if r.uuid.lower() == needle
            or r.context.stable_key.lower() == needle
            or r.display_name.lower() == needle
        ]
        candidates = exact or [r for r in records if needle and needle in r.display_name.lower()]

        if not candidates:
            raise DeviceSelectionError(f"No device found matching '{hint}'")
        if len(candidates) > 1:
            names = ", ".join(f"{r.display_name} ({r.context.stable_key})" for r in candidates)
            raise DeviceSelectionError(f"Multiple devices match '{hint}': {names}. Use the device id.")
        return candidates[0]

    def _controller(self, hint: str) -> tuple[AccessoryRecord, DeviceController]:
        record = self.resolve_accessory(hint)
        if record.controller is None:
            raise DeviceSelectionError(f"Accessory '{record.display_name}' has no controller attached")
        return record, record.controller

    def _run(self, awaitable: Awaitable[T]) -> T:
        async def _runner() -> T:
            try:
                return await awaitable
            finally:
                close = getattr(self.transport, "close", None)
                if close is not None:
                    result: Any = close()
                    if inspect.isawaitable(result):
                        await result

        return asyncio.run(_runner())

    def get_on(self, hint: str) -> tuple[AccessoryRecord, CharacteristicResult]:
        record, controller = self._controller(hint)
        return record, self._run(controller.read_on())

    def set_on(self, hint: str, value: bool) -> tuple[AccessoryRecord, CharacteristicResult]:
        record, controller = self._controller(hint)
        return record, self._run(controller.write_on(value))

    def get_brightness(self, hint: str) -> tuple[AccessoryRecord, CharacteristicResult]:
        record, controller = self._controller(hint)
        return record, self._run(controller.read_brightness())

    def set_brightness(self, hint: str, value: int) -> tuple[AccessoryRecord, CharacteristicResult]:
        record, controller = self._controller(hint)
        return record, self._run(controller.write_brightness(value))

    def status(self, hint: str) -> tuple[AccessoryRecord, CharacteristicResult, CharacteristicResult]:
        record, controller = self._controller(hint)

        async def _read_both() -> tuple[CharacteristicResult, CharacteristicResult]:
            return await controller.read_on(), await controller.read_brightness()

        on_result, brightness_result = self._run(_read_both())
        return record, on_result, brightness_result
