"""Per-device controller translating characteristic reads/writes into HTTP calls."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

from httpdimmer.core.codec import (
    clamp_int,
    from_canonical_brightness,
    parse_boolean_loose,
    to_canonical_brightness,
)
from httpdimmer.core.model import CharacteristicResult, DeviceConfig, DeviceState, HttpResponse, Scale
from httpdimmer.core.selector import is_container, parse_document, resolve
from httpdimmer.transports.base import Transport

LOGGER = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 4000
MIN_TIMEOUT_MS = 500
MAX_TIMEOUT_MS = 20000
DEFAULT_ON_SELECTOR = "$.on"
DEFAULT_BRIGHTNESS_SELECTOR = "$.brightness"

_MISSING = object()


class DeviceController:
    """Cached on/off and brightness state for one device.

    Every operation answers with the best available state and never raises.
    Reads overwrite the cache only after a successful response; writes update
    the cache before the request is sent and keep that value whatever the
    outcome.
    """

    def __init__(self, device: DeviceConfig, transport: Transport) -> None:
        self.device = device
        self.transport = transport
        self.state = DeviceState()

        self.timeout_ms = clamp_int(device.timeout_ms, MIN_TIMEOUT_MS, MAX_TIMEOUT_MS, DEFAULT_TIMEOUT_MS)
        self.on_selector = device.on_json_path or DEFAULT_ON_SELECTOR
        self.brightness_selector = device.brightness_json_path or DEFAULT_BRIGHTNESS_SELECTOR
        self.read_scale = Scale.parse(device.brightness_scale)
        self.write_scale = Scale.parse(device.brightness_write_scale, default=self.read_scale)

    @property
    def name(self) -> str:
        return self.device.name or self.device.stable_key

    @property
    def is_on(self) -> bool:
        return self.state.is_on

    @property
    def brightness(self) -> int:
        return self.state.brightness

    async def _get(self, url: str) -> tuple[HttpResponse, str | None]:
        response = await self.transport.get(url, timeout_s=self.timeout_ms / 1000)
        if response.ok:
            return response, None
        LOGGER.debug("GET %s for %s returned HTTP %s", url, self.name, response.status)
        return response, f"HTTP {response.status} from {url}"

    async def _fetch_value(self, url: str, selector: str) -> tuple[Any, str | None]:
        """Return the reported value, or ``_MISSING`` with an error for a failed response."""
        response, error = await self._get(url)
        if error:
            return _MISSING, error

        parsed, document = parse_document(response.body)
        if not parsed:
            return response.body, None
        if not is_container(document):
            return document, None
        return resolve(document, selector), None

    def _failure(self, operation: str, exc: Exception, value: Any) -> CharacteristicResult:
        message = f"{operation} error ({self.name}): {exc}"
        LOGGER.warning(message)
        return CharacteristicResult(value=value, error=message)

    async def read_on(self) -> CharacteristicResult:
        try:
            if not self.device.status_url:
                return CharacteristicResult(value=self.state.is_on)

            value, error = await self._fetch_value(self.device.status_url, self.on_selector)
            if value is not _MISSING:
                self.state.is_on = parse_boolean_loose(value)
            return CharacteristicResult(value=self.state.is_on, error=error)
        except Exception as exc:
            return self._failure("read_on", exc, self.state.is_on)

    async def write_on(self, value: Any) -> CharacteristicResult:
        try:
            self.state.is_on = bool(value)
            url = self.device.on_url if self.state.is_on else self.device.off_url
            if not url:
                return CharacteristicResult(value=self.state.is_on)

            _, error = await self._get(url)
            return CharacteristicResult(value=self.state.is_on, error=error)
        except Exception as exc:
            return self._failure("write_on", exc, self.state.is_on)

    async def read_brightness(self) -> CharacteristicResult:
        try:
            if not self.device.get_brightness_url:
                return CharacteristicResult(value=self.state.brightness)

            value, error = await self._fetch_value(self.device.get_brightness_url, self.brightness_selector)
            if value is not _MISSING:
                self.state.brightness = to_canonical_brightness(value, self.read_scale, self.state.brightness)
            return CharacteristicResult(value=self.state.brightness, error=error)
        except Exception as exc:
            return self._failure("read_brightness", exc, self.state.brightness)

    async def write_brightness(self, value: Any) -> CharacteristicResult:
        try:
            level = clamp_int(value, 0, 100, 0)
            self.state.brightness = level
            if not self.device.set_brightness_url:
                return CharacteristicResult(value=level)

            device_value = from_canonical_brightness(level, self.write_scale)
            _, error = await self._get(f"{self.device.set_brightness_url}{quote(str(device_value), safe='')}")
            return CharacteristicResult(value=level, error=error)
        except Exception as exc:
            return self._failure("write_brightness", exc, self.state.brightness)
