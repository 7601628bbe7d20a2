"""Accessory registry and reconciliation against the configured device list."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Iterator, Sequence

from httpdimmer.core.controller import DeviceController
from httpdimmer.core.host import AccessoryHost
from httpdimmer.core.model import AccessoryInformation, AccessoryRecord, DeviceConfig, SyncReport

LOGGER = logging.getLogger(__name__)

UUID_NAMESPACE_PREFIX = "http-json-dimmer"
_UUID_NAMESPACE = uuid.uuid5(uuid.NAMESPACE_URL, "urn:httpdimmer:accessory")

ControllerFactory = Callable[[DeviceConfig], DeviceController]


def accessory_uuid(stable_key: str) -> str:
    """Deterministic accessory identity for a device's stable key."""
    return str(uuid.uuid5(_UUID_NAMESPACE, f"{UUID_NAMESPACE_PREFIX}:{stable_key}"))


class AccessoryRegistry:
    """Known accessory records keyed by uuid."""

    def __init__(self) -> None:
        self._accessories: dict[str, AccessoryRecord] = {}

    def configure_accessory(self, record: AccessoryRecord) -> None:
        """Restore a previously persisted record."""
        self._accessories[record.uuid] = record

    def get(self, accessory_id: str) -> AccessoryRecord | None:
        return self._accessories.get(accessory_id)

    def remove(self, accessory_id: str) -> AccessoryRecord | None:
        return self._accessories.pop(accessory_id, None)

    def uuids(self) -> set[str]:
        return set(self._accessories)

    def __contains__(self, accessory_id: object) -> bool:
        return accessory_id in self._accessories

    def __iter__(self) -> Iterator[AccessoryRecord]:
        return iter(list(self._accessories.values()))

    def __len__(self) -> int:
        return len(self._accessories)


def attach_services(record: AccessoryRecord, controller_factory: ControllerFactory) -> None:
    """Bind accessory information and a fresh controller built from the record's context."""
    record.information = AccessoryInformation.for_device(record.context)
    record.controller = controller_factory(record.context)


def reconcile_accessories(
    devices: Sequence[DeviceConfig],
    registry: AccessoryRegistry,
    *,
    host: AccessoryHost,
    controller_factory: ControllerFactory,
) -> SyncReport:
    added: list[AccessoryRecord] = []
    updated: list[AccessoryRecord] = []
    desired: set[str] = set()

    for device in devices:
        if device is None or not device.is_valid:
            LOGGER.debug("Skipping device entry without name/on_url/off_url: %s", device)
            continue

        stable_key = device.stable_key
        accessory_id = accessory_uuid(stable_key)
        desired.add(accessory_id)

        record = registry.get(accessory_id)
        if record is None:
            record = AccessoryRecord(uuid=accessory_id, display_name=device.name, context=device)
            attach_services(record, controller_factory)
            host.register_accessories([record])
            registry.configure_accessory(record)
            added.append(record)
            LOGGER.info("Registered: %s (%s)", device.name, stable_key)
        else:
            record.display_name = device.name
            record.context = device
            attach_services(record, controller_factory)
            host.update_accessories([record])
            updated.append(record)
            LOGGER.info("Updated: %s (%s)", device.name, stable_key)

    removed = [record for record in registry if record.uuid not in desired]
    for record in removed:
        registry.remove(record.uuid)
    if removed:
        host.unregister_accessories(removed)
        LOGGER.info("Removed %d accessory(ies)", len(removed))

    return SyncReport(added=tuple(added), updated=tuple(updated), removed=tuple(removed))
