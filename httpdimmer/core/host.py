"""Accessory host interface and a local file-backed implementation."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

from httpdimmer.core.model import AccessoryRecord, DeviceConfig

if TYPE_CHECKING:
    from httpdimmer.core.registry import AccessoryRegistry

STORE_SCHEMA_VERSION = 1
LOGGER = logging.getLogger(__name__)


class AccessoryHost(Protocol):
    def register_accessories(self, records: Sequence[AccessoryRecord]) -> None:
        """Publish newly created accessories."""

    def update_accessories(self, records: Sequence[AccessoryRecord]) -> None:
        """Publish changes to existing accessories."""

    def unregister_accessories(self, records: Sequence[AccessoryRecord]) -> None:
        """Withdraw accessories that are no longer configured."""


def default_store_path() -> Path:
    xdg_data = Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local/share"))
    return xdg_data / "httpdimmer/accessories.json"


class AccessoryStore:
    """JSON file holding accessory records between runs.

    Persistence is best-effort: a missing, unreadable, or outdated file restores
    nothing, and write failures are logged rather than raised.
    """

    def __init__(self, path: Path | None = None) -> None:
        self.path = path or default_store_path()

    def read(self) -> list[AccessoryRecord]:
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return []
        except (OSError, ValueError) as exc:
            LOGGER.warning("Ignoring unreadable accessory cache %s: %s", self.path, exc)
            return []

        if not isinstance(raw, dict) or raw.get("__schema_version") != STORE_SCHEMA_VERSION:
            return []

        records: list[AccessoryRecord] = []
        payload = raw.get("accessories")
        if not isinstance(payload, dict):
            return records
        for accessory_id, entry in payload.items():
            if not isinstance(entry, dict) or not isinstance(entry.get("context"), dict):
                continue
            context = DeviceConfig.from_mapping(entry["context"])
            records.append(
                AccessoryRecord(
                    uuid=accessory_id,
                    display_name=str(entry.get("display_name") or context.name or accessory_id),
                    context=context,
                )
            )
        return records

    def write(self, records: Sequence[AccessoryRecord]) -> None:
        payload: dict[str, Any] = {
            "__schema_version": STORE_SCHEMA_VERSION,
            "accessories": {
                record.uuid: {
                    "display_name": record.display_name,
                    "context": record.context.to_mapping(),
                }
                for record in records
            },
        }
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
        except OSError as exc:
            LOGGER.warning("Could not persist accessory cache %s: %s", self.path, exc)


class LocalHost:
    """Host that keeps registered accessories in an `AccessoryStore`."""

    def __init__(self, store: AccessoryStore | None = None) -> None:
        self.store = store or AccessoryStore()
        self._records: dict[str, AccessoryRecord] = {}

    @property
    def records(self) -> list[AccessoryRecord]:
        return list(self._records.values())

    def restore(self, registry: AccessoryRegistry) -> int:
        restored = self.store.read()
        for record in restored:
            self._records[record.uuid] = record
            registry.configure_accessory(record)
        return len(restored)

    def register_accessories(self, records: Sequence[AccessoryRecord]) -> None:
        for record in records:
            self._records[record.uuid] = record
        self.store.write(self.records)

    def update_accessories(self, records: Sequence[AccessoryRecord]) -> None:
        self.register_accessories(records)

    def unregister_accessories(self, records: Sequence[AccessoryRecord]) -> None:
        for record in records:
            self._records.pop(record.uuid, None)
        self.store.write(self.records)
