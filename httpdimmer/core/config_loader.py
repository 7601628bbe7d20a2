"""Configuration loading and validation for YAML-based httpdimmer device lists."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError, validators

from httpdimmer.core.errors import ConfigLoadError, ConfigValidationError
from httpdimmer.core.model import DeviceConfig

CONFIG_ENV_VAR = "HTTPDIMMER_CONFIG"
LOGGER = logging.getLogger(__name__)


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that rejects duplicate mapping keys."""


# Keep on/off/yes/no as strings; they are meaningful device tokens, not booleans.
UniqueKeyLoader.yaml_implicit_resolvers = {
    first_char: [(tag, regexp) for tag, regexp in mappings if tag != "tag:yaml.org,2002:bool"]
    for first_char, mappings in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def _construct_mapping(loader: UniqueKeyLoader, node: yaml.Node, deep: bool = False) -> dict[str, Any]:
    mapping: dict[str, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise ConfigValidationError(f"Duplicate key '{key}' in YAML document")
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


@dataclass(frozen=True)
class LoadedConfig:
    devices: tuple[DeviceConfig, ...]
    source: Path
    warnings: tuple[str, ...]


def _load_schema_validator() -> Any:
    schema_text = resources.files("httpdimmer.schemas").joinpath("config.schema.json").read_text(
        encoding="utf-8"
    )
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def default_config_path() -> Path:
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override)
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return xdg_config / "httpdimmer/config.yaml"


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigLoadError(f"Could not read config file {path}: {exc}") from exc

    try:
        loaded = yaml.load(content, Loader=UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise ConfigValidationError(f"Invalid YAML in {path}: {exc}") from exc

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigValidationError(f"Config file {path} must contain a mapping at root")
    return loaded


def parse_config(doc: dict[str, Any], source: Path) -> tuple[DeviceConfig, ...]:
    validator = _load_schema_validator()
    try:
        validator.validate(doc)
    except ValidationError as exc:
        path = ".".join(str(p) for p in exc.path)
        where = f" ({path})" if path else ""
        raise ConfigValidationError(f"Schema validation failed for {source}{where}: {exc.message}") from exc

    return tuple(DeviceConfig.from_mapping(entry) for entry in doc.get("devices") or ())


def load_config(path: Path | None = None) -> LoadedConfig:
    source = path or default_config_path()
    if not source.exists():
        warning = f"Config file {source} not found; no devices configured"
        LOGGER.warning(warning)
        return LoadedConfig(devices=(), source=source, warnings=(warning,))

    devices = parse_config(_read_yaml(source), source)
    for index, device in enumerate(devices):
        if not device.is_valid:
            LOGGER.debug("Device entry %d in %s lacks name/on_url/off_url and will be skipped", index, source)
    return LoadedConfig(devices=devices, source=source, warnings=())
