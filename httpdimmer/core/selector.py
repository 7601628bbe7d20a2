"""Selector resolution against parsed JSON documents.

A selector is either a JSONPath expression (leading ``$``) or a dot-separated
property path such as ``state.light.on``. Both forms resolve to a single value;
``None`` stands for JSON ``null`` as well as for a location that does not exist.
"""

from __future__ import annotations

import json
from functools import lru_cache
from typing import Any, Union

from jsonpath_ng.jsonpath import JSONPath
from jsonpath_ng.ext import parse as parse_jsonpath

JsonValue = Union[dict[str, Any], list[Any], str, int, float, bool, None]


@lru_cache(maxsize=128)
def _compile(expression: str) -> JSONPath:
    return parse_jsonpath(expression)


def parse_document(text: str) -> tuple[bool, JsonValue]:
    """Parse a response body; returns ``(False, None)`` when it is not JSON."""
    try:
        return True, json.loads(text)
    except (TypeError, ValueError):
        return False, None


def is_container(value: JsonValue) -> bool:
    return isinstance(value, (dict, list))


def _step(current: JsonValue, key: str) -> JsonValue:
    match current:
        case dict():
            return current.get(key)
        case list():
            if key.isascii() and key.isdigit() and int(key) < len(current):
                return current[int(key)]
            return None
        case _:
            return None


def resolve(document: JsonValue, selector: str | None) -> JsonValue:
    if not selector:
        return None
    expression = str(selector).strip()
    if not expression:
        return None

    if expression.startswith("$"):
        # First match in document order; no match resolves to None.
        matches = _compile(expression).find(document)
        return matches[0].value if matches else None

    current = document
    for key in (part.strip() for part in expression.split(".")):
        if not key:
            continue
        if current is None:
            return None
        current = _step(current, key)
    return current
