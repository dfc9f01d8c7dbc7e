"""Typed access to sections of a parsed JSON configuration document."""

from __future__ import annotations

import enum
import logging
from collections.abc import Iterable, Mapping
from typing import Any

log = logging.getLogger(__name__)


class ConfigError(Exception):
    """Base class for configuration failures."""


class ConfigOpenError(ConfigError):
    """Raised when a configuration file cannot be opened or read."""


class ConfigParseError(ConfigError):
    """Raised when a configuration document is malformed or incomplete."""


class JsonKind(enum.Enum):
    """The kinds of value a JSON document can hold."""

    NULL = "null"
    BOOLEAN = "boolean"
    DOUBLE = "double"
    INT = "int"
    OBJECT = "object"
    ARRAY = "array"
    STRING = "string"


def kind_of(value: Any) -> JsonKind:
    """Return the JSON kind of a decoded value."""
    if value is None:
        return JsonKind.NULL
    if isinstance(value, bool):
        return JsonKind.BOOLEAN
    if isinstance(value, int):
        return JsonKind.INT
    if isinstance(value, float):
        return JsonKind.DOUBLE
    if isinstance(value, str):
        return JsonKind.STRING
    if isinstance(value, Mapping):
        return JsonKind.OBJECT
    if isinstance(value, (list, tuple)):
        return JsonKind.ARRAY
    raise TypeError(f"{type(value).__name__} is not a JSON value")


def get_required(section: Mapping[str, Any], key: str, kind: JsonKind) -> Any:
    """Return ``section[key]``, raising ConfigParseError if it is absent or of another kind."""
    if key not in section:
        log.warning("cannot find key %s", key)
        raise ConfigParseError(f"cannot find key {key}")
    value = section[key]
    if kind_of(value) is not kind:
        log.warning("expect type %s with key %s", kind.value, key)
        raise ConfigParseError(f"expect type {kind.value} with key {key}")
    return value


def get_optional(section: Mapping[str, Any], key: str, kind: JsonKind) -> Any | None:
    """Return ``section[key]`` if present and of the given kind, otherwise None."""
    if key not in section:
        log.warning("cannot find key %s", key)
        return None
    value = section[key]
    if kind_of(value) is not kind:
        log.warning("expect type %s with key %s", kind.value, key)
        return None
    return value


def int_items(values: Iterable[Any]) -> list[int]:
    """Keep the integer elements of a JSON array, in order."""
    return [v for v in values if kind_of(v) is JsonKind.INT]


def float_items(values: Iterable[Any]) -> list[float]:
    """Keep the floating-point elements of a JSON array, in order."""
    return [v for v in values if kind_of(v) is JsonKind.DOUBLE]