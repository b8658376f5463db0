"""Key-name conversion and mapping projection shared by the model dataclasses.

Model objects use snake_case attributes; their untyped mapping form (the
shape triggers and build info arrive in, and the shape expressions see)
uses camelCase keys.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Mapping
from typing import Any, ClassVar, Self

from pipectx.constants.expressions import CAMEL_BOUNDARY_PATTERN
from pipectx.exceptions import DeserializationError

OTHER_FIELD: str = "other"


def camel_key(name: str) -> str:
    """Return the camelCase mapping key for a snake_case attribute name."""
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def snake_key(name: str) -> str:
    """Return the snake_case attribute name for a camelCase mapping key."""
    return CAMEL_BOUNDARY_PATTERN.sub("_", name).lower()


def to_plain(value: Any) -> Any:
    """Project model objects and containers onto plain dicts, lists and scalars."""
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    if isinstance(value, Mapping):
        return {str(key): to_plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(item) for item in value]
    return value


class MappingModel:
    """Mixin for frozen dataclasses that decode from and flatten to camelCase mappings.

    Subclasses declare per-field decoders in ``_FIELD_DECODERS``; fields
    without a decoder are copied as-is. Keys that match no field are kept
    in the ``other`` field so that flattening returns them unchanged.
    """

    _LABEL: ClassVar[str] = "value"
    _FIELD_DECODERS: ClassVar[dict[str, Callable[[Any, str], Any]]] = {}

    @classmethod
    def from_mapping(cls, data: Any) -> Self:
        """Decode an untyped mapping into an instance of ``cls``."""
        if not isinstance(data, Mapping):
            raise DeserializationError(f"{cls._LABEL} must be a mapping, got {type(data).__name__}")

        kwargs: dict[str, Any] = {}
        consumed: set[str] = set()
        for model_field in dataclasses.fields(cls):  # type: ignore[arg-type]
            if model_field.name == OTHER_FIELD:
                continue
            key = camel_key(model_field.name)
            if key not in data:
                continue
            consumed.add(key)
            decoder = cls._decoder_for(model_field.name)
            value = data[key]
            kwargs[model_field.name] = decoder(value, f"{cls._LABEL}.{key}") if decoder else value

        other = {str(key): value for key, value in data.items() if key not in consumed}
        if other:
            kwargs[OTHER_FIELD] = other
        return cls(**kwargs)

    @classmethod
    def _decoder_for(cls, name: str) -> Callable[[Any, str], Any] | None:
        for klass in cls.__mro__:
            decoders = klass.__dict__.get("_FIELD_DECODERS")
            if decoders and name in decoders:
                return decoders[name]
        return None

    def to_dict(self) -> dict[str, Any]:
        """Flatten into a camelCase mapping, omitting unset (None) values."""
        payload: dict[str, Any] = {}
        for model_field in dataclasses.fields(self):  # type: ignore[arg-type]
            if model_field.name == OTHER_FIELD:
                continue
            value = getattr(self, model_field.name)
            if value is None:
                continue
            payload[camel_key(model_field.name)] = to_plain(value)
        for key, value in getattr(self, OTHER_FIELD, {}).items():
            payload.setdefault(key, to_plain(value))
        return payload


def as_optional_str(value: Any, location: str) -> str | None:
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    raise DeserializationError(f"{location} must be a string, got {type(value).__name__}")


def as_optional_int(value: Any, location: str) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool):
        raise DeserializationError(f"{location} must be an integer, got bool")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    raise DeserializationError(f"{location} must be an integer, got {value!r}")


def as_bool(value: Any, location: str) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    raise DeserializationError(f"{location} must be a boolean, got {type(value).__name__}")


def as_mapping(value: Any, location: str) -> dict[str, Any]:
    """Decode an optional mapping, treating None as empty."""
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise DeserializationError(f"{location} must be a mapping, got {type(value).__name__}")
    return {str(key): item for key, item in value.items()}


def as_mapping_tuple(value: Any, location: str) -> tuple[dict[str, Any], ...]:
    """Decode an optional list of mappings into a tuple."""
    if value is None:
        return ()
    if not isinstance(value, (list, tuple)):
        raise DeserializationError(f"{location} must be a list, got {type(value).__name__}")
    return tuple(as_mapping(item, f"{location}[{index}]") for index, item in enumerate(value))
