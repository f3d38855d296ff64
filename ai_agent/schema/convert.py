"""Rebuild annotated Python values from decoded JSON arguments."""

import collections.abc
import dataclasses
import enum
import inspect
import typing
from typing import Any, Literal, get_args, get_origin

from ai_agent.schema.introspect import ARRAY_ORIGINS, is_typeddict, unwrap_optional

_SET_ORIGINS = (set, collections.abc.Set)


def convert_value(annotation: Any, value: Any) -> Any:
    """
    Convert a decoded JSON value to the type named by ``annotation``.

    Enum members are looked up by name, dataclasses are rebuilt from their
    fields and containers are converted element by element. Values for any
    other annotation pass through unchanged.

    Raises:
        ValueError: If the value does not fit the annotation.
    """
    annotation, _ = unwrap_optional(annotation)
    if value is None:
        return None

    origin = get_origin(annotation)
    if origin is not None:
        return _convert_generic(annotation, origin, value)

    if inspect.isclass(annotation) and issubclass(annotation, enum.Enum):
        if isinstance(value, annotation):
            return value
        try:
            return annotation[value]
        except (KeyError, TypeError):
            raise ValueError(f"{value!r} is not a member of {annotation.__name__}") from None

    if dataclasses.is_dataclass(annotation) and inspect.isclass(annotation):
        return _convert_dataclass(annotation, value)

    if is_typeddict(annotation):
        return _convert_typeddict(annotation, value)

    return value


def _convert_generic(annotation: Any, origin: Any, value: Any) -> Any:
    if origin is Literal:
        return value

    args = get_args(annotation)
    if origin not in ARRAY_ORIGINS and origin is not tuple:
        return value
    if not isinstance(value, list):
        raise ValueError(f"expected an array, got {type(value).__name__}")

    items = [convert_value(args[0], item) for item in value] if args else list(value)
    if origin is frozenset:
        return frozenset(items)
    if origin in _SET_ORIGINS:
        return set(items)
    if origin is tuple:
        return tuple(items)
    return items


def _convert_dataclass(cls: type, value: Any) -> Any:
    if isinstance(value, cls):
        return value
    if not isinstance(value, dict):
        raise ValueError(f"expected an object for {cls.__name__}, got {type(value).__name__}")

    hints = typing.get_type_hints(cls)
    fields = {field.name: field for field in dataclasses.fields(cls) if field.init}
    unknown = [key for key in value if key not in fields]
    if unknown:
        raise ValueError(f"unknown fields for {cls.__name__}: {', '.join(unknown)}")

    kwargs = {key: convert_value(hints[key], item) for key, item in value.items()}
    for name, field in fields.items():
        if name in kwargs:
            continue
        has_default = (
            field.default is not dataclasses.MISSING
            or field.default_factory is not dataclasses.MISSING
        )
        if has_default:
            continue
        if not unwrap_optional(hints[name])[1]:
            raise ValueError(f"missing field {name!r} for {cls.__name__}")
        kwargs[name] = None
    return cls(**kwargs)


def _convert_typeddict(cls: type, value: Any) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ValueError(f"expected an object for {cls.__name__}, got {type(value).__name__}")
    hints = typing.get_type_hints(cls)
    return {
        key: convert_value(hints[key], item) if key in hints else item
        for key, item in value.items()
    }
