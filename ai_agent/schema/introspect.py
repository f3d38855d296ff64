"""Derive type descriptors from Python annotations."""

import collections.abc
import dataclasses
import enum
import inspect
import types
import typing
from typing import Any, Callable, Literal, Union, get_args, get_origin

from ai_agent.core.errors import SchemaCompilationError
from ai_agent.schema.descriptors import (
    BOOLEAN,
    NUMBER,
    STRING,
    ArrayOf,
    EnumOf,
    Member,
    ObjectOf,
    TypeDescriptor,
)

ARRAY_ORIGINS = (
    list,
    set,
    frozenset,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Set,
    collections.abc.Iterable,
)


def describe_callable(func: Callable[..., Any]) -> list[Member]:
    """
    Describe the parameters of a callable as descriptor members.

    Bound methods are described without ``self``. A parameter is optional
    when it has a default value or an ``Optional[...]`` annotation.

    Raises:
        SchemaCompilationError: For unannotated or variadic parameters and
            for annotations that have no JSON representation.
    """
    name = getattr(func, "__name__", repr(func))
    signature = inspect.signature(func)
    hints = parameter_annotations(func)

    members: list[Member] = []
    for parameter in signature.parameters.values():
        if parameter.kind in (parameter.VAR_POSITIONAL, parameter.VAR_KEYWORD):
            raise SchemaCompilationError(
                parameter, name, f"variadic parameter {parameter.name!r}"
            )
        if parameter.name not in hints:
            raise SchemaCompilationError(
                parameter, name, f"parameter {parameter.name!r} has no annotation"
            )
        descriptor, nullable = unwrap_optional(hints[parameter.name])
        optional = nullable or parameter.default is not parameter.empty
        members.append(
            Member(
                name=parameter.name,
                type=describe_type(descriptor, name),
                optional=optional,
            )
        )
    return members


def parameter_annotations(func: Callable[..., Any]) -> dict[str, Any]:
    """Resolved parameter annotations of ``func``, without the return type."""
    name = getattr(func, "__name__", repr(func))
    try:
        hints = typing.get_type_hints(func)
    except (NameError, TypeError) as e:
        raise SchemaCompilationError(func, name, f"cannot resolve annotations ({e})") from e
    hints.pop("return", None)
    return hints


def implicit_defaults(func: Callable[..., Any]) -> dict[str, Any]:
    """
    Values for ``Optional[...]`` parameters that have no default.

    Such parameters are optional in the schema, so a call that omits them
    passes ``None`` in their place.
    """
    hints = parameter_annotations(func)
    defaults = {}
    for parameter in inspect.signature(func).parameters.values():
        if parameter.default is not parameter.empty or parameter.name not in hints:
            continue
        _, nullable = unwrap_optional(hints[parameter.name])
        if nullable:
            defaults[parameter.name] = None
    return defaults


def describe_type(annotation: Any, context_name: str = "") -> TypeDescriptor:
    """Map a single annotation to a type descriptor."""
    return _describe(annotation, context_name, frozenset())


def _describe(annotation: Any, context_name: str, seen: frozenset) -> TypeDescriptor:
    annotation, _ = unwrap_optional(annotation)

    # bool is a subclass of int, check it first
    if annotation is bool:
        return BOOLEAN
    if annotation in (int, float):
        return NUMBER
    if annotation is str:
        return STRING

    origin = get_origin(annotation)
    if origin is not None:
        return _describe_generic(annotation, origin, context_name, seen)

    if inspect.isclass(annotation) and issubclass(annotation, enum.Enum):
        return EnumOf([member.name for member in annotation])

    if dataclasses.is_dataclass(annotation) and inspect.isclass(annotation):
        return _describe_dataclass(annotation, context_name, seen)

    if is_typeddict(annotation):
        return _describe_typeddict(annotation, context_name, seen)

    raise SchemaCompilationError(annotation, context_name)


def _describe_generic(
    annotation: Any, origin: Any, context_name: str, seen: frozenset
) -> TypeDescriptor:
    args = get_args(annotation)

    if origin is Literal:
        if all(isinstance(a, str) for a in args):
            return EnumOf(list(args))
        raise SchemaCompilationError(annotation, context_name, "only string literals are supported")

    if origin in ARRAY_ORIGINS:
        if len(args) != 1:
            raise SchemaCompilationError(annotation, context_name, "array element type required")
        return ArrayOf(_describe(args[0], context_name, seen))

    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return ArrayOf(_describe(args[0], context_name, seen))
        raise SchemaCompilationError(
            annotation, context_name, "only variable-length tuples are supported"
        )

    raise SchemaCompilationError(annotation, context_name)


def unwrap_optional(annotation: Any) -> tuple[Any, bool]:
    """Strip ``None`` from ``Optional[X]`` / ``X | None``."""
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = [a for a in get_args(annotation) if a is not type(None)]
        if len(args) == 1:
            return args[0], True
    return annotation, False


def is_typeddict(annotation: Any) -> bool:
    return (
        inspect.isclass(annotation)
        and issubclass(annotation, dict)
        and hasattr(annotation, "__required_keys__")
    )


def _class_hints(cls: type, context_name: str, seen: frozenset) -> dict[str, Any]:
    if cls in seen:
        raise SchemaCompilationError(cls, context_name, "recursive type")
    try:
        return typing.get_type_hints(cls)
    except (NameError, TypeError) as e:
        raise SchemaCompilationError(cls, context_name, f"cannot resolve annotations ({e})") from e


def _describe_dataclass(cls: type, context_name: str, seen: frozenset) -> ObjectOf:
    hints = _class_hints(cls, context_name, seen)
    seen = seen | {cls}
    members = []
    for field in dataclasses.fields(cls):
        annotation, nullable = unwrap_optional(hints[field.name])
        has_default = (
            field.default is not dataclasses.MISSING
            or field.default_factory is not dataclasses.MISSING
        )
        members.append(
            Member(
                name=field.name,
                type=_describe(annotation, context_name, seen),
                optional=nullable or has_default,
            )
        )
    return ObjectOf(members)


def _describe_typeddict(cls: type, context_name: str, seen: frozenset) -> ObjectOf:
    hints = _class_hints(cls, context_name, seen)
    seen = seen | {cls}
    required_keys = getattr(cls, "__required_keys__", frozenset())
    members = []
    for key, annotation in hints.items():
        annotation, nullable = unwrap_optional(annotation)
        members.append(
            Member(
                name=key,
                type=_describe(annotation, context_name, seen),
                optional=nullable or key not in required_keys,
            )
        )
    return ObjectOf(members)
