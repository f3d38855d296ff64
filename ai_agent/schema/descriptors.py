"""Structural type descriptors for function parameters."""

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Primitive:
    """A scalar JSON type: "number", "string" or "boolean"."""

    kind: str


@dataclass(frozen=True)
class ArrayOf:
    """A homogeneous array of ``element`` values."""

    element: "TypeDescriptor"


@dataclass(frozen=True)
class EnumOf:
    """A closed set of names, always represented as strings."""

    values: tuple[str, ...]

    def __init__(self, values: "tuple[str, ...] | list[str]") -> None:
        object.__setattr__(self, "values", tuple(values))


@dataclass(frozen=True)
class Member:
    """A named member of an object, or a parameter of a function."""

    name: str
    type: "TypeDescriptor"
    optional: bool = False


@dataclass(frozen=True)
class ObjectOf:
    """An object with members in declaration order."""

    members: tuple[Member, ...]

    def __init__(self, members: "tuple[Member, ...] | list[Member]") -> None:
        object.__setattr__(self, "members", tuple(members))


TypeDescriptor = Union[Primitive, ArrayOf, EnumOf, ObjectOf]

NUMBER = Primitive("number")
STRING = Primitive("string")
BOOLEAN = Primitive("boolean")

PRIMITIVE_KINDS = ("number", "string", "boolean")


def array_of(element: TypeDescriptor) -> ArrayOf:
    """Shorthand for ``ArrayOf(element)``."""
    return ArrayOf(element)


def enum_of(*values: str) -> EnumOf:
    """Shorthand for ``EnumOf(values)``."""
    return EnumOf(values)


def object_of(*members: Member) -> ObjectOf:
    """Shorthand for ``ObjectOf(members)``."""
    return ObjectOf(members)


def param(name: str, type: TypeDescriptor, optional: bool = False) -> Member:
    """Describe a single function parameter."""
    return Member(name=name, type=type, optional=optional)
