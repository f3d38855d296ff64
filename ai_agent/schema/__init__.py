"""Type descriptors and their JSON schema compiler."""

from .descriptors import (
    Primitive,
    ArrayOf,
    EnumOf,
    Member,
    ObjectOf,
    TypeDescriptor,
    NUMBER,
    STRING,
    BOOLEAN,
    array_of,
    enum_of,
    object_of,
    param,
)
from .compiler import compile_descriptor, compile_parameters
from .introspect import describe_callable, describe_type
from .convert import convert_value

__all__ = [
    "Primitive",
    "ArrayOf",
    "EnumOf",
    "Member",
    "ObjectOf",
    "TypeDescriptor",
    "NUMBER",
    "STRING",
    "BOOLEAN",
    "array_of",
    "enum_of",
    "object_of",
    "param",
    "compile_descriptor",
    "compile_parameters",
    "describe_callable",
    "describe_type",
    "convert_value",
]
