"""Compile type descriptors into JSON-Schema-shaped argument schemas."""

from typing import Any, Sequence

from ai_agent.core.errors import SchemaCompilationError
from ai_agent.schema.descriptors import (
    PRIMITIVE_KINDS,
    ArrayOf,
    EnumOf,
    Member,
    ObjectOf,
    Primitive,
)


def compile_descriptor(descriptor: Any, context_name: str = "") -> dict[str, Any]:
    """
    Compile a type descriptor into a schema node.

    Property and required ordering follow declaration order, so identical
    descriptors always produce identical schema.

    Args:
        descriptor: The descriptor to compile.
        context_name: Name of the owning function, reported on failure.

    Returns:
        The schema node as a plain dict.

    Raises:
        SchemaCompilationError: If the descriptor (or anything nested in it)
            has an unknown tag, an unsupported primitive kind, or is cyclic.
    """
    return _compile(descriptor, context_name, ())


def compile_parameters(
    parameters: Sequence[Member], context_name: str = ""
) -> dict[str, Any] | None:
    """
    Compile a function's parameter list into an object schema.

    Returns None when the function takes no parameters.
    """
    if not parameters:
        return None
    return compile_descriptor(ObjectOf(parameters), context_name)


def _compile(descriptor: Any, context_name: str, stack: tuple[int, ...]) -> dict[str, Any]:
    if id(descriptor) in stack:
        raise SchemaCompilationError(descriptor, context_name, "cyclic descriptor")
    stack = stack + (id(descriptor),)

    if isinstance(descriptor, Primitive):
        if descriptor.kind not in PRIMITIVE_KINDS:
            raise SchemaCompilationError(
                descriptor, context_name, f"unsupported primitive {descriptor.kind!r}"
            )
        return {"type": descriptor.kind}

    if isinstance(descriptor, ArrayOf):
        return {
            "type": "array",
            "items": _compile(descriptor.element, context_name, stack),
        }

    if isinstance(descriptor, EnumOf):
        return {"type": "string", "enum": [str(v) for v in descriptor.values]}

    if isinstance(descriptor, ObjectOf):
        properties: dict[str, Any] = {}
        required: list[str] = []
        for member in descriptor.members:
            if not isinstance(member, Member):
                raise SchemaCompilationError(member, context_name, "not a member")
            properties[member.name] = _compile(member.type, context_name, stack)
            if not member.optional:
                required.append(member.name)
        return {"type": "object", "properties": properties, "required": required}

    raise SchemaCompilationError(descriptor, context_name)
