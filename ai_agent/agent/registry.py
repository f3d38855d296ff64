"""Registry of functions the model may call."""

import logging
from typing import Any, Callable, Iterable, Mapping, Sequence

from ai_agent.core.errors import (
    ArgumentCountMismatchError,
    ArgumentParseError,
    UnknownFunctionError,
)
from ai_agent.core.types import FunctionSpec
from ai_agent.schema.compiler import compile_parameters
from ai_agent.schema.convert import convert_value
from ai_agent.schema.descriptors import Member
from ai_agent.schema.introspect import describe_callable, implicit_defaults, parameter_annotations

logger = logging.getLogger(__name__)


class FunctionRegistry:
    """
    Name to function map with compiled argument schemas.

    Registering a name twice replaces the earlier function; the name keeps
    its original position in ``names()``. Registration is expected to finish
    before requests start, after which the registry is only read.
    """

    def __init__(self, functions: Iterable[FunctionSpec] = ()) -> None:
        self._functions: dict[str, FunctionSpec] = {}
        for spec in functions:
            self.add(spec)

    def register(
        self,
        func: Callable[..., Any],
        name: str,
        description: str | None = None,
        parameters: Sequence[Member] | None = None,
    ) -> FunctionSpec:
        """
        Register a callable under ``name``.

        Args:
            func: The function to expose. May be a coroutine function.
            name: Name the model uses to call it.
            description: Optional description sent to the model.
            parameters: Explicit parameter descriptors. Derived from the
                callable's annotations when omitted. Their names must match
                the callable's parameter names and values are passed as-is.

        Returns:
            The stored FunctionSpec.

        Raises:
            TypeError: If ``func`` is not callable.
            SchemaCompilationError: If the parameters cannot be compiled.
        """
        if not callable(func):
            raise TypeError(f"Expected func to be a function, but got {type(func).__name__}")

        annotations: dict[str, Any] = {}
        defaults: dict[str, Any] = {}
        if parameters is not None:
            members = tuple(parameters)
        else:
            members = tuple(describe_callable(func))
            annotations = parameter_annotations(func)
            defaults = implicit_defaults(func)
        spec = FunctionSpec(
            name=name,
            func=func,
            description=description,
            parameters=compile_parameters(members, name),
            members=members,
            annotations=annotations,
            defaults=defaults,
        )
        return self.add(spec)

    def add(self, spec: FunctionSpec) -> FunctionSpec:
        """Store a prebuilt FunctionSpec, replacing any entry with its name."""
        if spec.name in self._functions:
            logger.debug(f"Replacing registered function {spec.name}")
        else:
            logger.debug(f"Registered function {spec.name}")
        self._functions[spec.name] = spec
        return spec

    def get(self, name: str) -> FunctionSpec:
        try:
            return self._functions[name]
        except KeyError:
            raise UnknownFunctionError(name) from None

    def names(self) -> list[str]:
        """Registered names in registration order."""
        return list(self._functions)

    def specs(self, names: Iterable[str] | None = None) -> list[dict[str, Any]]:
        """
        Wire projections of the registered functions.

        When ``names`` is given, only those functions are returned, still in
        registration order.
        """
        if names is None:
            return [spec.to_wire() for spec in self._functions.values()]
        wanted = set(names)
        return [spec.to_wire() for spec in self._functions.values() if spec.name in wanted]

    def bind_arguments(self, name: str, arguments: Mapping[str, Any]) -> dict[str, Any]:
        """
        Match a named argument object to the function's parameters.

        Omitted parameters keep their Python default; ``Optional[...]``
        parameters without one receive ``None``. Values are converted to the
        annotated parameter types, so enum names become members and objects
        become dataclass instances.

        Raises:
            UnknownFunctionError: If ``name`` is not registered.
            ArgumentCountMismatchError: If a required parameter is missing or
                an undeclared name is given.
            ArgumentParseError: If a value does not fit its parameter type.
        """
        spec = self.get(name)
        declared = spec.argument_names
        unknown = [key for key in arguments if key not in declared]
        missing = [key for key in spec.required if key not in arguments]
        if unknown or missing:
            detail = "; ".join(
                f"{label}: {', '.join(keys)}"
                for label, keys in (("missing", missing), ("unknown", unknown))
                if keys
            )
            raise ArgumentCountMismatchError(name, _expected_count(spec), len(arguments), detail)

        bound: dict[str, Any] = {}
        for key in declared:
            if key in arguments:
                bound[key] = self._convert(spec, key, arguments[key])
            elif key in spec.defaults:
                bound[key] = spec.defaults[key]
        return bound

    def dispatch_named(self, name: str, arguments: Mapping[str, Any]) -> Any:
        """Call a registered function with named arguments, see ``bind_arguments``."""
        spec = self.get(name)
        return spec.func(**self.bind_arguments(name, arguments))

    def dispatch(self, name: str, args: Sequence[Any]) -> Any:
        """
        Call a registered function with positional arguments.

        The result may be awaitable when the function is a coroutine
        function. Exceptions raised by the function propagate unchanged.

        Raises:
            UnknownFunctionError: If ``name`` is not registered.
            ArgumentCountMismatchError: If fewer values than required
                parameters, or more values than declared parameters, are given.
        """
        spec = self.get(name)
        declared = spec.argument_names
        if not len(spec.required) <= len(args) <= len(declared):
            raise ArgumentCountMismatchError(name, _expected_count(spec), len(args))
        omitted = {key: spec.defaults[key] for key in declared[len(args):] if key in spec.defaults}
        return spec.func(*args, **omitted)

    def _convert(self, spec: FunctionSpec, key: str, value: Any) -> Any:
        if key not in spec.annotations:
            return value
        try:
            return convert_value(spec.annotations[key], value)
        except ValueError as e:
            raise ArgumentParseError(spec.name, None, f"{key}: {e}") from e

    def __contains__(self, name: object) -> bool:
        return name in self._functions

    def __len__(self) -> int:
        return len(self._functions)


def _expected_count(spec: FunctionSpec) -> str:
    required = len(spec.required)
    total = len(spec.argument_names)
    return str(required) if required == total else f"{required}..{total}"
