"""
Type introspection for construction planning.

The planner never inspects classes itself; it asks a TypeIntrospector. The
default ReflectiveIntrospector reads ordinary Python classes through
``inspect`` and ``typing``; other implementations (generated descriptor
tables, schema-driven types) can be injected instead.
"""

from __future__ import annotations

import dataclasses
import inspect
import re
import types
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import (
    Annotated,
    Any,
    ClassVar,
    Final,
    Literal,
    TypeAliasType,
    TypeVar,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from .model import ParameterKind, ParameterTarget, PropertyTarget

_NUMERIC_TYPES = (int, float, complex)
_NONE_TOKEN = re.compile(r"\bNone\b")


def is_nullable(declared_type: Any) -> bool:
    """Check whether None is an acceptable value for ``declared_type``."""
    if declared_type in (Any, object, None, type(None), inspect.Parameter.empty):
        return True
    if isinstance(declared_type, str):
        if declared_type in ("Any", "typing.Any"):
            return True
        if declared_type.startswith(("Optional[", "typing.Optional[")):
            return True
        return _NONE_TOKEN.search(declared_type) is not None
    if isinstance(declared_type, TypeVar):
        return declared_type.__bound__ is None and not declared_type.__constraints__
    if isinstance(declared_type, TypeAliasType):
        return is_nullable(declared_type.__value__)

    origin = get_origin(declared_type)
    if origin is Annotated or origin is Final:
        return is_nullable(get_args(declared_type)[0])
    if origin is Union or origin is types.UnionType:
        return any(is_nullable(arg) for arg in get_args(declared_type))
    if origin is Literal:
        return None in get_args(declared_type)
    return False


def is_assignable(declared_type: Any, value: Any) -> bool:
    """
    Check whether ``value`` may be bound to something declared as ``declared_type``.

    Numeric widening (int to float, int or float to complex) is accepted;
    bool is not accepted where a number is declared. Typing constructs that
    cannot be checked at runtime, such as unresolved forward references, are
    accepted.
    """
    if value is None:
        return is_nullable(declared_type)
    if declared_type in (Any, object, inspect.Parameter.empty) or isinstance(declared_type, str):
        return True
    if declared_type is None or declared_type is type(None):
        return False
    if isinstance(declared_type, TypeVar):
        if declared_type.__constraints__:
            return any(is_assignable(c, value) for c in declared_type.__constraints__)
        return declared_type.__bound__ is None or is_assignable(declared_type.__bound__, value)
    if isinstance(declared_type, TypeAliasType):
        return is_assignable(declared_type.__value__, value)

    supertype = getattr(declared_type, "__supertype__", None)
    if supertype is not None:
        # NewType
        return is_assignable(supertype, value)

    origin = get_origin(declared_type)
    if origin is Annotated or origin is Final:
        return is_assignable(get_args(declared_type)[0], value)
    if origin is Union or origin is types.UnionType:
        return any(is_assignable(arg, value) for arg in get_args(declared_type))
    if origin is Literal:
        return any(type(arg) is type(value) and arg == value for arg in get_args(declared_type))
    if origin is not None:
        declared_type = origin

    if not isinstance(declared_type, type):
        return True

    if isinstance(value, bool) and declared_type in _NUMERIC_TYPES:
        return False
    try:
        if isinstance(value, declared_type):
            return True
    except TypeError:
        # protocols that are not runtime checkable
        return True
    if declared_type is float:
        return isinstance(value, int)
    if declared_type is complex:
        return isinstance(value, int | float)
    return False


def _type_hints(obj: Any) -> dict[str, Any]:
    try:
        return get_type_hints(obj, include_extras=True)
    except (NameError, TypeError, AttributeError):
        # Unresolvable forward references; fall back to the raw annotations
        return dict(getattr(obj, "__annotations__", None) or {})


def _is_class_var(hint: Any) -> bool:
    if hint is ClassVar or get_origin(hint) is ClassVar:
        return True
    return isinstance(hint, str) and hint.startswith(("ClassVar", "typing.ClassVar"))


def _is_final(hint: Any) -> bool:
    if hint is Final or get_origin(hint) is Final:
        return True
    return isinstance(hint, str) and hint.startswith(("Final", "typing.Final"))


class TypeIntrospector(ABC):
    """
    Capability interface the planner uses to look at target classes.

    Implementations describe a class's constructors, factory functions and
    properties, the formal parameters of a callable, and decide whether a
    runtime value is compatible with a declared type.
    """

    @abstractmethod
    def constructors(self, target_class: type) -> list[Callable[..., Any]]:
        """Callables that construct ``target_class`` directly."""

    @abstractmethod
    def factory_functions(self, target_class: type) -> list[Callable[..., Any]]:
        """Factory functions declared by ``target_class``."""

    @abstractmethod
    def companion_instance(self, target_class: type) -> Any:
        """The receiver passed to an instance-receiver parameter of a factory function."""

    @abstractmethod
    def properties(self, target_class: type) -> list[PropertyTarget]:
        """Declared properties of ``target_class``, in declaration order."""

    @abstractmethod
    def parameters(self, target_class: type, using_callable: Callable[..., Any]) -> list[ParameterTarget]:
        """Formal parameters of ``using_callable``, in declaration order."""

    @abstractmethod
    def is_compatible(self, declared_type: Any, value: Any) -> bool:
        """Whether ``value`` may be bound to something declared as ``declared_type``."""


class ReflectiveIntrospector(TypeIntrospector):
    """
    TypeIntrospector for plain Python classes, dataclasses and named tuples.

    - The constructor is the class itself.
    - Factory functions are the classmethods, staticmethods and plain
      functions declared in the class body. The class object is the receiver
      of a classmethod, so it is also the companion instance.
    - Properties are the public annotated attributes (ClassVar excluded) and
      public ``property`` descriptors. Annotated attributes are read-only on
      frozen dataclasses and named tuples, or when declared ``Final``;
      descriptors are settable when they define a setter.
    """

    def constructors(self, target_class: type) -> list[Callable[..., Any]]:
        return [target_class]

    def factory_functions(self, target_class: type) -> list[Callable[..., Any]]:
        functions: list[Callable[..., Any]] = []
        for name, attr in vars(target_class).items():
            if isinstance(attr, classmethod):
                functions.append(getattr(target_class, name))
                functions.append(attr.__func__)
            elif isinstance(attr, staticmethod):
                functions.append(attr.__func__)
            elif inspect.isfunction(attr):
                functions.append(attr)
        return functions

    def companion_instance(self, target_class: type) -> Any:
        return target_class

    def properties(self, target_class: type) -> list[PropertyTarget]:
        read_only = issubclass(target_class, tuple) or (
            dataclasses.is_dataclass(target_class) and target_class.__dataclass_params__.frozen  # type: ignore[attr-defined]
        )

        found: dict[str, PropertyTarget] = {}
        for name, hint in _type_hints(target_class).items():
            if name.startswith("_") or _is_class_var(hint) or isinstance(hint, dataclasses.InitVar):
                continue
            found[name] = PropertyTarget(name, hint, is_nullable(hint), mutable=not (read_only or _is_final(hint)))

        for klass in reversed(target_class.__mro__):
            for name, attr in vars(klass).items():
                if name.startswith("_") or not isinstance(attr, property):
                    continue
                hint = _type_hints(attr.fget).get("return", Any) if attr.fget is not None else Any
                found[name] = PropertyTarget(name, hint, is_nullable(hint), mutable=attr.fset is not None)

        return list(found.values())

    def parameters(self, target_class: type, using_callable: Callable[..., Any]) -> list[ParameterTarget]:
        receiver_kind = self._receiver_kind(target_class, using_callable)
        hints = self._callable_hints(using_callable)

        formal = [
            p
            for p in inspect.signature(using_callable).parameters.values()
            if p.kind not in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
        ]

        result: list[ParameterTarget] = []
        for index, param in enumerate(formal):
            hint = hints.get(param.name, param.annotation)
            if hint is inspect.Parameter.empty:
                hint = Any
            kind = receiver_kind if index == 0 and receiver_kind is not None else ParameterKind.VALUE
            result.append(
                ParameterTarget(
                    name=param.name,
                    declared_type=hint,
                    nullable=is_nullable(hint),
                    has_default=param.default is not inspect.Parameter.empty,
                    kind=kind,
                    index=index,
                    positional_only=param.kind is inspect.Parameter.POSITIONAL_ONLY,
                    keyword_only=param.kind is inspect.Parameter.KEYWORD_ONLY,
                )
            )
        return result

    def is_compatible(self, declared_type: Any, value: Any) -> bool:
        return is_assignable(declared_type, value)

    def _receiver_kind(self, target_class: type, using_callable: Callable[..., Any]) -> ParameterKind | None:
        """Kind of the implicit first parameter when ``using_callable`` is an unbound function of the class."""
        for attr in vars(target_class).values():
            if isinstance(attr, classmethod) and attr.__func__ is using_callable:
                return ParameterKind.INSTANCE
            if inspect.isfunction(attr) and attr is using_callable:
                return ParameterKind.EXTENSION_RECEIVER
        return None

    def _callable_hints(self, using_callable: Callable[..., Any]) -> dict[str, Any]:
        if isinstance(using_callable, type):
            return _type_hints(using_callable.__init__)
        return _type_hints(using_callable)
