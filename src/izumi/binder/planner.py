"""
ConstructionPlanner - matches a class's parameters and properties against a value source.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from .errors import BindingConfigurationError
from .introspection import ReflectiveIntrospector, TypeIntrospector
from .model import (
    ConstructionError,
    ConstructionPlan,
    ConstructionWarning,
    ParameterKind,
    ParameterTarget,
    PropertyTarget,
)
from .values import NamedValueSource

T = TypeVar("T")

logger = logging.getLogger(__name__)


class _PlanAccumulator:
    """Mutable bookkeeping for a single build; frozen into a ConstructionPlan at the end."""

    def __init__(self, introspector: TypeIntrospector, properties: list[PropertyTarget]):
        self._introspector = introspector
        self.properties: dict[str, PropertyTarget] = {p.name: p for p in properties}
        self.used_entries: set[str] = set()
        self.used_properties: set[str] = set()
        self.param_values: list[tuple[ParameterTarget, Any]] = []
        self.property_values: list[tuple[PropertyTarget, Any]] = []
        self.param_errors: list[tuple[ParameterTarget, ConstructionError]] = []
        self.param_warnings: list[tuple[ParameterTarget, ConstructionWarning]] = []
        self.property_errors: list[tuple[PropertyTarget, ConstructionError]] = []
        self.property_warnings: list[tuple[PropertyTarget, ConstructionWarning]] = []

    def mark_entry_matched(self, name: str) -> None:
        self.used_entries.add(name)

    def consume_property(self, name: str) -> None:
        if name in self.properties:
            self.used_properties.add(name)

    def use_param(self, param: ParameterTarget, value: Any) -> None:
        if value is not None and not self._introspector.is_compatible(param.declared_type, value):
            self.param_errors.append((param, ConstructionError.WRONG_TYPE))
        else:
            self.param_values.append((param, value))

    def use_property(self, prop: PropertyTarget, value: Any) -> None:
        if value is not None and not self._introspector.is_compatible(prop.declared_type, value):
            self.property_errors.append((prop, ConstructionError.WRONG_TYPE))
        else:
            self.property_values.append((prop, value))


class ConstructionPlanner:
    """
    Builds ConstructionPlans.

    The planner is stateless apart from its introspector; caching is the job
    of PlanCache. Data problems end up as diagnostics on the returned plan,
    while malformed requests raise BindingConfigurationError.
    """

    def __init__(self, introspector: TypeIntrospector | None = None):
        self._introspector = introspector if introspector is not None else ReflectiveIntrospector()

    @property
    def introspector(self) -> TypeIntrospector:
        return self._introspector

    def build(
        self,
        construct_class: type[T],
        construct_type: Any,
        using_callable: Callable[..., T],
        value_source: NamedValueSource,
        accept_missing_nullable_as_null: bool = True,
    ) -> ConstructionPlan[T]:
        """
        Match ``using_callable`` and the properties of ``construct_class`` against ``value_source``.

        Args:
            construct_class: The class being constructed
            construct_type: The full target type; may carry generic parameters
                the class does not
            using_callable: A constructor or factory function of ``construct_class``
            value_source: Where incoming values come from
            accept_missing_nullable_as_null: Bind missing nullable parameters
                to None instead of reporting them as missing

        Returns:
            An immutable plan with bindings and diagnostics

        Raises:
            BindingConfigurationError: If the callable does not belong to the
                class, or has a parameter that cannot be bound by name
        """
        introspector = self._introspector
        is_constructor_call = any(c == using_callable for c in introspector.constructors(construct_class))
        is_factory_call = any(f == using_callable for f in introspector.factory_functions(construct_class))

        if not is_constructor_call and not is_factory_call:
            raise BindingConfigurationError(
                f"callable {using_callable!r} is not from {construct_class.__qualname__} nor its factory functions",
                construct_class,
                using_callable,
            )

        acc = _PlanAccumulator(introspector, introspector.properties(construct_class))
        incoming_names = {name.split(".", 1)[0] for name, _ in value_source.entries()}
        parameters = introspector.parameters(construct_class, using_callable)

        for param in parameters:
            if param.kind is ParameterKind.INSTANCE:
                if not is_factory_call:
                    raise BindingConfigurationError(
                        "non factory callable wasn't expecting an instance parameter",
                        construct_class,
                        using_callable,
                    )
                acc.param_values.append((param, introspector.companion_instance(construct_class)))
            elif param.kind is ParameterKind.EXTENSION_RECEIVER:
                raise BindingConfigurationError(
                    "callable requires a receiver object and cannot be used to construct a class",
                    construct_class,
                    using_callable,
                )
            else:
                self._plan_value_parameter(param, value_source, accept_missing_nullable_as_null, acc)

        for prop in acc.properties.values():
            if prop.name not in acc.used_properties:
                self._plan_property(prop, value_source, acc)

        plan: ConstructionPlan[T] = ConstructionPlan(
            construct_class=construct_class,
            construct_type=construct_type,
            use_callable=using_callable,
            callable_parameters=tuple(parameters),
            with_parameters=tuple(acc.param_values),
            then_set_properties=tuple(acc.property_values),
            parameter_errors=tuple(acc.param_errors),
            parameter_warnings=tuple(acc.param_warnings),
            property_errors=tuple(acc.property_errors),
            property_warnings=tuple(acc.property_warnings),
            nonmatching_provider_entries=frozenset(incoming_names - acc.used_entries),
        )
        logger.debug("Built %s", plan)
        return plan

    def _plan_value_parameter(
        self,
        param: ParameterTarget,
        value_source: NamedValueSource,
        accept_missing_nullable_as_null: bool,
        acc: _PlanAccumulator,
    ) -> None:
        if param.name is None:
            raise BindingConfigurationError("callable has parameter with unknown name")

        name = param.name
        if not value_source.exists_by_name(name, param.declared_type):
            if param.has_default:
                # the callable applies its own default
                acc.consume_property(name)
            elif param.nullable and accept_missing_nullable_as_null:
                acc.use_param(param, None)
                acc.consume_property(name)
                acc.param_warnings.append((param, ConstructionWarning.DEFAULT_VALUE_USED_FOR_DATATYPE))
            else:
                acc.param_errors.append((param, ConstructionError.MISSING_VALUE_FOR_REQUIRED_PARAMETER))
                acc.param_errors.append((param, ConstructionError.NULL_VALUE_NON_NULLABLE_TYPE))
            return

        acc.mark_entry_matched(name)
        value = value_source.value_by_name(name, param.declared_type)
        if value is None and not param.nullable:
            acc.param_errors.append((param, ConstructionError.NULL_VALUE_NON_NULLABLE_TYPE))
        else:
            acc.use_param(param, value)
            acc.consume_property(name)

    def _plan_property(self, prop: PropertyTarget, value_source: NamedValueSource, acc: _PlanAccumulator) -> None:
        present = value_source.exists_by_name(prop.name, prop.declared_type)

        if not prop.mutable:
            if present:
                # matches an entry, it just cannot be applied
                acc.mark_entry_matched(prop.name)
                acc.property_errors.append((prop, ConstructionError.NON_SETTABLE_PROPERTY))
            return

        if not present:
            acc.property_warnings.append((prop, ConstructionWarning.MISSING_VALUE_FOR_SETTABLE_PROPERTY))
            return

        acc.mark_entry_matched(prop.name)
        value = value_source.value_by_name(prop.name, prop.declared_type)
        if value is None and not prop.nullable:
            acc.property_errors.append((prop, ConstructionError.NULL_VALUE_NON_NULLABLE_TYPE))
        else:
            acc.use_property(prop, value)
            acc.consume_property(prop.name)
