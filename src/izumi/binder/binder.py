"""
Binder - entry point that plans and produces typed objects from loosely-typed data.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from .cache import PlanCache
from .dotted import source_at
from .errors import BindingConfigurationError, PlanNotExecutableError
from .executor import execute_plan
from .introspection import ReflectiveIntrospector, TypeIntrospector
from .model import CacheKey, ConstructionPlan
from .planner import ConstructionPlanner
from .values import MapValueSource, NamedValueSource

T = TypeVar("T")


def as_value_source(source: NamedValueSource | Mapping[str, Any]) -> NamedValueSource:
    """Wrap a plain mapping in a MapValueSource; value sources pass through."""
    if isinstance(source, NamedValueSource):
        return source
    return MapValueSource(source)


class Binder:
    """
    Binds name-addressed data onto typed classes.

    The Binder produces ConstructionPlans, memoized in a PlanCache, and
    executes them. It holds no per-bind state, so one Binder can be shared by
    many threads.

    Example:
        ```python
        @dataclass
        class Person:
            name: str
            age: int | None = None

        binder = Binder()
        plan = binder.plan(Person, {"name": "Ann", "age": 41})
        if not plan.has_errors:
            person = binder.produce(plan)
        ```
    """

    def __init__(
        self,
        introspector: TypeIntrospector | None = None,
        cache: PlanCache | None = None,
        accept_missing_nullable_as_null: bool = True,
    ):
        """
        Create a new Binder.

        Args:
            introspector: How target classes are inspected; defaults to a
                ReflectiveIntrospector
            cache: Where plans are memoized; defaults to the process-wide
                PlanCache.shared()
            accept_missing_nullable_as_null: Default policy for nullable
                parameters missing from the source
        """
        self._planner = ConstructionPlanner(introspector if introspector is not None else ReflectiveIntrospector())
        self._cache = cache if cache is not None else PlanCache.shared()
        self._accept_missing_nullable_as_null = accept_missing_nullable_as_null

    @property
    def cache(self) -> PlanCache:
        return self._cache

    def plan(
        self,
        target_class: type[T],
        source: NamedValueSource | Mapping[str, Any],
        using: Callable[..., T] | None = None,
        target_type: Any = None,
        accept_missing_nullable_as_null: bool | None = None,
    ) -> ConstructionPlan[T]:
        """
        Create (or fetch from the cache) the plan for binding ``source`` onto ``target_class``.

        Args:
            target_class: The class to construct
            source: A value source, or a mapping to wrap in one
            using: Constructor or factory function to call; defaults to the class itself
            target_type: The full target type (e.g. a parameterized generic);
                defaults to ``target_class``
            accept_missing_nullable_as_null: Overrides the binder's default policy

        Returns:
            The construction plan; inspect ``has_errors`` before executing it

        Raises:
            BindingConfigurationError: If ``using`` is not a constructor or
                factory function of ``target_class``
        """
        value_source = as_value_source(source)
        using_callable = using if using is not None else target_class
        construct_type = target_type if target_type is not None else target_class
        policy = (
            self._accept_missing_nullable_as_null
            if accept_missing_nullable_as_null is None
            else accept_missing_nullable_as_null
        )

        key = CacheKey(target_class, construct_type, using_callable, value_source, policy)
        return self._cache.get_or_compute(
            key,
            lambda: self._planner.build(target_class, construct_type, using_callable, value_source, policy),
        )

    def plan_at(
        self,
        path: str,
        target_class: type[T],
        source: NamedValueSource | Mapping[str, Any],
        using: Callable[..., T] | None = None,
        target_type: Any = None,
        accept_missing_nullable_as_null: bool | None = None,
    ) -> ConstructionPlan[T]:
        """
        Plan against the nested source found at dotted ``path`` inside ``source``.

        Raises:
            BindingConfigurationError: If nothing is found at ``path``
            NoNestedValueSourceError: If the path runs through a value that is not a mapping
        """
        nested = source_at(path, as_value_source(source))
        if nested is None:
            raise BindingConfigurationError(f"no nested values found at {path!r}", target_class)
        return self.plan(target_class, nested, using, target_type, accept_missing_nullable_as_null)

    def produce(self, plan: ConstructionPlan[T]) -> T:
        """
        Execute a plan.

        Raises:
            PlanNotExecutableError: If the plan has errors
        """
        return execute_plan(plan)

    def bind(
        self,
        target_class: type[T],
        source: NamedValueSource | Mapping[str, Any],
        using: Callable[..., T] | None = None,
        target_type: Any = None,
        accept_missing_nullable_as_null: bool | None = None,
    ) -> T:
        """
        Plan and produce in one step.

        Raises:
            PlanNotExecutableError: If the plan has errors; the error carries the plan
        """
        plan = self.plan(target_class, source, using, target_type, accept_missing_nullable_as_null)
        if plan.has_errors:
            raise PlanNotExecutableError(plan)
        return self.produce(plan)
