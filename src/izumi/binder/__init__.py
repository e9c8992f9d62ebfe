"""
Chibi Izumi Binder - binds loosely-typed, name-addressed data onto typed Python objects.

This library provides:
- Value sources over mappings, with dotted-path resolution through nested maps
- Construction plans that match constructor/factory parameters and settable
  properties against a value source, with errors and warnings as diagnostics
- A thread-safe, compute-once plan cache
- Plan execution that refuses to run plans with errors
"""

from .binder import Binder, as_value_source
from .cache import CacheStats, PlanCache
from .dotted import resolve_dotted, source_at
from .errors import BinderError, BindingConfigurationError, NoNestedValueSourceError, PlanNotExecutableError
from .executor import execute_plan
from .introspection import ReflectiveIntrospector, TypeIntrospector, is_assignable, is_nullable
from .model import (
    CacheKey,
    ConstructionError,
    ConstructionPlan,
    ConstructionWarning,
    ParameterKind,
    ParameterTarget,
    PropertyTarget,
)
from .planner import ConstructionPlanner
from .values import IndexedValueSource, MapValueSource, NamedValueSource

__all__ = [
    "Binder",
    "BinderError",
    "BindingConfigurationError",
    "CacheKey",
    "CacheStats",
    "ConstructionError",
    "ConstructionPlan",
    "ConstructionPlanner",
    "ConstructionWarning",
    "IndexedValueSource",
    "MapValueSource",
    "NamedValueSource",
    "NoNestedValueSourceError",
    "ParameterKind",
    "ParameterTarget",
    "PlanCache",
    "PlanNotExecutableError",
    "PropertyTarget",
    "ReflectiveIntrospector",
    "TypeIntrospector",
    "as_value_source",
    "execute_plan",
    "is_assignable",
    "is_nullable",
    "resolve_dotted",
    "source_at",
]
