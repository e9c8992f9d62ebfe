"""
Model subpackage containing core data structures and types.

This subpackage contains the immutable data structures produced and consumed
by the planner, organized to avoid circular dependencies.
"""

from .diagnostics import ConstructionError, ConstructionWarning
from .keys import CacheKey
from .plan import ConstructionPlan
from .targets import ParameterKind, ParameterTarget, PropertyTarget

__all__ = [
    "CacheKey",
    "ConstructionError",
    "ConstructionPlan",
    "ConstructionWarning",
    "ParameterKind",
    "ParameterTarget",
    "PropertyTarget",
]
