"""
Exceptions raised by the binder.

Per-field data problems are never raised; they are collected as diagnostics
on a ConstructionPlan. The exceptions below signal caller or configuration
mistakes that make an operation impossible.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .model import ConstructionPlan


class BinderError(Exception):
    """Base class for all binder failures."""


class BindingConfigurationError(BinderError, ValueError):
    """Raised when a plan cannot be built because the request itself is malformed."""

    def __init__(self, message: str, construct_class: type | None = None, using_callable: Any = None):
        self.construct_class = construct_class
        self.using_callable = using_callable
        super().__init__(message)


class NoNestedValueSourceError(BinderError):
    """Raised when a dotted path walks into a value that cannot act as a value source."""

    def __init__(self, path: str, value: Any):
        self.path = path
        self.value = value
        super().__init__(
            f"dotted variable {path} has type {type(value).__name__} without a known value provider"
        )


class PlanNotExecutableError(BinderError):
    """Raised when executing a plan that carries construction errors."""

    def __init__(self, plan: ConstructionPlan[Any]):
        self.plan = plan
        details = "; ".join(plan.describe())
        super().__init__(f"Construction Plan with errors is not executable: {details}")
