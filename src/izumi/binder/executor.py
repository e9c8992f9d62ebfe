"""
Plan execution: calls the chosen callable and applies property bindings.
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

from .errors import PlanNotExecutableError
from .model import ConstructionPlan

T = TypeVar("T")

logger = logging.getLogger(__name__)


def execute_plan(plan: ConstructionPlan[T]) -> T:
    """
    Materialize an instance from a plan.

    When every formal parameter is bound the callable is invoked positionally
    in declaration order; otherwise parameters are passed by name so the
    unbound ones fall back to the callable's own defaults. Property bindings
    are applied afterwards, in order.

    Args:
        plan: The plan to execute

    Returns:
        The constructed instance

    Raises:
        PlanNotExecutableError: If the plan has errors; the callable is not invoked
    """
    if plan.has_errors:
        raise PlanNotExecutableError(plan)

    try:
        if len(plan.with_parameters) == len(plan.callable_parameters):
            args, kwargs = _positional_call(plan)
        else:
            args, kwargs = _keyword_call(plan)
        instance = plan.use_callable(*args, **kwargs)

        for prop, value in plan.then_set_properties:
            setattr(instance, prop.name, value)
        return instance
    except Exception as e:
        name = getattr(plan.use_callable, "__qualname__", repr(plan.use_callable))
        logger.exception("Executing construction plan for %s via %s failed", plan.construct_class.__qualname__, name)
        e.add_note(f"while constructing {plan.construct_class.__qualname__} via {name}")
        raise


def _positional_call(plan: ConstructionPlan[Any]) -> tuple[list[Any], dict[str, Any]]:
    args: list[Any] = []
    kwargs: dict[str, Any] = {}
    for param, value in plan.with_parameters:
        if param.keyword_only and param.name is not None:
            kwargs[param.name] = value
        else:
            args.append(value)
    return args, kwargs


def _keyword_call(plan: ConstructionPlan[Any]) -> tuple[list[Any], dict[str, Any]]:
    bound = dict(plan.with_parameters)
    args: list[Any] = []
    kwargs: dict[str, Any] = {}
    gap: str | None = None

    for param in plan.callable_parameters:
        if param not in bound:
            if param.positional_only:
                gap = param.name
            continue
        value = bound[param]
        if param.positional_only:
            if gap is not None:
                raise TypeError(
                    f"positional-only parameter {param.name!r} cannot be passed after omitted parameter {gap!r}"
                )
            args.append(value)
        else:
            kwargs[str(param.name)] = value
    return args, kwargs
