"""
ConstructionPlan - immutable result of matching a class against a value source.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from .diagnostics import ConstructionError, ConstructionWarning
from .targets import ParameterTarget, PropertyTarget, type_name


@dataclass(frozen=True, eq=False)
class ConstructionPlan[T]:
    """
    The analysis of how to build ``construct_class`` from one value source.

    A plan records which parameters of ``use_callable`` receive which values,
    which settable properties are assigned afterwards, every error and warning
    found on the way, and the incoming names that matched nothing.

    Plans are cached and shared between threads, so they never change after
    construction. Use ``execute()`` to build an instance; it refuses to run
    when the plan has errors.
    """

    construct_class: type[T]
    construct_type: Any
    use_callable: Callable[..., T]
    callable_parameters: tuple[ParameterTarget, ...]
    with_parameters: tuple[tuple[ParameterTarget, Any], ...]
    then_set_properties: tuple[tuple[PropertyTarget, Any], ...]
    parameter_errors: tuple[tuple[ParameterTarget, ConstructionError], ...] = ()
    parameter_warnings: tuple[tuple[ParameterTarget, ConstructionWarning], ...] = ()
    property_errors: tuple[tuple[PropertyTarget, ConstructionError], ...] = ()
    property_warnings: tuple[tuple[PropertyTarget, ConstructionWarning], ...] = ()
    nonmatching_provider_entries: frozenset[str] = field(default_factory=frozenset)

    @property
    def error_count(self) -> int:
        """Number of distinct parameters and properties with at least one error."""
        return len({target for target, _ in self.parameter_errors}) + len(
            {target for target, _ in self.property_errors}
        )

    @property
    def warning_count(self) -> int:
        """Number of distinct parameters and properties with at least one warning."""
        return len({target for target, _ in self.parameter_warnings}) + len(
            {target for target, _ in self.property_warnings}
        )

    @property
    def has_errors(self) -> bool:
        return self.error_count > 0

    @property
    def has_warnings(self) -> bool:
        return self.warning_count > 0

    def errors_for(self, name: str) -> list[ConstructionError]:
        """All errors recorded against the parameter or property called ``name``."""
        return [error for target, error in (*self.parameter_errors, *self.property_errors) if target.name == name]

    def warnings_for(self, name: str) -> list[ConstructionWarning]:
        """All warnings recorded against the parameter or property called ``name``."""
        return [
            warning
            for target, warning in (*self.parameter_warnings, *self.property_warnings)
            if target.name == name
        ]

    def describe(self) -> list[str]:
        """Render every diagnostic of this plan as a readable line."""
        lines: list[str] = []
        for target, error in (*self.parameter_errors, *self.property_errors):
            lines.append(f"error {error.name} on {target}")
        for target, warning in (*self.parameter_warnings, *self.property_warnings):
            lines.append(f"warning {warning.name} on {target}")
        if self.nonmatching_provider_entries:
            entries = ", ".join(sorted(self.nonmatching_provider_entries))
            lines.append(f"unmatched entries: {entries}")
        return lines

    def execute(self) -> T:
        """
        Build an instance by calling the chosen callable and applying the property bindings.

        Raises:
            PlanNotExecutableError: If the plan has errors
        """
        from ..executor import execute_plan

        return execute_plan(self)

    def __str__(self) -> str:
        return (
            f"ConstructionPlan({type_name(self.construct_type)}: {len(self.with_parameters)} parameters, "
            f"{len(self.then_set_properties)} properties, "
            f"{self.error_count} errors, {self.warning_count} warnings)"
        )
