"""
CacheKey implementation for the plan cache.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from ..values import NamedValueSource
from .targets import type_name


@dataclass(frozen=True)
class CacheKey:
    """A key that identifies one planning request."""

    construct_class: type
    construct_type: Any
    using_callable: Callable[..., Any]
    value_source: NamedValueSource
    accept_missing_nullable_as_null: bool = True

    def __str__(self) -> str:
        callable_name = getattr(self.using_callable, "__qualname__", str(self.using_callable))
        return f"{type_name(self.construct_type)} via {callable_name}"

    def __hash__(self) -> int:
        return hash(
            (
                self.construct_class,
                self.construct_type,
                self.using_callable,
                self.value_source,
                self.accept_missing_nullable_as_null,
            )
        )
