"""
Descriptions of the parameters and properties a plan binds values to.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


def type_name(declared_type: Any) -> str:
    """Readable name of a declared type."""
    if isinstance(declared_type, type):
        return declared_type.__name__
    return str(declared_type)


class ParameterKind(Enum):
    """How a formal parameter of a callable receives its value."""

    INSTANCE = "instance"
    EXTENSION_RECEIVER = "extension_receiver"
    VALUE = "value"


@dataclass(frozen=True)
class ParameterTarget:
    """A formal parameter of a constructor or factory function."""

    name: str | None
    declared_type: Any = field(compare=False)
    nullable: bool
    has_default: bool = False
    kind: ParameterKind = ParameterKind.VALUE
    index: int = 0
    positional_only: bool = False
    keyword_only: bool = False

    def __str__(self) -> str:
        return f"parameter {self.name}: {type_name(self.declared_type)}"


@dataclass(frozen=True)
class PropertyTarget:
    """A declared attribute of a class."""

    name: str
    declared_type: Any = field(compare=False)
    nullable: bool
    mutable: bool = True

    def __str__(self) -> str:
        return f"property {self.name}: {type_name(self.declared_type)}"
