"""
Diagnostic kinds attached to parameters and properties while planning.
"""

from __future__ import annotations

from enum import Enum


class ConstructionError(Enum):
    """Problems that make a plan non-executable."""

    WRONG_TYPE = "wrong_type"
    COERCION_ERROR = "coercion_error"
    NULL_VALUE_NON_NULLABLE_TYPE = "null_value_non_nullable_type"
    MISSING_PROPERTY = "missing_property"
    MISSING_VALUE_FOR_REQUIRED_PARAMETER = "missing_value_for_required_parameter"
    NON_SETTABLE_PROPERTY = "non_settable_property"


class ConstructionWarning(Enum):
    """Informational findings that do not block execution."""

    MISSING_VALUE_FOR_SETTABLE_PROPERTY = "missing_value_for_settable_property"
    DEFAULT_VALUE_USED_FOR_DATATYPE = "default_value_used_for_datatype"
