"""
Value sources: uniform access to named (or indexed) incoming values.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any


class NamedValueSource(ABC):
    """
    Abstract interface over "is there a value under this name, and what is it".

    A name is usually a single segment ("a"). Sources that report
    ``supports_dotted_names`` may also answer for multi-segment names ("a.b")
    directly.

    Sources take part in plan cache keys, so implementations must provide
    value-based equality and hashing.
    """

    @abstractmethod
    def exists_by_name(self, name: str, target_type: Any) -> bool:
        """Check whether a value (possibly None) is present under ``name``."""

    @abstractmethod
    def value_by_name(self, name: str, target_type: Any) -> Any:
        """Return the value under ``name``, or None when absent."""

    @abstractmethod
    def entries(self) -> list[tuple[str, Any]]:
        """Return the (name, value) pairs this source knows about, in order."""

    @property
    @abstractmethod
    def supports_dotted_names(self) -> bool:
        """Whether a single query can resolve a multi-segment name."""

    @property
    @abstractmethod
    def knows_entries(self) -> bool:
        """Whether ``entries()`` is a complete enumeration rather than empty or partial."""

    @abstractmethod
    def __eq__(self, other: object) -> bool: ...

    @abstractmethod
    def __hash__(self) -> int: ...


class IndexedValueSource(ABC):
    """Abstract interface over positionally addressed values."""

    @abstractmethod
    def value_by_index(self, idx: int, target_type: Any = None) -> Any:
        """Return the value at ``idx``, or None when absent."""

    @abstractmethod
    def exists_by_index(self, idx: int, target_type: Any = None) -> bool:
        """Check whether a value (possibly None) is present at ``idx``."""


def _fingerprint(value: Any) -> Any:
    # Value type is part of the fingerprint: 1, 1.0 and True compare equal in
    # Python but bind with different type diagnostics. Unhashable leaves only
    # contribute their type; _same_values settles equality for them.
    if isinstance(value, Mapping):
        return (dict, frozenset((k, _fingerprint(v)) for k, v in value.items()))
    if isinstance(value, list | tuple):
        return (type(value), tuple(_fingerprint(v) for v in value))
    if isinstance(value, set | frozenset):
        return (type(value), frozenset(_fingerprint(v) for v in value))
    try:
        hash(value)
    except TypeError:
        return (type(value), None)
    return (type(value), value)


def _same_values(left: Any, right: Any) -> bool:
    """Structural, type-aware equality of two source values."""
    if isinstance(left, Mapping) or isinstance(right, Mapping):
        if not (isinstance(left, Mapping) and isinstance(right, Mapping)):
            return False
        return len(left) == len(right) and all(k in right and _same_values(v, right[k]) for k, v in left.items())
    if type(left) is not type(right):
        return False
    if isinstance(left, list | tuple):
        return len(left) == len(right) and all(_same_values(a, b) for a, b in zip(left, right, strict=True))
    if isinstance(left, set | frozenset):
        return _fingerprint(left) == _fingerprint(right)
    return bool(left == right)


class MapValueSource(NamedValueSource):
    """
    A value source backed by an immutable snapshot of a mapping.

    Nested mappings are kept as-is; the dotted-path resolver wraps them in new
    MapValueSource instances while walking a path.
    """

    def __init__(self, wrap: Mapping[str, Any]):
        self._source: Mapping[str, Any] = MappingProxyType(dict(wrap))
        self._fingerprint = _fingerprint(self._source)

    @classmethod
    def of(cls, **values: Any) -> MapValueSource:
        """Create a source from keyword arguments."""
        return cls(values)

    @property
    def source(self) -> Mapping[str, Any]:
        """The read-only mapping this source wraps."""
        return self._source

    def exists_by_name(self, name: str, target_type: Any) -> bool:  # noqa: ARG002
        return name in self._source

    def value_by_name(self, name: str, target_type: Any) -> Any:  # noqa: ARG002
        return self._source.get(name)

    def entries(self) -> list[tuple[str, Any]]:
        return list(self._source.items())

    @property
    def supports_dotted_names(self) -> bool:
        return True

    @property
    def knows_entries(self) -> bool:
        return True

    def __eq__(self, other: object) -> bool:
        return (
            isinstance(other, MapValueSource)
            and other._fingerprint == self._fingerprint
            and _same_values(self._source, other._source)
        )

    def __hash__(self) -> int:
        return hash(self._fingerprint)

    def __len__(self) -> int:
        return len(self._source)

    def __repr__(self) -> str:
        return f"MapValueSource({dict(self._source)!r})"
