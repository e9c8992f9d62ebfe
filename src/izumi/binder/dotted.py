"""
Dotted-path resolution through chained value sources.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .errors import NoNestedValueSourceError
from .values import MapValueSource, NamedValueSource


def resolve_dotted(path: str, target_type: Any, source: NamedValueSource) -> Any:
    """
    Resolve a dot-delimited path such as ``"a.b.c"`` starting at ``source``.

    Sources that support dotted names are asked for the longest prefix of the
    remaining segments first, falling back to shorter prefixes down to a
    single segment. The first prefix that exists with a non-None value wins:
    if it consumed the whole path its value is returned, otherwise the value
    must itself be a value source (or a mapping) and resolution continues in
    it with the remaining segments.

    Args:
        path: The dotted path to resolve
        target_type: Type the caller expects, passed through to the sources
        source: Where resolution starts

    Returns:
        The resolved value, or None when nothing matches

    Raises:
        NoNestedValueSourceError: If an intermediate value is neither a
            NamedValueSource nor a mapping
    """
    return _resolve(path.split("."), [], target_type, source)


def source_at(path: str, source: NamedValueSource) -> NamedValueSource | None:
    """Return the nested value source found at ``path``, or None when absent."""
    value = resolve_dotted(path, Mapping, source)
    if value is None:
        return None
    return _as_source(value, path)


def _as_source(value: Any, path: str) -> NamedValueSource:
    if isinstance(value, NamedValueSource):
        return value
    if isinstance(value, Mapping):
        return MapValueSource(value)
    raise NoNestedValueSourceError(path, value)


def _resolve(segments: list[str], consumed: list[str], target_type: Any, source: NamedValueSource) -> Any:
    longest = len(segments) if source.supports_dotted_names else 1

    for how_many in range(longest, 0, -1):
        current = segments[:how_many]
        name = ".".join(current)

        if not source.exists_by_name(name, target_type):
            continue
        value = source.value_by_name(name, target_type)
        if value is None:
            continue

        if how_many == len(segments):
            return value

        walked = consumed + current
        nested = _as_source(value, ".".join(walked))
        return _resolve(segments[how_many:], walked, target_type, nested)

    return None
