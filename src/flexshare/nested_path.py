"""Read and write values inside nested dicts/lists with dotted paths.

Paths are dot-separated segments. A list index may be written either as a
bracket suffix (``pages[0].cta``) or as a bare numeric segment
(``pages.0.cta``); both forms traverse identically.
"""

from __future__ import annotations

import re
from typing import Any

_INDEX_PATTERN = re.compile(r"\[(\d+)\]")


class _Missing:
    """Marker for a path that does not resolve."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self


MISSING = _Missing()


def split_path(path: str) -> list[str]:
    """Normalize ``a.b[0].c`` into ``["a", "b", "0", "c"]``."""
    return _INDEX_PATTERN.sub(r".\1", path).split(".")


def _is_index(segment: str) -> bool:
    return segment.isdigit()


def get_value(obj: Any, path: str, default: Any = None) -> Any:
    """Return the value at ``path`` inside ``obj``.

    Any missing key, out-of-range index or non-container intermediate
    yields ``default``; this never raises. Pass ``MISSING`` as ``default``
    to tell an absent value apart from an explicit ``None``.
    """
    current = obj
    for segment in split_path(path):
        if isinstance(current, dict):
            if segment not in current:
                return default
            current = current[segment]
        elif isinstance(current, list):
            if not _is_index(segment):
                return default
            index = int(segment)
            if index >= len(current):
                return default
            current = current[index]
        else:
            return default
    return current


def set_value(obj: dict | list, path: str, value: Any) -> None:
    """Assign ``value`` at ``path`` inside ``obj`` in place.

    Intermediate containers are created as needed: a list when the next
    segment is numeric, a dict otherwise. Lists are padded with ``None``
    up to the requested index. A list reached with a non-numeric next
    segment becomes a dict keyed by its indices, so its items stay
    reachable. A list root cannot be converted in place, so a non-numeric
    first segment on one raises ``TypeError``.
    """
    segments = split_path(path)
    if isinstance(obj, list) and not _is_index(segments[0]):
        raise TypeError(f"Cannot set key {segments[0]!r} on a list")
    current: Any = obj
    for segment, next_segment in zip(segments, segments[1:]):
        child = _get_child(current, segment)
        if not isinstance(child, (dict, list)):
            child = [] if _is_index(next_segment) else {}
            _set_child(current, segment, child)
        elif isinstance(child, list) and not _is_index(next_segment):
            child = {str(index): item for index, item in enumerate(child)}
            _set_child(current, segment, child)
        current = child
    _set_child(current, segments[-1], value)


def _get_child(container: Any, segment: str) -> Any:
    if isinstance(container, list):
        index = int(segment)
        return container[index] if index < len(container) else None
    return container.get(segment)


def _set_child(container: Any, segment: str, value: Any) -> None:
    if isinstance(container, list):
        index = int(segment)
        if index >= len(container):
            container.extend([None] * (index + 1 - len(container)))
        container[index] = value
    else:
        container[segment] = value
