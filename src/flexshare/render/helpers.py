"""Helper functions exposed to grammar-mode templates.

Every interpolation in a grammar template goes through ``json`` so that
user content lands in the output as a JSON token, never as raw text.
"""

import json as json_module
from typing import Any, Callable

from jinja2 import Undefined

from ..utils import strict_equals


def _is_undefined(value: Any) -> bool:
    return isinstance(value, Undefined)


def to_json(value: Any) -> str:
    """Serialize ``value`` as a JSON token; undefined becomes ``null``."""
    if _is_undefined(value) or value is None:
        return "null"
    return json_module.dumps(value, ensure_ascii=False)


def default(value: Any, fallback: Any = None) -> Any:
    """Return ``fallback`` when ``value`` is undefined, null or blank."""
    if _is_undefined(value) or value is None:
        return fallback
    if isinstance(value, str) and value.strip() == "":
        return fallback
    return value


def has_items(value: Any) -> bool:
    return isinstance(value, list) and len(value) > 0


def eq(a: Any, b: Any) -> bool:
    if _is_undefined(a) or _is_undefined(b):
        return _is_undefined(a) and _is_undefined(b)
    return strict_equals(a, b)


def ne(a: Any, b: Any) -> bool:
    return not eq(a, b)


def all_truthy(*values: Any) -> bool:
    return all(bool(v) for v in values)


DEFAULT_HELPERS: dict[str, Callable[..., Any]] = {
    "json": to_json,
    "default": default,
    "hasItems": has_items,
    "eq": eq,
    "ne": ne,
    "and_": all_truthy,
}
