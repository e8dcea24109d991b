"""Utility functions for Flexshare"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo

from pydantic import AnyUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from .nested_path import MISSING

logger = logging.getLogger(__name__)

_url_adapter = TypeAdapter(AnyUrl)


def canonicalify(p: Path | str) -> Path:
    return Path(p).expanduser().resolve()


def ensure_path(p: Path | str) -> Path:
    path = canonicalify(p)
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_now(timezone: ZoneInfo) -> datetime:
    """Get current time in specified timezone

    Args:
        timezone: Timezone object

    Returns:
        Current time with timezone info
    """
    return datetime.now(timezone)


def parse_url(value: str) -> AnyUrl | None:
    """Parse an absolute URL.

    Returns:
        The parsed URL, or None when ``value`` is not an absolute URL
    """
    try:
        return _url_adapter.validate_python(value)
    except PydanticValidationError:
        return None


def is_https_url(value: Any) -> bool:
    """Check whether ``value`` is an absolute URL using the https scheme.

    Examples:
        >>> is_https_url("https://example.com")
        True
        >>> is_https_url("http://example.com")
        False
        >>> is_https_url("example.com")
        False
    """
    if not isinstance(value, str):
        return False
    url = parse_url(value)
    return url is not None and url.scheme == "https"


def parse_json_maybe(value: Any) -> Any:
    """Decode ``value`` when it is a JSON string, otherwise return it unchanged.

    A string that is not valid JSON is also returned unchanged.
    """
    if isinstance(value, str):
        try:
            return json.loads(value)
        except ValueError:
            return value
    return value


def is_empty(value: Any) -> bool:
    """Empty means absent, null or the empty string."""
    return value is MISSING or value is None or (isinstance(value, str) and value == "")


def is_blank(value: Any) -> bool:
    return not isinstance(value, str) or value.strip() == ""


def strict_equals(a: Any, b: Any) -> bool:
    """Equality that never treats booleans as numbers.

    Examples:
        >>> strict_equals(1, 1.0)
        True
        >>> strict_equals(True, 1)
        False
    """
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a is b
    if isinstance(a, (int, float)) and isinstance(b, (int, float)):
        return a == b
    return type(a) is type(b) and a == b
