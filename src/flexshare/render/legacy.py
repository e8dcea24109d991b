"""Plain ``${data.<path>}`` substitution used by templates stored before
grammar-mode rendering existed."""

import json
import logging
from typing import Any

from ..consts import LEGACY_VARIABLE_PATTERN
from ..i18n import gettext as _
from ..models import ValidationError
from ..nested_path import MISSING, get_value

logger = logging.getLogger(__name__)


def _to_replacement(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return json.dumps(value, ensure_ascii=False)


def interpolate(
    template_text: str, data: dict[str, Any]
) -> tuple[str | None, list[ValidationError]]:
    """Substitute every ``${data.<path>}`` occurrence.

    Any unresolved path fails the whole substitution: the result is None and
    one error is reported per unresolved occurrence.
    """
    errors: list[ValidationError] = []

    def replace(match) -> str:
        path = match.group(1)
        value = get_value(data, path, MISSING)
        if value is MISSING:
            errors.append(
                ValidationError(
                    path=f"data.{path}",
                    message=_("No value found for field \"{path}\"").format(path=path),
                )
            )
            return match.group(0)
        return _to_replacement(value)

    result = LEGACY_VARIABLE_PATTERN.sub(replace, template_text)

    if errors:
        logger.debug("Legacy substitution left %d variable(s) unresolved", len(errors))
        return None, errors
    return result, []
