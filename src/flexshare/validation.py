"""Schema-level and message-level validation.

Schema-level checks walk a form schema against form data. Message-level
checks are the structural rules the messaging platform enforces on a
rendered Flex message (alt text, action companions, https links).
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Iterable

from .consts import (
    ALT_TEXT_MAX_LENGTH,
    COLOR_PATTERN,
    PATH_ALT_TEXT,
    PATH_CONTENTS,
    SECURE_SCHEME,
)
from .enums import ActionType, FieldType
from .i18n import gettext as _
from .models import ValidationError
from .nested_path import MISSING, get_value
from .schema import FormSchema, RepeatableField
from .utils import is_blank, is_empty, parse_url, strict_equals

logger = logging.getLogger(__name__)


def _error(path: str, message: str, field_key: str | None = None) -> ValidationError:
    return ValidationError(path=path, message=message, field_key=field_key)


def _is_required(field, value: Any, scope: Any) -> bool:
    if field.required:
        return is_empty(value)

    required_if = field.constraints.required_if
    if required_if is None or not isinstance(scope, dict):
        return False
    sibling = get_value(scope, required_if.when, MISSING)
    return strict_equals(sibling, required_if.is_) and is_empty(value)


def validate_field(
    field, value: Any, path: str = "", scope: Any = None
) -> list[ValidationError]:
    """Validate one field value.

    Args:
        field: Field definition from the form schema
        value: Value found at the field's key, ``MISSING`` when absent
        path: Locator reported on errors; defaults to the field key
        scope: Object holding the field's siblings, used by ``requiredIf``

    Returns:
        Errors for this field (and nested items for repeatable fields)
    """
    display_path = path or field.key
    label = field.display_label
    constraints = field.constraints

    def err(message: str) -> ValidationError:
        return _error(display_path, message, field.key)

    if _is_required(field, value, scope):
        return [err(_("'{label}' is required").format(label=label))]

    if is_empty(value):
        return []

    errors: list[ValidationError] = []

    if field.type == FieldType.COLOR:
        if not isinstance(value, str) or not COLOR_PATTERN.match(value):
            errors.append(
                err(
                    _("'{label}' must be a color like #RRGGBB or #RRGGBBAA").format(
                        label=label
                    )
                )
            )

    if field.type == FieldType.JSON:
        if isinstance(value, str):
            try:
                json.loads(value)
            except ValueError:
                errors.append(err(_("'{label}' is not valid JSON").format(label=label)))
        elif not isinstance(value, (dict, list)):
            errors.append(err(_("'{label}' must be a JSON object").format(label=label)))

    if isinstance(value, str):
        if constraints.max_length and len(value) > constraints.max_length:
            errors.append(
                err(
                    _("'{label}' exceeds {limit} characters (currently {count})").format(
                        label=label, limit=constraints.max_length, count=len(value)
                    )
                )
            )
        if constraints.min_length and len(value) < constraints.min_length:
            errors.append(
                err(
                    _("'{label}' needs at least {limit} characters").format(
                        label=label, limit=constraints.min_length
                    )
                )
            )

    if field.type in (FieldType.URL, FieldType.IMAGE_URL):
        url = parse_url(value) if isinstance(value, str) else None
        if url is None:
            errors.append(err(_("'{label}' is not a valid URL").format(label=label)))
        elif constraints.https_only and url.scheme != SECURE_SCHEME:
            errors.append(
                err(_("'{label}' must start with https://").format(label=label))
            )

    if constraints.pattern and isinstance(value, str):
        if not re.search(constraints.pattern, value):
            errors.append(
                err(_("'{label}' does not match the required format").format(label=label))
            )

    if field.type == FieldType.REPEATABLE:
        errors.extend(_validate_repeatable_field(field, value, display_path, err))

    return errors


def _validate_repeatable_field(
    field: RepeatableField, value: Any, path: str, err
) -> list[ValidationError]:
    label = field.display_label
    constraints = field.constraints

    if not isinstance(value, list):
        return [err(_("'{label}' must be a list").format(label=label))]

    errors = list(_count_errors(value, constraints, label, err))
    for index, item in enumerate(value):
        errors.extend(_validate_item(field.item_schema.fields, item, f"{path}[{index}]"))
    return errors


def _count_errors(items: list, constraints, label: str, err) -> Iterable[ValidationError]:
    if constraints.min_items is not None and len(items) < constraints.min_items:
        yield err(
            _("'{label}' needs at least {limit} items").format(
                label=label, limit=constraints.min_items
            )
        )
    if constraints.max_items is not None and len(items) > constraints.max_items:
        yield err(
            _("'{label}' allows at most {limit} items (currently {count})").format(
                label=label, limit=constraints.max_items, count=len(items)
            )
        )


def _validate_item(fields, item: Any, item_path: str) -> list[ValidationError]:
    errors: list[ValidationError] = []
    for sub_field in fields:
        sub_value = get_value(item, sub_field.key, MISSING)
        errors.extend(
            validate_field(sub_field, sub_value, f"{item_path}.{sub_field.key}", item)
        )
    return errors


def validate_schema_data(schema: FormSchema, data: dict[str, Any]) -> list[ValidationError]:
    """Validate form data against every section of ``schema``.

    Errors are returned in section-then-field order without deduplication.
    """
    errors: list[ValidationError] = []

    for section in schema.sections:
        if section.repeatable:
            errors.extend(_validate_repeatable_section(section, data))
        else:
            for field in section.fields:
                value = get_value(data, field.key, MISSING)
                errors.extend(validate_field(field, value, field.key, data))

    logger.debug("Schema validation produced %d error(s)", len(errors))
    return errors


def _validate_repeatable_section(section, data: dict[str, Any]) -> list[ValidationError]:
    key = section.key
    title = section.display_title
    constraints = section.constraints

    def err(message: str) -> ValidationError:
        return _error(key, message, key)

    items = get_value(data, key, MISSING)
    if not isinstance(items, list):
        if constraints.min_items and constraints.min_items > 0:
            return [
                err(
                    _("'{label}' needs at least {limit} items").format(
                        label=title, limit=constraints.min_items
                    )
                )
            ]
        return []

    errors = list(_count_errors(items, constraints, title, err))
    for index, item in enumerate(items):
        errors.extend(_validate_item(section.item_schema.fields, item, f"{key}[{index}]"))
    return errors


def validate_message_structure(message: Any) -> list[ValidationError]:
    """Check a rendered message against the platform's structural rules.

    Covers ``altText`` and every ``action`` found anywhere under
    ``contents``.
    """
    if not isinstance(message, dict):
        return [_error(PATH_ALT_TEXT, _("altText is required"))]

    errors: list[ValidationError] = []

    alt_text = message.get("altText")
    if is_blank(alt_text):
        errors.append(_error(PATH_ALT_TEXT, _("altText is required")))
    elif len(alt_text) > ALT_TEXT_MAX_LENGTH:
        errors.append(
            _error(
                PATH_ALT_TEXT,
                _("altText exceeds {limit} characters (currently {count})").format(
                    limit=ALT_TEXT_MAX_LENGTH, count=len(alt_text)
                ),
            )
        )

    errors.extend(_validate_actions(message.get("contents"), PATH_CONTENTS))
    return errors


def _validate_actions(root: Any, root_path: str) -> list[ValidationError]:
    errors: list[ValidationError] = []
    stack: list[tuple[Any, str]] = [(root, root_path)]

    while stack:
        node, path = stack.pop()
        children: list[tuple[Any, str]] = []

        if isinstance(node, list):
            children = [(item, f"{path}[{i}]") for i, item in enumerate(node)]
        elif isinstance(node, dict):
            action = node.get("action")
            if isinstance(action, dict):
                errors.extend(_validate_action(action, f"{path}.action"))
            children = [
                (value, f"{path}.{key}")
                for key, value in node.items()
                if key != "action"
            ]

        stack.extend(
            (child, child_path)
            for child, child_path in reversed(children)
            if isinstance(child, (dict, list))
        )

    return errors


def _validate_action(action: dict[str, Any], path: str) -> list[ValidationError]:
    errors: list[ValidationError] = []
    action_type = action.get("type")

    if is_blank(action.get("label")):
        errors.append(_error(f"{path}.label", _("Action label must not be empty")))

    if action_type == ActionType.URI:
        uri = action.get("uri")
        if is_empty(uri):
            errors.append(_error(f"{path}.uri", _("A uri action requires uri")))
        else:
            url = parse_url(uri) if isinstance(uri, str) else None
            if url is None:
                errors.append(_error(f"{path}.uri", _("Action uri is not a valid URL")))
            elif url.scheme != SECURE_SCHEME:
                errors.append(
                    _error(
                        f"{path}.uri",
                        _("Action uri must use https:// (got {scheme}://)").format(
                            scheme=url.scheme
                        ),
                    )
                )
    elif action_type == ActionType.MESSAGE:
        if is_blank(action.get("text")):
            errors.append(_error(f"{path}.text", _("A message action requires text")))
    elif action_type == ActionType.POSTBACK:
        if is_blank(action.get("data")):
            errors.append(_error(f"{path}.data", _("A postback action requires data")))

    return errors
