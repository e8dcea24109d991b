"""Initial form data derived from a form schema."""

import copy
from typing import Any

from .nested_path import set_value
from .schema import FormSchema


def _apply_field_defaults(target: dict[str, Any], fields) -> None:
    for field in fields:
        if field.default is not None:
            set_value(target, field.key, copy.deepcopy(field.default))


def resolve_defaults(schema: FormSchema) -> dict[str, Any]:
    """Build the initial form data for ``schema``.

    Plain fields with a default are set at their key. A repeatable section
    starts with ``minItems`` items, each holding its item-schema defaults,
    or with an empty list when ``minItems`` is absent or zero. The schema
    itself is never modified.
    """
    data: dict[str, Any] = {}

    for section in schema.sections:
        if section.repeatable:
            min_items = section.constraints.min_items or 0
            items = []
            for _ in range(min_items):
                item: dict[str, Any] = {}
                _apply_field_defaults(item, section.item_schema.fields)
                items.append(item)
            set_value(data, section.key, items)
        else:
            _apply_field_defaults(data, section.fields)

    return data
