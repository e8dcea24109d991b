"""Deep-merge patch overlays applied to rendered messages."""

import copy
from typing import Any

from ..consts import INLINE_PATCH_KEY, MAX_PATCH_DEPTH_DEFAULT
from ..errors import PatchDepthExceeded
from ..utils import parse_json_maybe


def deep_merge(base: Any, patch: Any) -> Any:
    """Merge ``patch`` into ``base`` and return a new value.

    Dicts merge key by key with ``patch`` winning on conflict; any other
    pairing (lists included) is replaced by ``patch`` outright. Neither
    argument is modified.

    Examples:
        >>> deep_merge({"a": {"x": 0, "y": 2}}, {"a": {"x": 1}})
        {'a': {'x': 1, 'y': 2}}
        >>> deep_merge({"a": [9]}, {"a": [1, 2]})
        {'a': [1, 2]}
    """
    if not isinstance(base, dict) or not isinstance(patch, dict):
        return copy.deepcopy(patch)

    out = dict(base)
    for key, value in patch.items():
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            out[key] = deep_merge(out[key], value)
        else:
            out[key] = copy.deepcopy(value)
    return out


def apply_inline_patches(node: Any, max_depth: int = MAX_PATCH_DEPTH_DEFAULT) -> Any:
    """Expand every ``__patch`` marker in ``node``.

    A marker holds a JSON string or a dict that is merged into the object
    carrying it. The merged object is processed again, so markers brought
    in by a patch are expanded too. Patches nested deeper than
    ``max_depth`` raise ``PatchDepthExceeded``.
    """
    return _apply(node, max_depth, 0)


def _apply(node: Any, max_depth: int, depth: int) -> Any:
    if isinstance(node, list):
        return [_apply(item, max_depth, depth) for item in node]
    if not isinstance(node, dict):
        return node

    obj = dict(node)
    if INLINE_PATCH_KEY in obj:
        patch = parse_json_maybe(obj.pop(INLINE_PATCH_KEY))
        if isinstance(patch, dict):
            if depth >= max_depth:
                raise PatchDepthExceeded(
                    f"Inline {INLINE_PATCH_KEY} nesting exceeds {max_depth} levels"
                )
            return _apply(deep_merge(obj, patch), max_depth, depth + 1)

    return {key: _apply(value, max_depth, depth) for key, value in obj.items()}


def apply_message_patch(message: Any, patch: Any) -> Any:
    """Deep-merge a whole-message patch (JSON string or dict) into ``message``.

    Patches that are not objects, and messages that are not objects, leave
    the message unchanged.
    """
    patch = parse_json_maybe(patch)
    if not isinstance(patch, dict) or not isinstance(message, dict):
        return message
    return deep_merge(message, patch)
