from __future__ import annotations

from .helpers import DEFAULT_HELPERS
from .patch import apply_inline_patches, apply_message_patch, deep_merge
from .renderer import TemplateRenderer

__all__ = [
    "DEFAULT_HELPERS",
    "TemplateRenderer",
    "apply_inline_patches",
    "apply_message_patch",
    "deep_merge",
]
