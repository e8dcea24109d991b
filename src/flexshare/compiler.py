"""Compile form data into a validated Flex message.

``compile_template`` is the single entry point the rest of the product
calls: on every edit for a best-effort preview, at publish time as the
authoritative check, and on the share page when a cached message fails
re-validation. Each call is a pure function of its inputs.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from .models import CompileResult, Template, load_template
from .render import TemplateRenderer
from .resolver import resolve_template
from .validation import validate_message_structure, validate_schema_data

logger = logging.getLogger(__name__)


class Compiler:
    """Resolve, validate, render and re-validate in one call."""

    def __init__(self, renderer: TemplateRenderer | None = None):
        self.renderer = renderer or TemplateRenderer()

    @classmethod
    def from_config(cls, config) -> "Compiler":
        return cls(
            TemplateRenderer(
                max_patch_depth=config.render.max_patch_depth,
                cache_size=config.render.cache_size,
            )
        )

    def compile(
        self, template: Template | Mapping[str, Any], data: dict[str, Any]
    ) -> CompileResult:
        """Compile ``data`` against ``template``.

        Errors are ordered schema errors, then render errors, then message
        structure errors. The message is None when rendering failed.

        Raises:
            TemplateException: When ``template`` is not a valid template record
        """
        template = load_template(template)
        data = data if data is not None else {}

        resolved = resolve_template(template)
        schema_errors = validate_schema_data(resolved.form_schema, data)

        rendered = self.renderer.render(
            resolved.template_text, data, mode=resolved.render_mode
        )
        message = rendered.message
        message_errors = (
            validate_message_structure(message) if message is not None else []
        )

        errors = [*schema_errors, *rendered.errors, *message_errors]
        logger.debug(
            "Compiled template %s (%s): %d schema, %d render, %d message error(s)",
            template.id,
            resolved.kind.value,
            len(schema_errors),
            len(rendered.errors),
            len(message_errors),
        )
        return CompileResult(message=message, errors=errors, kind=resolved.kind)


_default_compiler: Compiler | None = None


def get_compiler() -> Compiler:
    global _default_compiler
    if _default_compiler is None:
        _default_compiler = Compiler()
    return _default_compiler


def compile_template(
    template: Template | Mapping[str, Any], data: dict[str, Any]
) -> CompileResult:
    """Compile with the shared default compiler."""
    return get_compiler().compile(template, data)
