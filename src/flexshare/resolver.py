"""Pick the effective template text and schema for a stored template.

Records stored before grammar mode existed use legacy substitution and
cannot loop over pages. Known built-in families are routed to the
upgraded built-in definitions; custom templates are left alone.
"""

import logging

from . import builtin
from .consts import (
    CAROUSEL_DESCRIPTION_MARKERS,
    CAROUSEL_NAME_MARKERS,
    SINGLE_DESCRIPTION_MARKERS,
    SINGLE_NAME_MARKERS,
)
from .enums import RenderMode, TemplateKind
from .models import ResolvedTemplate, Template

logger = logging.getLogger(__name__)


def _contains_any(text: str, markers) -> bool:
    return any(marker in text for marker in markers)


def classify_template(template: Template) -> TemplateKind:
    """Classify a template by name/description markers (case-insensitive)."""
    name = (template.name or "").lower()
    description = (template.description or "").lower()

    if _contains_any(name, CAROUSEL_NAME_MARKERS) or _contains_any(
        description, CAROUSEL_DESCRIPTION_MARKERS
    ):
        return TemplateKind.CAROUSEL
    if _contains_any(name, SINGLE_NAME_MARKERS) or _contains_any(
        description, SINGLE_DESCRIPTION_MARKERS
    ):
        return TemplateKind.SINGLE
    return TemplateKind.CUSTOM


def resolve_template(template: Template) -> ResolvedTemplate:
    if template.render_mode is RenderMode.GRAMMAR:
        return _as_custom(template)

    kind = classify_template(template)
    if kind is TemplateKind.CAROUSEL:
        logger.debug("Routing template %s to the built-in carousel", template.id)
        return ResolvedTemplate(
            template_text=builtin.carousel_template_text(),
            form_schema=builtin.carousel_schema(),
            kind=kind,
            render_mode=RenderMode.GRAMMAR,
        )
    if kind is TemplateKind.SINGLE:
        logger.debug("Routing template %s to the built-in single poster", template.id)
        return ResolvedTemplate(
            template_text=builtin.single_poster_template_text(),
            form_schema=builtin.single_poster_schema(),
            kind=kind,
            render_mode=RenderMode.GRAMMAR,
        )

    return _as_custom(template)


def _as_custom(template: Template) -> ResolvedTemplate:
    return ResolvedTemplate(
        template_text=template.template_text,
        form_schema=template.form_schema,
        kind=TemplateKind.CUSTOM,
        render_mode=template.render_mode,
    )


def upgrade_template(template: Template) -> Template:
    """Return ``template`` with the resolved text and schema, keeping its id.

    Custom templates are returned unchanged.
    """
    resolved = resolve_template(template)
    if resolved.kind is TemplateKind.CUSTOM:
        return template
    return template.model_copy(
        update={
            "template_text": resolved.template_text,
            "form_schema": resolved.form_schema,
            "render_mode": resolved.render_mode,
        }
    )
