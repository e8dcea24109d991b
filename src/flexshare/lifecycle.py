"""Document and template lifecycle built on the compiler.

These functions return updated copies of records; persisting them is the
caller's job.
"""

from __future__ import annotations

import copy
import logging
from datetime import datetime
from typing import Any
from zoneinfo import ZoneInfo

from .compiler import Compiler, get_compiler
from .defaults import resolve_defaults
from .enums import DocMode, TemplateKind, TemplateStatus
from .errors import PublishException
from .i18n import gettext as _
from .models import CompileResult, Doc, Template, load_template
from .resolver import classify_template, upgrade_template
from .utils import get_now
from .validation import validate_message_structure

logger = logging.getLogger(__name__)


def _now(now: datetime | None, timezone: ZoneInfo | None = None) -> datetime:
    return now or get_now(timezone or ZoneInfo("UTC"))


def initial_doc_data(template: Template) -> dict[str, Any]:
    """Starting form data for a new document: sample data when the
    template has some, schema defaults otherwise."""
    upgraded = upgrade_template(load_template(template))
    if upgraded.sample_data:
        return copy.deepcopy(upgraded.sample_data)
    return resolve_defaults(upgraded.form_schema)


def doc_mode_for(template: Template) -> DocMode:
    kind = classify_template(load_template(template))
    return DocMode.CAROUSEL if kind is TemplateKind.CAROUSEL else DocMode.SINGLE


def record_validation(
    doc: Doc,
    result: CompileResult,
    now: datetime | None = None,
    timezone: ZoneInfo | None = None,
) -> Doc:
    """Store the latest compile outcome on a draft document."""
    return doc.model_copy(
        update={
            "preview_json": result.message,
            "is_valid": result.ok,
            "validation_errors": list(result.errors),
            "last_validated_at": _now(now, timezone),
        }
    )


def publish_doc(
    doc: Doc,
    template: Template,
    now: datetime | None = None,
    compiler: Compiler | None = None,
    timezone: ZoneInfo | None = None,
) -> Doc:
    """Compile ``doc`` authoritatively and mark it published.

    Raises:
        PublishException: When the compile yields errors or no message
    """
    compiler = compiler or get_compiler()
    result = compiler.compile(template, doc.data)

    if not result.ok:
        logger.info("Publish blocked for doc %s: %d error(s)", doc.id, len(result.errors))
        raise PublishException(
            _("Document cannot be published: {count} validation error(s)").format(
                count=len(result.errors)
            ),
            result.errors,
        )

    timestamp = _now(now, timezone)
    logger.info("Published doc %s", doc.id)
    return doc.model_copy(
        update={
            "status": TemplateStatus.PUBLISHED,
            "preview_json": result.message,
            "is_valid": True,
            "validation_errors": [],
            "last_validated_at": timestamp,
            "updated_at": timestamp,
        }
    )


def resolve_share_message(
    doc: Doc, template: Template, compiler: Compiler | None = None
) -> CompileResult:
    """Return the message to deliver for a published document.

    The cached preview is re-checked with the message rules and used when it
    passes; otherwise the document is compiled again from its data.
    """
    cached = doc.preview_json
    if cached is not None:
        errors = validate_message_structure(cached)
        if not errors:
            return CompileResult(message=cached, errors=[])
        logger.warning(
            "Cached preview of doc %s failed re-validation, recompiling", doc.id
        )

    compiler = compiler or get_compiler()
    return compiler.compile(template, doc.data)


def publish_template(
    template: Template,
    now: datetime | None = None,
    timezone: ZoneInfo | None = None,
) -> Template:
    """Mark ``template`` published and bump its version."""
    template = load_template(template)
    return template.model_copy(
        update={
            "status": TemplateStatus.PUBLISHED,
            "version": template.version + 1,
            "updated_at": _now(now, timezone),
        }
    )
