"""Template, document and compile result records."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Mapping, Optional

from pydantic import Field, model_validator
from pydantic import ValidationError as PydanticValidationError

from .consts import GRAMMAR_STATEMENT_TOKEN, GRAMMAR_TOKEN, LEGACY_TOKEN
from .enums import DocMode, RenderMode, TemplateKind, TemplateStatus
from .errors import TemplateException
from .schema import FormSchema, SchemaModel

logger = logging.getLogger(__name__)


def detect_render_mode(template_text: str | None) -> RenderMode:
    """Pick the render mode of a stored template from its text.

    This is the migration rule applied when a record is loaded; the result
    is stored on the record instead of being re-sniffed on every render.
    """
    text = template_text or ""
    if GRAMMAR_TOKEN in text or GRAMMAR_STATEMENT_TOKEN in text:
        return RenderMode.GRAMMAR
    if LEGACY_TOKEN in text:
        return RenderMode.LEGACY
    return RenderMode.RAW_JSON


class ValidationError(SchemaModel):
    """One problem found while compiling, located by ``path``."""

    path: str
    message: str
    field_key: Optional[str] = None


class Template(SchemaModel):
    id: Optional[str] = None
    name: str = ""
    description: str = ""
    status: TemplateStatus = TemplateStatus.DRAFT
    version: int = 1
    template_text: str = ""
    form_schema: FormSchema = Field(default_factory=FormSchema, alias="schema")
    sample_data: Optional[dict[str, Any]] = None
    render_mode: Optional[RenderMode] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @model_validator(mode="before")
    @classmethod
    def coerce_nullable_text(cls, values):
        if not isinstance(values, dict):
            return values
        if values.get("description", "") is None:
            values = {**values, "description": ""}
        return values

    @model_validator(mode="after")
    def assign_render_mode(self) -> "Template":
        if self.render_mode is None:
            self.render_mode = detect_render_mode(self.template_text)
        return self


class ResolvedTemplate(SchemaModel):
    template_text: str
    form_schema: FormSchema = Field(alias="schema")
    kind: TemplateKind
    render_mode: RenderMode


class Doc(SchemaModel):
    id: Optional[str] = None
    title: str = ""
    template_id: Optional[str] = None
    data: dict[str, Any] = Field(default_factory=dict)
    mode: DocMode = DocMode.SINGLE
    status: TemplateStatus = TemplateStatus.DRAFT
    preview_json: Optional[dict[str, Any]] = None
    is_valid: Optional[bool] = None
    validation_errors: list[ValidationError] = Field(default_factory=list)
    last_validated_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class RenderResult(SchemaModel):
    message: Optional[Any] = None
    errors: list[ValidationError] = Field(default_factory=list)


class CompileResult(SchemaModel):
    message: Optional[Any] = None
    errors: list[ValidationError] = Field(default_factory=list)
    kind: TemplateKind = TemplateKind.CUSTOM

    @property
    def ok(self) -> bool:
        return self.message is not None and not self.errors


def load_template(template: Template | Mapping[str, Any]) -> Template:
    """Coerce a stored template record into a ``Template``.

    Raises:
        TemplateException: When the record or its schema is malformed
    """
    if isinstance(template, Template):
        return template
    try:
        return Template.model_validate(template)
    except PydanticValidationError as e:
        error_lines = ["Template validation failed:"]
        for error in e.errors():
            loc = " -> ".join(str(item) for item in error["loc"])
            error_lines.append(f"  - {loc}: {error['msg']}")
        logger.warning("Rejected template record: %s", e.error_count())
        raise TemplateException("\n".join(error_lines)) from e
