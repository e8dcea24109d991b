from typing import Any, Optional

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

from ...defaults import resolve_defaults
from ...errors import TemplateException
from ...models import ValidationError, load_template
from ...resolver import upgrade_template
from ...store import get_template

router = APIRouter(tags=["compile"])


class CompileRequest(BaseModel):
    template_id: Optional[str] = None
    template: Optional[dict[str, Any]] = None
    data: dict[str, Any] = Field(default_factory=dict)


class CompileResponse(BaseModel):
    ok: bool
    kind: str
    message: Optional[Any] = None
    errors: list[dict[str, Any]]


class DefaultsRequest(BaseModel):
    template_id: Optional[str] = None
    template: Optional[dict[str, Any]] = None


def resolve_request_template(request: Request, template_id, template):
    if template is not None:
        return load_template(template)
    if template_id is None:
        raise TemplateException("Either template_id or template is required")
    return get_template(request.app.state.template_store, template_id)


def _error_payload(errors: list[ValidationError]) -> list[dict[str, Any]]:
    return [e.model_dump(by_alias=True, exclude_none=True) for e in errors]


@router.post("/compile", response_model=CompileResponse)
def compile_message(body: CompileRequest, request: Request):
    template = resolve_request_template(request, body.template_id, body.template)
    result = request.app.state.compiler.compile(template, body.data)
    return CompileResponse(
        ok=result.ok,
        kind=result.kind.value,
        message=result.message,
        errors=_error_payload(result.errors),
    )


@router.post("/defaults")
def template_defaults(body: DefaultsRequest, request: Request):
    template = resolve_request_template(request, body.template_id, body.template)
    return resolve_defaults(upgrade_template(template).form_schema)
