from typing import Any, Optional

from fastapi import APIRouter, Request
from pydantic import BaseModel

from ...lifecycle import publish_doc, record_validation
from ...models import Doc
from .messages import resolve_request_template

router = APIRouter(prefix="/docs", tags=["docs"])


class DocRequest(BaseModel):
    doc: dict[str, Any]
    template_id: Optional[str] = None
    template: Optional[dict[str, Any]] = None


def _load(body: DocRequest, request: Request):
    doc = Doc.model_validate(body.doc)
    template_id = body.template_id or doc.template_id
    template = resolve_request_template(request, template_id, body.template)
    return doc, template


@router.post("/validate")
def validate_doc(body: DocRequest, request: Request):
    """Compile the draft and store the outcome on it."""
    doc, template = _load(body, request)
    result = request.app.state.compiler.compile(template, doc.data)
    doc = record_validation(
        doc, result, timezone=request.app.state.config.get_timezone()
    )
    return doc.model_dump(mode="json", by_alias=True)


@router.post("/publish")
def publish(body: DocRequest, request: Request):
    doc, template = _load(body, request)
    doc = publish_doc(
        doc,
        template,
        compiler=request.app.state.compiler,
        timezone=request.app.state.config.get_timezone(),
    )
    return doc.model_dump(mode="json", by_alias=True)
