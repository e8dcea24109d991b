from fastapi import APIRouter, Request
from pydantic import BaseModel

from ...store import get_template

router = APIRouter(prefix="/templates", tags=["templates"])


class TemplateSummary(BaseModel):
    id: str
    name: str
    description: str
    status: str
    version: int
    render_mode: str


def _summary(template) -> TemplateSummary:
    return TemplateSummary(
        id=template.id,
        name=template.name,
        description=template.description,
        status=template.status.value,
        version=template.version,
        render_mode=template.render_mode.value,
    )


@router.get("", response_model=list[TemplateSummary])
def list_templates(request: Request):
    return [_summary(t) for t in request.app.state.template_store.list_all()]


@router.get("/{template_id}")
def get_template_record(template_id: str, request: Request):
    template = get_template(request.app.state.template_store, template_id)
    return template.model_dump(by_alias=True, exclude_none=True, mode="json")
