import os

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse

from ..errors import PublishException, TemplateException, TemplateNotFound
from .routes import docs, messages, templates


def create_app(config_obj=None) -> FastAPI:
    from ..compiler import Compiler
    from ..config import Config
    from ..i18n import initialize
    from ..store import get_template_store

    if config_obj is None:
        config_obj = Config.load_or_default(os.environ.get("CONFIG_FILE"))

    initialize(ui_language=config_obj.language)

    app = FastAPI(title="Flexshare API")

    app.state.config = config_obj
    app.state.compiler = Compiler.from_config(config_obj)
    app.state.template_store = get_template_store(config_obj)

    api_router = APIRouter(prefix="/api/v1")
    api_router.include_router(messages.router)
    api_router.include_router(templates.router)
    api_router.include_router(docs.router)
    app.include_router(api_router)

    @app.exception_handler(TemplateNotFound)
    def template_not_found(request: Request, exc: TemplateNotFound):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(TemplateException)
    def template_invalid(request: Request, exc: TemplateException):
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    @app.exception_handler(PublishException)
    def publish_blocked(request: Request, exc: PublishException):
        errors = [e.model_dump(by_alias=True, exclude_none=True) for e in exc.errors]
        return JSONResponse(
            status_code=422, content={"detail": str(exc), "errors": errors}
        )

    return app
