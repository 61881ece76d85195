import logging
from contextlib import asynccontextmanager

import sentry_sdk
from fastapi import FastAPI, Request
from fastapi.responses import Response

from httptoolkit.api.router import api_router
from httptoolkit.core.config import Settings, get_settings
from httptoolkit.core.errors import ToolkitError
from httptoolkit.services.json_service import error_json
from httptoolkit.services.storage_service import create_directory_if_not_exist
from httptoolkit.tools import Tools

log = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    if settings.sentry_dsn:
        sentry_sdk.init(dsn=settings.sentry_dsn, traces_sample_rate=0.2)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        create_directory_if_not_exist(settings.upload_dir)
        create_directory_if_not_exist(settings.static_dir)
        yield

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.state.settings = settings
    app.state.tools = Tools.from_settings(settings)

    @app.exception_handler(ToolkitError)
    async def handle_toolkit_error(request: Request, exc: ToolkitError) -> Response:
        if exc.status_code >= 500:
            log.error("%s %s failed: %s", request.method, request.url.path, exc)
        return error_json(exc, exc.status_code)

    @app.get("/healthz")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    app.include_router(api_router, prefix=settings.api_prefix)
    return app


app = create_app()
