"""the beautiful world start from here."""

from __future__ import annotations

from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from renderhook.config import ConfigMissingError, Settings, settings as default_settings
from renderhook.log import get_logger, setup_logging
from renderhook.routers import webhook

log = get_logger(__name__)


async def _empty_error_response(request: Request, exc: StarletteHTTPException) -> Response:
    # Rejections carry no body, only the status (and Allow for 405).
    return Response(status_code=exc.status_code, headers=getattr(exc, "headers", None))


def create_app(
    settings: Optional[Settings] = None,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Build the application.

    ``transport`` is handed to every outbound httpx client; tests use it to
    stub the Render and Discord APIs.
    """
    settings = settings or default_settings

    app = FastAPI(
        title="Render → Discord notifier",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        # /webhook/ is a different path, not a redirect.
        redirect_slashes=False,
    )
    app.state.settings = settings
    app.state.http_transport = transport

    app.add_exception_handler(StarletteHTTPException, _empty_error_response)
    app.include_router(webhook.router)

    try:
        settings.require()
    except ConfigMissingError as exc:
        # Keep serving; /webhook answers 500 until the config is complete.
        log.warning("config_incomplete", missing=exc.missing)
    return app


setup_logging(default_settings.log_level, default_settings.log_json)

app = create_app()
