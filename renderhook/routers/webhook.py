"""Ruter Render webhook."""

from __future__ import annotations

from fastapi import APIRouter, BackgroundTasks, HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.requests import ClientDisconnect

from renderhook.config import Settings
from renderhook.log import get_logger
from renderhook.schemas import PayloadParseError, parse_payload
from renderhook.services.notifications import process_webhook
from renderhook.utils import WebhookVerificationError, verify_webhook

log = get_logger(__name__)

router = APIRouter(tags=["render"])


class BodyReadError(RuntimeError):
    """Raised when the request body cannot be read."""


async def _read_body(request: Request) -> bytes:
    try:
        return await request.body()
    except ClientDisconnect as exc:
        raise BodyReadError("client disconnected before the body was read") from exc


@router.post("/webhook")
async def render_webhook(request: Request, background: BackgroundTasks):
    """
    Render webhook endpoint.

    The raw body is checked against the Standard Webhooks signature headers
    before it is parsed. Accepted deliveries are answered with ``{}`` right
    away; the Discord notification is sent from a background task.
    """
    settings: Settings = request.app.state.settings
    missing = settings.missing()
    if missing:
        log.error("config_missing", missing=missing)
        raise HTTPException(500)

    try:
        body = await _read_body(request)
    except BodyReadError:
        log.exception("webhook_body_unreadable")
        raise HTTPException(400)

    try:
        verify_webhook(settings.webhook_secret, body, request.headers)
    except WebhookVerificationError as exc:
        log.warning("webhook_signature_rejected", reason=str(exc))
        raise HTTPException(400)
    except Exception:
        log.exception("webhook_signature_check_failed")
        raise HTTPException(500)

    try:
        payload = parse_payload(body)
    except PayloadParseError as exc:
        log.warning("webhook_payload_invalid", reason=str(exc))
        raise HTTPException(400)

    log.info(
        "webhook_accepted",
        event_type=payload.type,
        event_id=payload.data.id,
        service_id=payload.data.service_id,
    )
    background.add_task(
        process_webhook,
        payload,
        settings,
        transport=request.app.state.http_transport,
    )
    return JSONResponse({})
