"""Background pipeline: enrich a webhook from the Render API and post it to Discord."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Optional, TypeVar

import httpx

from renderhook.config import Settings
from renderhook.log import get_logger
from renderhook.schemas import RenderEvent, RenderService, WebhookPayload
from renderhook.services.discord import post_message
from renderhook.services.messages import build_discord_message
from renderhook.services.render import fetch_event, fetch_service
from renderhook.timezone import load_timezone

log = get_logger(__name__)

T = TypeVar("T")


async def _best_effort(what: str, resource_id: Optional[str], call: Awaitable[T] | None) -> Optional[T]:
    if call is None:
        log.warning("render_fetch_skipped", resource=what, reason="no id in payload")
        return None
    try:
        return await call
    except Exception:
        log.exception("render_fetch_failed", resource=what, resource_id=resource_id)
        return None


async def _fetch_details(
    payload: WebhookPayload,
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport],
) -> tuple[Optional[RenderService], Optional[RenderEvent]]:
    common = {
        "api_key": settings.render_api_key,
        "base_url": settings.render_api_url,
        "transport": transport,
    }
    service_id = payload.data.service_id
    event_id = payload.data.id
    service, event = await asyncio.gather(
        _best_effort(
            "service",
            service_id,
            fetch_service(service_id, **common) if service_id else None,
        ),
        _best_effort(
            "event",
            event_id,
            fetch_event(event_id, **common) if event_id else None,
        ),
    )
    return service, event


async def process_webhook(
    payload: WebhookPayload,
    settings: Settings,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> None:
    """
    Fetch service and event details, then notify Discord.

    Runs after the webhook has been acknowledged, so nothing raised here can
    reach the sender: every failure is logged and dropped.
    """
    bound = log.bind(event_type=payload.type, event_id=payload.data.id)
    try:
        service, event = await _fetch_details(payload, settings, transport)
        message = build_discord_message(
            payload, service, event, tz=load_timezone(settings.timezone)
        )
        await post_message(
            settings.discord_channel_id,
            settings.discord_token,
            message,
            transport=transport,
        )
        bound.info("discord_message_sent", channel_id=settings.discord_channel_id)
    except Exception:
        bound.exception("webhook_notification_failed")
