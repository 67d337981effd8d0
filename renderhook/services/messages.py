"""Discord messages for Render webhook events."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Mapping, Optional
from zoneinfo import ZoneInfo

from renderhook.schemas import (
    FailureReason,
    NonZeroExit,
    OutOfMemory,
    RenderEvent,
    RenderService,
    TimedOut,
    Unhealthy,
    WebhookPayload,
)
from renderhook.services.presentation import EventPresentation, present
from renderhook.timezone import TZ, format_timestamp
from renderhook.utils import truncate

FALLBACK_SERVICE_NAME = "Render Service"
FIELD_VALUE_LIMIT = 1024  # Discord's cap on embed field values.

SERVER_FAILED = "server_failed"

JSONDict = dict[str, Any]


@dataclass(frozen=True)
class EmbedField:
    name: str
    value: str
    inline: bool = False

    def as_dict(self) -> JSONDict:
        return {"name": self.name, "value": self.value, "inline": self.inline}


def format_failure_reason(reason: Optional[FailureReason]) -> str:
    variant = reason.variant() if reason is not None else None
    if isinstance(variant, NonZeroExit):
        return f"Exited with status {variant.code}"
    if isinstance(variant, OutOfMemory):
        return "Out of Memory"
    if isinstance(variant, TimedOut):
        return f"Timed out {variant.reason.strip()}".strip()
    if isinstance(variant, Unhealthy):
        return variant.message
    return "Failed for unknown reason"


def _failure_reason(event: Optional[RenderEvent]) -> Optional[FailureReason]:
    if event is None or event.details is None:
        return None
    return event.details.reason


def format_title(
    payload: WebhookPayload,
    service: Optional[RenderService],
    presentation: EventPresentation,
) -> str:
    name = (
        payload.data.service_name
        or (service.name if service else None)
        or payload.data.service_id
        or FALLBACK_SERVICE_NAME
    )
    return f"{presentation.emoji} {name} — {presentation.label}"


def format_description(payload: WebhookPayload, event: Optional[RenderEvent]) -> str:
    # Other event types carry their detail in the embed fields.
    if payload.type == SERVER_FAILED:
        return format_failure_reason(_failure_reason(event))
    return ""


def _stringify(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (Mapping, list, tuple)):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)
    return str(value)


def format_trigger(trigger: Mapping[str, Any]) -> str:
    text = ", ".join(f"{key}={_stringify(value)}" for key, value in trigger.items())
    return truncate(text, FIELD_VALUE_LIMIT)


def _timestamp_text(value: Any) -> str:
    if value is None or isinstance(value, bool):
        return ""
    return str(value).strip()


def _humanize_status(value: str) -> str:
    return value[:1].upper() + value[1:]


def build_fields(
    payload: WebhookPayload,
    service: Optional[RenderService],
    event: Optional[RenderEvent],
    *,
    tz: ZoneInfo = TZ,
) -> list[EmbedField]:
    """Embed fields for whatever data is available, in display order."""
    fields: list[EmbedField] = []

    if _timestamp_text(payload.timestamp):
        fields.append(EmbedField("Time", format_timestamp(payload.timestamp, tz)))

    if payload.data.status:
        fields.append(EmbedField("Status", _humanize_status(payload.data.status), inline=True))

    details = event.details if event else None
    deploy_id = details.resolved_deploy_id if details else None
    if deploy_id:
        fields.append(EmbedField("Deploy ID", deploy_id))

    if details and details.trigger:
        trigger_text = format_trigger(details.trigger)
        if trigger_text:
            fields.append(EmbedField("Trigger", trigger_text))

    if payload.type == SERVER_FAILED:
        fields.append(EmbedField("Failure Reason", format_failure_reason(_failure_reason(event))))

    return fields


def build_discord_message(
    payload: WebhookPayload,
    service: Optional[RenderService],
    event: Optional[RenderEvent],
    *,
    tz: ZoneInfo = TZ,
) -> JSONDict:
    """Full ``channels/{id}/messages`` body for one webhook."""
    presentation = present(payload.type, payload.data.status)
    embed: JSONDict = {
        "color": presentation.color,
        "title": format_title(payload, service, presentation),
        "description": format_description(payload, event),
        "fields": [f.as_dict() for f in build_fields(payload, service, event, tz=tz)],
    }

    dashboard_url = service.dashboard_url if service else None
    message: JSONDict = {"embeds": [embed]}
    if dashboard_url:
        embed["url"] = dashboard_url
        message["components"] = [
            {
                "type": 1,
                "components": [
                    {
                        "type": 2,
                        "style": 5,
                        "label": "View Logs",
                        "url": f"{dashboard_url.rstrip('/')}/logs",
                    }
                ],
            }
        ]
    return message
