"""Emoji, colour and label for each Render event type."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

RED = 0xEF4444
AMBER = 0xF59E0B
GREEN = 0x22C55E
GRAY = 0x94A3B8
BLUE = 0x3B82F6


@dataclass(frozen=True)
class EventPresentation:
    label: str
    emoji: str
    color: int


# status -> (label suffix, emoji, color)
STATUS_STYLES: dict[str, tuple[str, str, int]] = {
    "failed": ("Failed", "❌", RED),
    "canceled": ("Canceled", "⚠️", AMBER),
    "succeeded": ("Succeeded", "✅", GREEN),
}

_FAILURE = ("❌", RED)
_WARNING = ("⚠️", AMBER)
_STARTED = ("⏳", GRAY)
_ENDED = ("✅", GREEN)

EVENT_STYLES: dict[str, tuple[str, int]] = {
    "server_failed": _FAILURE,
    "image_pull_failed": _FAILURE,
    "key_value_unhealthy": _FAILURE,
    "pipeline_minutes_exhausted": _FAILURE,
    "server_hardware_failure": _FAILURE,
    "commit_ignored": _WARNING,
    "maintenance_mode_enabled": _WARNING,
    "maintenance_mode_uri_updated": _WARNING,
    "autoscaling_started": _STARTED,
    "build_started": _STARTED,
    "deploy_started": _STARTED,
    "cron_job_run_started": _STARTED,
    "job_run_started": _STARTED,
    "maintenance_started": _STARTED,
    "zero_downtime_redeploy_started": _STARTED,
    "autoscaling_ended": _ENDED,
    "build_ended": _ENDED,
    "deploy_ended": _ENDED,
    "cron_job_run_ended": _ENDED,
    "job_run_ended": _ENDED,
    "maintenance_ended": _ENDED,
    "zero_downtime_redeploy_ended": _ENDED,
    "server_available": _ENDED,
    "service_resumed": _ENDED,
    "server_restarted": ("🔄", BLUE),
    "service_suspended": ("⏸️", AMBER),
}

DEFAULT_STYLE = ("ℹ️", GRAY)


def humanize_event_type(value: str) -> str:
    """``deploy_started`` -> ``Deploy Started``."""
    return " ".join(word[:1].upper() + word[1:] for word in value.split("_"))


def present(event_type: str, status: Optional[str] = None) -> EventPresentation:
    """
    Presentation for an event.

    A known ``status`` (failed, canceled, succeeded) wins over the event
    type; anything else is looked up by type, with a neutral default.
    """
    label = humanize_event_type(event_type)
    if status and status in STATUS_STYLES:
        suffix, emoji, color = STATUS_STYLES[status]
        return EventPresentation(label=f"{label} {suffix}", emoji=emoji, color=color)

    emoji, color = EVENT_STYLES.get(event_type, DEFAULT_STYLE)
    return EventPresentation(label=label, emoji=emoji, color=color)
