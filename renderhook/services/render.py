"""Render REST API client."""

from __future__ import annotations

from typing import Any, Optional

import httpx

from renderhook.config import DEFAULT_RENDER_API_URL
from renderhook.schemas import RenderEvent, RenderService

HTTP_TIMEOUT_SECONDS = 15

JSONDict = dict[str, Any]


class FetchError(RuntimeError):
    """Raised when the Render API answers with a non-success status."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code


def _headers(api_key: str) -> dict[str, str]:
    return {
        "Content-Type": "application/json",
        "Accept": "application/json",
        "Authorization": f"Bearer {api_key}",
    }


async def _get_json(
    url: str,
    api_key: str,
    what: str,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> JSONDict:
    async with httpx.AsyncClient(timeout=HTTP_TIMEOUT_SECONDS, transport=transport) as client:
        resp = await client.get(url, headers=_headers(api_key))
    if resp.status_code >= 300:
        raise FetchError(
            resp.status_code,
            f"unable to fetch {what} info; received code {resp.status_code}",
        )
    data = resp.json()
    return data if isinstance(data, dict) else {}


async def fetch_service(
    service_id: str,
    *,
    api_key: str,
    base_url: str = DEFAULT_RENDER_API_URL,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> RenderService:
    """GET ``/services/{id}``: name and dashboard URL of the service."""
    url = f"{base_url.rstrip('/')}/services/{service_id}"
    return RenderService.model_validate(await _get_json(url, api_key, "service", transport))


async def fetch_event(
    event_id: str,
    *,
    api_key: str,
    base_url: str = DEFAULT_RENDER_API_URL,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> RenderEvent:
    """
    GET ``/events/{id}``.

    Some events carry details the webhook payload does not, such as the
    deploy id or the failure reason of a crashed server.
    """
    url = f"{base_url.rstrip('/')}/events/{event_id}"
    return RenderEvent.model_validate(await _get_json(url, api_key, "event", transport))
