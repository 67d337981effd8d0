"""Yet another discord services"""

from __future__ import annotations

from typing import Any, Optional

import httpx

DISCORD_API_BASE = "https://discord.com/api/v10"
HTTP_TIMEOUT_SECONDS = 15

JSONDict = dict[str, Any]


class NotifyError(RuntimeError):
    """Raised when Discord rejects a message."""

    def __init__(self, status_code: int, body: str):
        super().__init__(f"Discord API error: {status_code} - {body}")
        self.status_code = status_code
        self.body = body


async def post_message(
    channel_id: str,
    bot_token: str,
    message: JSONDict,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> None:
    """Send a message (embeds, components) to a channel as the bot."""
    api = f"{DISCORD_API_BASE}/channels/{channel_id}/messages"
    headers = {
        "Content-Type": "application/json",
        "Authorization": f"Bot {bot_token}",
    }
    async with httpx.AsyncClient(timeout=HTTP_TIMEOUT_SECONDS, transport=transport) as client:
        resp = await client.post(api, json=message, headers=headers)
    if resp.status_code >= 300:
        raise NotifyError(resp.status_code, resp.text)
