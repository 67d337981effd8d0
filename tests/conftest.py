import base64
import json
import time

import httpx
import pytest
from fastapi.testclient import TestClient

from renderhook.app import create_app
from renderhook.config import Settings
from renderhook.utils import sign_webhook

RENDER_API = "https://api.render.test/v1"
SECRET = "whsec_" + base64.b64encode(b"render-webhook-test-secret").decode()


class FakeApis:
    """Stands in for the Render and Discord APIs and records every request."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.routes: dict[tuple[str, str], tuple[int, dict]] = {}

    def add(self, method: str, url: str, status_code: int = 200, json_body=None, text=None):
        if text is not None:
            content = {"text": text}
        else:
            content = {"json": json_body if json_body is not None else {}}
        self.routes[(method, url)] = (status_code, content)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, str(request.url))
        if key in self.routes:
            status_code, content = self.routes[key]
            return httpx.Response(status_code, **content)
        return httpx.Response(404, json={"message": "not found"})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def sent(self, method: str, prefix: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and str(r.url).startswith(prefix)]

    def discord_posts(self) -> list[httpx.Request]:
        return self.sent("POST", "https://discord.com/api/v10/channels/")

    def discord_bodies(self) -> list[dict]:
        return [json.loads(r.content) for r in self.discord_posts()]


@pytest.fixture
def settings():
    return Settings(
        webhook_secret=SECRET,
        render_api_key="rnd_test_key",
        render_api_url=RENDER_API,
        discord_token="discord-bot-token",
        discord_channel_id="1234567890",
        timezone="Europe/London",
    )


@pytest.fixture
def apis():
    return FakeApis()


@pytest.fixture
def client(settings, apis):
    app = create_app(settings, transport=apis.transport)
    with TestClient(app) as c:
        yield c


def signed_headers(body: bytes, *, secret: str = SECRET, msg_id: str = "msg_2abc", timestamp=None) -> dict:
    ts = int(time.time()) if timestamp is None else timestamp
    return {
        "content-type": "application/json",
        "webhook-id": msg_id,
        "webhook-timestamp": str(ts),
        "webhook-signature": sign_webhook(secret, msg_id, ts, body),
    }
