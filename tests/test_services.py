"""Tests for the Render client, Discord notifier and the background pipeline."""

from dataclasses import replace

import pytest

from renderhook.schemas import WebhookPayload
from renderhook.services.discord import NotifyError, post_message
from renderhook.services.notifications import process_webhook
from renderhook.services.render import FetchError, fetch_event, fetch_service

from conftest import RENDER_API

DISCORD_URL = "https://discord.com/api/v10/channels/1234567890/messages"

SERVICE_JSON = {
    "id": "srv-123",
    "name": "api-web",
    "type": "web_service",
    "dashboardUrl": "https://dashboard.render.com/web/srv-123",
}
EVENT_JSON = {
    "id": "evt-abc",
    "type": "server_failed",
    "details": {"reason": {"nonZeroExit": 137}},
}


def payload(**data):
    return WebhookPayload.model_validate(
        {
            "type": "server_failed",
            "timestamp": "2026-10-17T10:00:00Z",
            "data": {"id": "evt-abc", "serviceId": "srv-123", **data},
        }
    )


class TestRenderClient:
    async def test_fetch_service(self, apis):
        apis.add("GET", f"{RENDER_API}/services/srv-123", json_body=SERVICE_JSON)
        service = await fetch_service(
            "srv-123", api_key="rnd_key", base_url=RENDER_API, transport=apis.transport
        )
        assert service.name == "api-web"
        assert service.dashboard_url == "https://dashboard.render.com/web/srv-123"

        request = apis.requests[0]
        assert request.method == "GET"
        assert request.headers["Authorization"] == "Bearer rnd_key"
        assert request.headers["Accept"] == "application/json"

    async def test_fetch_event(self, apis):
        apis.add("GET", f"{RENDER_API}/events/evt-abc", json_body=EVENT_JSON)
        event = await fetch_event(
            "evt-abc", api_key="rnd_key", base_url=RENDER_API + "/", transport=apis.transport
        )
        assert event.details.reason.non_zero_exit == 137
        assert str(apis.requests[0].url) == f"{RENDER_API}/events/evt-abc"

    async def test_error_status_raises_fetch_error(self, apis):
        apis.add("GET", f"{RENDER_API}/services/srv-123", status_code=401, json_body={"message": "unauthorized"})
        with pytest.raises(FetchError) as exc_info:
            await fetch_service("srv-123", api_key="bad", base_url=RENDER_API, transport=apis.transport)
        assert exc_info.value.status_code == 401


class TestDiscordNotifier:
    async def test_post_message(self, apis):
        apis.add("POST", DISCORD_URL, json_body={"id": "msg-1"})
        await post_message("1234567890", "bot-token", {"embeds": []}, transport=apis.transport)

        request = apis.discord_posts()[0]
        assert request.headers["Authorization"] == "Bot bot-token"
        assert request.headers["Content-Type"] == "application/json"
        assert apis.discord_bodies() == [{"embeds": []}]

    async def test_error_includes_status_and_body(self, apis):
        apis.add("POST", DISCORD_URL, status_code=403, text='{"message": "Missing Access"}')
        with pytest.raises(NotifyError) as exc_info:
            await post_message("1234567890", "bot-token", {"embeds": []}, transport=apis.transport)
        assert exc_info.value.status_code == 403
        assert "Missing Access" in exc_info.value.body
        assert "403" in str(exc_info.value)


class TestProcessWebhook:
    @pytest.fixture
    def healthy_apis(self, apis):
        apis.add("GET", f"{RENDER_API}/services/srv-123", json_body=SERVICE_JSON)
        apis.add("GET", f"{RENDER_API}/events/evt-abc", json_body=EVENT_JSON)
        apis.add("POST", DISCORD_URL, json_body={"id": "msg-1"})
        return apis

    async def test_full_pipeline(self, settings, healthy_apis):
        await process_webhook(payload(), settings, transport=healthy_apis.transport)

        assert len(healthy_apis.sent("GET", RENDER_API)) == 2
        (body,) = healthy_apis.discord_bodies()
        embed = body["embeds"][0]
        assert embed["title"] == "❌ api-web — Server Failed"
        assert embed["description"] == "Exited with status 137"
        assert body["components"][0]["components"][0]["url"].endswith("/logs")

    async def test_service_fetch_failure_still_notifies(self, settings, apis):
        apis.add("GET", f"{RENDER_API}/services/srv-123", status_code=500)
        apis.add("GET", f"{RENDER_API}/events/evt-abc", json_body=EVENT_JSON)
        apis.add("POST", DISCORD_URL, json_body={"id": "msg-1"})

        await process_webhook(payload(), settings, transport=apis.transport)

        assert len(apis.sent("GET", RENDER_API)) == 2
        (body,) = apis.discord_bodies()
        assert body["embeds"][0]["title"] == "❌ srv-123 — Server Failed"
        assert body["embeds"][0]["description"] == "Exited with status 137"
        assert "components" not in body

    async def test_event_fetch_failure_still_notifies(self, settings, apis):
        apis.add("GET", f"{RENDER_API}/services/srv-123", json_body=SERVICE_JSON)
        apis.add("POST", DISCORD_URL, json_body={"id": "msg-1"})

        await process_webhook(payload(), settings, transport=apis.transport)

        (body,) = apis.discord_bodies()
        assert body["embeds"][0]["title"] == "❌ api-web — Server Failed"
        assert body["embeds"][0]["description"] == "Failed for unknown reason"

    async def test_both_fetches_fail(self, settings, apis):
        apis.add("POST", DISCORD_URL, json_body={"id": "msg-1"})

        await process_webhook(payload(serviceName="named"), settings, transport=apis.transport)

        (body,) = apis.discord_bodies()
        assert body["embeds"][0]["title"] == "❌ named — Server Failed"

    async def test_notify_failure_is_swallowed(self, settings, apis):
        apis.add("POST", DISCORD_URL, status_code=500, text="boom")
        await process_webhook(payload(), settings, transport=apis.transport)
        assert len(apis.discord_posts()) == 1

    async def test_missing_ids_skip_fetches(self, settings, apis):
        apis.add("POST", DISCORD_URL, json_body={"id": "msg-1"})
        bare = WebhookPayload.model_validate({"type": "deploy_started", "data": {}})

        await process_webhook(bare, settings, transport=apis.transport)

        assert apis.sent("GET", RENDER_API) == []
        assert len(apis.discord_posts()) == 1

    async def test_time_field_uses_configured_timezone(self, settings, apis):
        apis.add("POST", DISCORD_URL, json_body={"id": "msg-1"})
        bare = WebhookPayload.model_validate({"type": "deploy_started", "timestamp": "2026-01-15T09:05:00Z"})

        await process_webhook(bare, replace(settings, timezone="America/New_York"), transport=apis.transport)

        (body,) = apis.discord_bodies()
        assert body["embeds"][0]["fields"][0] == {"name": "Time", "value": "15 Jan 2026, 04:05 EST", "inline": False}

    async def test_unknown_timezone_falls_back_to_london(self, settings, apis):
        apis.add("POST", DISCORD_URL, json_body={"id": "msg-1"})
        bare = WebhookPayload.model_validate({"type": "deploy_started", "timestamp": "2026-07-01T12:30:00Z"})

        await process_webhook(bare, replace(settings, timezone="Mars/Olympus"), transport=apis.transport)

        (body,) = apis.discord_bodies()
        assert body["embeds"][0]["fields"][0]["value"] == "1 Jul 2026, 13:30 BST"
