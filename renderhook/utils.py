"""Webhook signature checks and small text helpers."""

from __future__ import annotations

import base64
import hashlib
import hmac
import time
from typing import Mapping

WEBHOOK_TOLERANCE_SECONDS = 5 * 60  # 5 minutes
SECRET_PREFIX = "whsec_"
WEBHOOK_HEADERS = ("webhook-id", "webhook-timestamp", "webhook-signature")


class WebhookVerificationError(Exception):
    """Raised when a webhook signature does not check out."""


def _secret_key(secret: str) -> bytes:
    if secret.startswith(SECRET_PREFIX):
        secret = secret[len(SECRET_PREFIX):]
    return base64.b64decode(secret, validate=True)


def sign_webhook(secret: str, msg_id: str, timestamp: int | str, body: bytes) -> str:
    """Return the ``v1,<base64>`` signature for a message."""
    to_sign = f"{msg_id}.{timestamp}.".encode() + body
    digest = hmac.new(_secret_key(secret), to_sign, hashlib.sha256).digest()
    return "v1," + base64.b64encode(digest).decode()


def verify_webhook(
    secret: str,
    body: bytes,
    headers: Mapping[str, str],
    *,
    now: float | None = None,
) -> None:
    """
    Verify a Standard Webhooks signature over the raw request body.

    Raises
    ------
    WebhookVerificationError
        Headers missing, timestamp outside the tolerance window, or no
        matching ``v1`` signature.
    binascii.Error
        The configured secret is not valid base64.
    """
    msg_id, msg_timestamp, msg_signature = (headers.get(h) or "" for h in WEBHOOK_HEADERS)
    if not (msg_id and msg_timestamp and msg_signature):
        raise WebhookVerificationError("Missing required headers")

    try:
        timestamp = int(msg_timestamp)
    except ValueError:
        raise WebhookVerificationError("Invalid Signature Headers") from None

    current = int(time.time() if now is None else now)
    if timestamp < current - WEBHOOK_TOLERANCE_SECONDS:
        raise WebhookVerificationError("Message timestamp too old")
    if timestamp > current + WEBHOOK_TOLERANCE_SECONDS:
        raise WebhookVerificationError("Message timestamp too new")

    expected = sign_webhook(secret, msg_id, timestamp, body).split(",", 1)[1]
    for versioned in msg_signature.split(" "):
        version, _, sig = versioned.partition(",")
        if version != "v1":
            continue
        if hmac.compare_digest(expected.encode(), sig.encode()):
            return
    raise WebhookVerificationError("No matching signature found")


def truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - 3] + "..."
