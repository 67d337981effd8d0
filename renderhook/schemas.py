"""Render webhook payloads and API resources."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
)


class PayloadParseError(ValueError):
    """Raised when a webhook body is not a usable JSON payload."""


class _Schema(BaseModel):
    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        coerce_numbers_to_str=True,
        frozen=True,
    )


class _LenientSchema(_Schema):
    """
    Schema for Render data decoded field by field.

    A field whose value has an unexpected shape is dropped to ``None``
    instead of failing the whole object.
    """

    @field_validator("*", mode="wrap")
    @classmethod
    def _drop_invalid(cls, value: Any, handler: Any) -> Any:
        try:
            return handler(value)
        except ValidationError:
            return None


class WebhookData(_LenientSchema):
    id: Optional[str] = None
    service_id: Optional[str] = Field(None, alias="serviceId")
    service_name: Optional[str] = Field(None, alias="serviceName")
    status: Optional[str] = None


class WebhookPayload(_Schema):
    """Body of a Render webhook delivery."""

    type: str
    timestamp: Union[str, int, float, None] = None
    data: WebhookData = Field(default_factory=WebhookData)

    @field_validator("timestamp", "data", mode="wrap")
    @classmethod
    def _absent_when_invalid(cls, value: Any, handler: Any, info: ValidationInfo) -> Any:
        # Only a missing or non-string `type` rejects the delivery.
        try:
            return handler(value)
        except ValidationError:
            return WebhookData() if info.field_name == "data" else None


def parse_payload(body: bytes) -> WebhookPayload:
    try:
        raw = json.loads(body)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise PayloadParseError(f"body is not JSON: {exc}") from exc
    try:
        return WebhookPayload.model_validate(raw)
    except ValidationError as exc:
        raise PayloadParseError(f"unexpected payload shape: {exc}") from exc


# ---------------------------------------------------------------------------
# Failure reasons
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class NonZeroExit:
    code: int


@dataclass(frozen=True)
class OutOfMemory:
    pass


@dataclass(frozen=True)
class TimedOut:
    seconds: int
    reason: str = ""


@dataclass(frozen=True)
class Unhealthy:
    message: str


@dataclass(frozen=True)
class UnknownFailure:
    pass


FailureVariant = Union[NonZeroExit, OutOfMemory, TimedOut, Unhealthy, UnknownFailure]


class FailureReason(_LenientSchema):
    non_zero_exit: Optional[int] = Field(None, alias="nonZeroExit")
    oom_killed: Optional[bool] = Field(None, alias="oomKilled")
    timed_out_seconds: Optional[int] = Field(None, alias="timedOutSeconds")
    timed_out_reason: Optional[str] = Field(None, alias="timedOutReason")
    unhealthy: Optional[str] = None

    def variant(self) -> FailureVariant:
        """The single populated branch, by precedence."""
        if self.non_zero_exit:
            return NonZeroExit(self.non_zero_exit)
        if self.oom_killed:
            return OutOfMemory()
        if self.timed_out_seconds:
            return TimedOut(self.timed_out_seconds, self.timed_out_reason or "")
        if self.unhealthy:
            return Unhealthy(self.unhealthy)
        return UnknownFailure()


# ---------------------------------------------------------------------------
# Render API resources
# ---------------------------------------------------------------------------


class DeployRef(_LenientSchema):
    id: Optional[str] = None


class EventDetails(_LenientSchema):
    reason: Optional[FailureReason] = None
    deploy_id: Optional[str] = Field(None, alias="deployId")
    deploy: Optional[DeployRef] = None
    trigger: Optional[dict[str, Any]] = None

    @property
    def resolved_deploy_id(self) -> str | None:
        if self.deploy_id:
            return self.deploy_id
        if self.deploy and self.deploy.id:
            return self.deploy.id
        return None


class RenderEvent(_LenientSchema):
    id: Optional[str] = None
    type: Optional[str] = None
    details: Optional[EventDetails] = None


class RenderService(_LenientSchema):
    id: Optional[str] = None
    name: Optional[str] = None
    dashboard_url: Optional[str] = Field(None, alias="dashboardUrl")
