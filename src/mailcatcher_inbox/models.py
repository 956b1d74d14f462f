"""Data models for captured messages.

This module contains Pydantic models for the records returned by the
capture server's JSON endpoints.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _to_epoch_seconds(value: Any) -> Any:
    """Normalise a server timestamp to integer seconds since epoch.

    MailCatcher sends ISO-8601 strings; other servers send numbers.
    Anything else is passed through for Pydantic to reject.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"timestamp must be finite, got {value!r}")
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        if text.lstrip("-").isdigit():
            return int(text)
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            return value
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return int(parsed.timestamp())
    return value


def _to_id(value: Any) -> Any:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, str)):
        return str(value)
    return value


class MessageHeader(BaseModel):
    """Summary record returned by ``GET /messages``."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(description="Server-assigned message ID")
    recipients: list[str] = Field(
        description="Recipient addresses, each wrapped in angle brackets",
    )
    created_at: int = Field(description="Creation timestamp in seconds since epoch")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> Any:
        return _to_id(value)

    @field_validator("created_at", mode="before")
    @classmethod
    def coerce_created_at(cls, value: Any) -> Any:
        return _to_epoch_seconds(value)


class FullMessage(BaseModel):
    """Complete record returned by ``GET /messages/{id}.json``."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(description="Server-assigned message ID")
    subject: str = Field(description="Subject header, empty when the message has none")
    recipients: list[str] = Field(default_factory=list, description="Recipient addresses")
    formats: list[str] = Field(
        default_factory=list,
        description="Available body representations, e.g. html, plain, source",
    )
    source: str = Field(description="Raw RFC-822 message text")

    sender: Optional[str] = Field(default=None, description="Envelope sender")
    type: Optional[str] = Field(default=None, description="Top level MIME type")
    size: Optional[int] = Field(default=None, description="Message size in bytes")
    created_at: Optional[int] = Field(default=None, description="Seconds since epoch")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> Any:
        return _to_id(value)

    @field_validator("created_at", mode="before")
    @classmethod
    def coerce_created_at(cls, value: Any) -> Any:
        return _to_epoch_seconds(value)

    @field_validator("subject", mode="before")
    @classmethod
    def coerce_subject(cls, value: Any) -> Any:
        return "" if value is None else value
