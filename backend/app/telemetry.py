from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Literal, Protocol
from urllib.parse import urlsplit, urlunsplit

import structlog

TELEMETRY_LOGGER_NAME = "gmn_news.telemetry"
REDACTED = "[redacted]"

# Attribute names containing any of these never leave the process verbatim.
_REDACTED_KEY_TOKENS: tuple[str, ...] = (
    "api_key",
    "authorization",
    "body",
    "content",
    "cookie",
    "html",
    "secret",
    "token",
)
_MAX_TEXT_CHARS = 160

TelemetryValue = bool | int | float | str | None


class TelemetrySink(Protocol):
    def emit(self, *, event_name: str, attributes: Mapping[str, Any]) -> None:
        ...


class NoOpTelemetrySink:
    def emit(self, *, event_name: str, attributes: Mapping[str, Any]) -> None:
        _ = (event_name, attributes)


@dataclass
class StructuredLogTelemetrySink:
    """Writes each event as one structlog record on the telemetry logger."""

    logger: Any = field(default_factory=lambda: structlog.get_logger(TELEMETRY_LOGGER_NAME))

    def emit(self, *, event_name: str, attributes: Mapping[str, Any]) -> None:
        self.logger.info("telemetry", telemetry_event=event_name, **dict(attributes))


@dataclass(frozen=True)
class TelemetryClient:
    enabled: bool
    sink: TelemetrySink

    @classmethod
    def disabled(cls) -> TelemetryClient:
        return cls(enabled=False, sink=NoOpTelemetrySink())

    def emit(self, event_name: str, **attributes: Any) -> None:
        if self.enabled:
            self.sink.emit(event_name=event_name, attributes=scrub_attributes(attributes))


def build_telemetry_client(*, enabled: bool, sink: Literal["none", "log"]) -> TelemetryClient:
    if enabled and sink == "log":
        return TelemetryClient(enabled=True, sink=StructuredLogTelemetrySink())
    return TelemetryClient.disabled()


def scrub_attributes(attributes: Mapping[str, Any]) -> dict[str, TelemetryValue]:
    """Lower-case keys, redact credentials and markup, drop URL query strings."""
    scrubbed: dict[str, TelemetryValue] = {}
    for raw_key, raw_value in attributes.items():
        key = str(raw_key).strip().lower()
        if not key:
            continue
        if any(token in key for token in _REDACTED_KEY_TOKENS):
            scrubbed[key] = REDACTED
        elif key.endswith("url") and isinstance(raw_value, str):
            scrubbed[key] = _compact(_without_query(raw_value))
        else:
            scrubbed[key] = _compact(raw_value)
    return scrubbed


def _without_query(url: str) -> str:
    # Listing URLs carry the API credential in the query string.
    try:
        parts = urlsplit(url)
    except ValueError:
        return url
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))


def _compact(value: Any) -> TelemetryValue:
    if value is None or isinstance(value, bool | int | float):
        return value
    if not isinstance(value, str):
        return type(value).__name__
    text = " ".join(value.split())
    if len(text) > _MAX_TEXT_CHARS:
        return f"{text[:_MAX_TEXT_CHARS]}..."
    return text
