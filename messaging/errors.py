from __future__ import annotations

from typing import Optional

from pydantic import ValidationError

from messaging.types import MetaApiErrorBody


class WhatsAppError(Exception):
    """Base class for everything this client raises on its own."""


class ConfigurationError(WhatsAppError):
    """Missing or empty credentials at construction time. Not retryable."""


class PhoneValidationError(WhatsAppError, ValueError):
    """Recipient is not E.164. Raised before any network call."""


class WhatsAppApiError(WhatsAppError):
    """
    Non-2xx response from the Cloud API.

    Callers branch on `code` (e.g. 131030 recipient not in allowed list) and
    hand `trace_id` to Meta support. `code == 0` with `type == "Unknown"`
    means the error body could not be parsed.
    """

    def __init__(self, message: str, code: int, status: int, type: str, trace_id: Optional[str] = None):
        super().__init__(message, code, status, type, trace_id)
        self.message = message
        self.code = code
        self.status = status
        self.type = type
        self.trace_id = trace_id

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return (
            f"WhatsAppApiError(message={self.message!r}, code={self.code}, status={self.status}, "
            f"type={self.type!r}, trace_id={self.trace_id!r})"
        )

    @classmethod
    def from_response(cls, status: int, body: str) -> "WhatsAppApiError":
        try:
            parsed = MetaApiErrorBody.model_validate_json(body)
        except ValidationError:
            # Not JSON, or not the Graph error envelope (proxies, HTML 502 pages, ...).
            return cls(f"WhatsApp API error (HTTP {status}): {body}", 0, status, "Unknown")
        err = parsed.error
        return cls(err.message, err.code, status, err.type, err.fbtrace_id)
