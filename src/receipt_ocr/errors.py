from __future__ import annotations

from typing import Optional


class ReceiptOcrError(Exception):
    """Base class for failures that callers are expected to handle."""


class ConfigurationError(ReceiptOcrError):
    """A required setting (currently only the API key) is missing."""


class TransportError(ReceiptOcrError):
    """The chat-completions call failed.

    ``status_code`` and ``body`` are ``None`` when the request never produced
    an HTTP response (DNS failure, refused connection, timeout, ...).
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body

    @classmethod
    def from_status(cls, status_code: int, body: str) -> "TransportError":
        return cls(f"xAI error {status_code}: {body}", status_code=status_code, body=body)
