from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Protocol

import requests

from .errors import TransportError
from .logging import get_logger

LOG = get_logger("client")


@dataclass(frozen=True)
class ChatResult:
    status_code: int
    body: str


class Transport(Protocol):
    def post_chat(self, payload: Dict[str, Any]) -> ChatResult: ...


class ChatCompletionsClient:
    """Thin wrapper around a single chat-completions POST with logging.

    Each call is an independent ``requests.post``; no session or connection
    state is shared between extractions.
    """

    def __init__(self, base_url: str, api_key: str, *, timeout: int = 120) -> None:
        self.base_url = base_url
        self.api_key = api_key
        self.timeout = int(timeout)

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def post_chat(self, payload: Dict[str, Any]) -> ChatResult:
        """POST ``payload`` and return the raw response.

        Raises :class:`TransportError` on network failure or any status
        outside 2xx; the body is passed on unchanged.
        """
        LOG.debug(f"POST {self.base_url} model={payload.get('model')} timeout={self.timeout}s")
        try:
            resp = requests.post(
                self.base_url,
                headers=self._headers(),
                json=payload,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            LOG.error("Chat request failed: %s", exc)
            raise TransportError(f"Chat request failed: {exc}") from exc

        if resp.status_code < 200 or resp.status_code >= 300:
            LOG.error("Chat endpoint HTTP %s: %s", resp.status_code, resp.text[:500])
            raise TransportError.from_status(resp.status_code, resp.text)

        LOG.debug(f"Chat endpoint HTTP {resp.status_code}, {len(resp.text)} chars")
        return ChatResult(status_code=resp.status_code, body=resp.text)
