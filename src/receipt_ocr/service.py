"""Entry points: plain-text OCR and structured receipt extraction."""

from __future__ import annotations

import json
from typing import Any, Dict, Optional

from .client import ChatCompletionsClient, Transport
from .config import OcrConfig
from .domain.coerce import coerce_receipt
from .domain.models import ImageHandle, JsonValue, ReceiptRecord
from .extraction.locate import parse_json_object
from .extraction.payload import build_plain_text_request, build_schema_request
from .extraction.unwrap import extract_text
from .logging import get_logger

LOG = get_logger("service")


def _decode_body(body: str) -> JsonValue:
    try:
        return json.loads(body)
    except (ValueError, RecursionError):
        LOG.warning("Response body is not valid JSON (first 200 chars: %r)", body[:200])
        return None


class ReceiptOcrService:
    """Send one image per call to a vision chat model and normalize the reply.

    The service keeps no per-call state: every extraction builds its own
    request, performs exactly one transport call and returns.
    """

    def __init__(self, config: OcrConfig, transport: Optional[Transport] = None) -> None:
        self.config = config
        self._transport = transport

    def _get_transport(self) -> Transport:
        api_key = self.config.require_api_key()
        if self._transport is not None:
            return self._transport
        return ChatCompletionsClient(self.config.base_url, api_key, timeout=self.config.timeout_seconds)

    def _send(self, payload: Dict[str, Any], transport: Transport) -> tuple[JsonValue, str]:
        result = transport.post_chat(payload)
        return _decode_body(result.body), result.body

    def extract_plain_text(self, image: ImageHandle, instruction: Optional[str] = None) -> str:
        """Return all readable text in ``image``.

        Falls back to the raw response body when the reply carries no text.
        Raises ConfigurationError without a configured API key and
        TransportError when the call fails.
        """
        transport = self._get_transport()
        mime = image.mime_type
        LOG.info(
            "Extracting plain text via %s (mime=%s, %s bytes)",
            self.config.vision_model,
            mime,
            len(image.data),
        )
        payload = build_plain_text_request(image.data, mime, self.config.vision_model, instruction)
        decoded, body = self._send(payload, transport)

        text = extract_text(decoded, body)
        LOG.info(f"Received transcript with {len(text)} characters")
        return text

    def extract_receipt(self, image: ImageHandle) -> ReceiptRecord:
        """Return the receipt fields found in ``image``.

        Unusable model output yields a record of defaults rather than an
        error; only configuration and transport failures raise.
        """
        transport = self._get_transport()
        mime = image.mime_type
        LOG.info(
            "Extracting receipt JSON via %s (mime=%s, %s bytes)",
            self.config.vision_model,
            mime,
            len(image.data),
        )
        payload = build_schema_request(image.data, mime, self.config.vision_model)
        decoded, body = self._send(payload, transport)

        text = extract_text(decoded, body)
        parsed = parse_json_object(text)
        if not parsed:
            LOG.warning("Model reply held no JSON object; receipt falls back to defaults")
        record = coerce_receipt(parsed)
        LOG.info(
            "Receipt %r: total=%s %s, vat=%s, %s line item(s)",
            record.document_number,
            record.total_amount,
            record.currency,
            record.vat_amount,
            len(record.line_items),
        )
        return record
