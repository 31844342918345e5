from __future__ import annotations

from typing import Any, Optional

from ..domain.models import JsonValue
from ..logging import get_logger

LOG = get_logger("unwrap")

# Content part types that carry answer text
TEXT_PART_TYPES = ("output_text", "text")


def _first_message_content(response: JsonValue) -> Any:
    """Return ``choices[0].message.content`` or None when the shape differs."""
    if not isinstance(response, dict):
        return None
    choices = response.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, dict):
        return None
    message = first.get("message")
    if not isinstance(message, dict):
        return None
    return message.get("content")


def _join_text_parts(parts: list) -> str:
    chunks: list[str] = []
    for part in parts:
        if not isinstance(part, dict):
            continue
        if part.get("type") in TEXT_PART_TYPES and isinstance(part.get("text"), str):
            chunks.append(part["text"])
    return "".join(chunks)


def extract_message_text(response: JsonValue) -> Optional[str]:
    """Return the stripped answer text, or None when there is none.

    ``content`` may be a plain string or a list of typed parts; for the
    latter the ``text`` of every ``output_text``/``text`` part is joined in
    order.
    """
    content = _first_message_content(response)
    if isinstance(content, str):
        text = content.strip()
        return text or None
    if isinstance(content, list):
        text = _join_text_parts(content).strip()
        return text or None
    return None


def extract_text(response: JsonValue, raw_body: str) -> str:
    """Like :func:`extract_message_text` but falls back to ``raw_body``.

    The raw body is returned verbatim so the caller can still see what the
    service sent when the envelope holds no usable text.
    """
    text = extract_message_text(response)
    if text is None:
        LOG.warning("No text content in response; falling back to raw body")
        return raw_body
    return text
