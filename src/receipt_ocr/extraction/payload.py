"""Chat-completions request bodies for image OCR and receipt extraction."""

from __future__ import annotations

import base64
from typing import Any, Dict, Optional

from .prompts import (
    OCR_SYSTEM_INSTRUCTION,
    OCR_USER_TEXT,
    RECEIPT_SYSTEM_INSTRUCTION,
    RECEIPT_USER_TEXT,
)


def build_data_url(image_bytes: bytes, mime_type: str) -> str:
    b64 = base64.b64encode(image_bytes).decode("ascii")
    return f"data:{mime_type};base64,{b64}"


def _build_request(
    *,
    model: str,
    system_text: str,
    user_text: str,
    data_url: str,
) -> Dict[str, Any]:
    return {
        "model": model,
        "messages": [
            {
                "role": "system",
                "content": [
                    {"type": "text", "text": system_text},
                ],
            },
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": user_text},
                    {"type": "image_url", "image_url": {"url": data_url}},
                ],
            },
        ],
        # One complete, reproducible answer per call
        "stream": False,
        "temperature": 0,
    }


def build_plain_text_request(
    image_bytes: bytes,
    mime_type: str,
    model: str,
    instruction: Optional[str] = None,
) -> Dict[str, Any]:
    """Request that asks the model to transcribe all text in the image.

    ``instruction`` replaces the default system prompt when it is non-empty
    after stripping whitespace.
    """
    custom = (instruction or "").strip()
    return _build_request(
        model=model,
        system_text=custom or OCR_SYSTEM_INSTRUCTION,
        user_text=OCR_USER_TEXT,
        data_url=build_data_url(image_bytes, mime_type),
    )


def build_schema_request(image_bytes: bytes, mime_type: str, model: str) -> Dict[str, Any]:
    """Request that asks for the receipt schema as strict JSON.

    The system prompt is fixed; callers cannot override it.
    """
    return _build_request(
        model=model,
        system_text=RECEIPT_SYSTEM_INSTRUCTION,
        user_text=RECEIPT_USER_TEXT,
        data_url=build_data_url(image_bytes, mime_type),
    )
