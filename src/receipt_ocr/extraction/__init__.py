"""Request construction and response normalization for vision chat calls."""

from .locate import locate_json_candidate, parse_json_object
from .payload import build_data_url, build_plain_text_request, build_schema_request
from .unwrap import extract_message_text, extract_text

__all__ = [
    "build_data_url",
    "build_plain_text_request",
    "build_schema_request",
    "extract_message_text",
    "extract_text",
    "locate_json_candidate",
    "parse_json_object",
]
