from typing import Optional, Tuple

DEFAULT_MIME_TYPE = "application/octet-stream"

_EXTENSION_MIME_TYPES: Tuple[Tuple[str, str], ...] = (
    (".jpg", "image/jpeg"),
    (".jpeg", "image/jpeg"),
    (".png", "image/png"),
    (".webp", "image/webp"),
    (".gif", "image/gif"),
)


def infer_mime_type(path: Optional[str]) -> str:
    """Best-effort media type from a file name or path.

    Only the trailing extension is looked at (case-insensitive). Unknown or
    missing extensions map to ``application/octet-stream``; this never raises.
    """
    lower = (path or "").lower()
    for ext, mime in _EXTENSION_MIME_TYPES:
        if lower.endswith(ext):
            return mime
    return DEFAULT_MIME_TYPE
