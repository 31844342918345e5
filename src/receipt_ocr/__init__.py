"""
receipt_ocr - text and receipt extraction from images via a vision chat model.

The public surface is :class:`ReceiptOcrService` built from an
:class:`OcrConfig` (see :func:`load_config`).
"""

from .config import OcrConfig, load_config
from .domain.models import ImageHandle, LineItem, ReceiptRecord
from .errors import ConfigurationError, ReceiptOcrError, TransportError
from .service import ReceiptOcrService

__all__ = [
    "ConfigurationError",
    "ImageHandle",
    "LineItem",
    "OcrConfig",
    "ReceiptOcrError",
    "ReceiptOcrService",
    "ReceiptRecord",
    "TransportError",
    "load_config",
]
