import logging
import os
import sys
from typing import Optional, Union


_LEVELS = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}

PACKAGE_LOGGER = "receipt_ocr"
LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _coerce_level(value: Optional[Union[str, int]]) -> int:
    if isinstance(value, str):
        return _LEVELS.get(value.upper().strip(), logging.INFO)
    if isinstance(value, int):
        return value
    return logging.INFO


def _build_stream_handler(formatter: logging.Formatter) -> logging.StreamHandler:
    # stdout is reserved for CLI results (transcripts, receipt JSON)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    return handler


def _configure_package_logger() -> logging.Logger:
    """Attach handlers to the ``receipt_ocr`` logger exactly once.

    Module loggers are its children and propagate here, so LOG_LEVEL and
    LOG_FILE are applied in one place.
    """
    root = logging.getLogger(PACKAGE_LOGGER)
    if getattr(root, "_receipt_ocr_configured", False):
        return root

    root.setLevel(_coerce_level(os.environ.get("LOG_LEVEL", "INFO")))
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    root.addHandler(_build_stream_handler(formatter))

    log_file = os.environ.get("LOG_FILE")
    if log_file:
        try:
            fh = logging.FileHandler(log_file, encoding="utf-8")
            fh.setFormatter(formatter)
            root.addHandler(fh)
        except OSError:
            root.warning("LOG_FILE could not be opened; continuing without file logging")

    # Keep library output out of an embedding application's root handlers
    root.propagate = False
    setattr(root, "_receipt_ocr_configured", True)
    return root


def get_logger(name: str) -> logging.Logger:
    """Return the ``receipt_ocr.<name>`` logger, configuring the package once."""
    _configure_package_logger()
    return logging.getLogger(f"{PACKAGE_LOGGER}.{name}")
