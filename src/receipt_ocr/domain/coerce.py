from __future__ import annotations

import math
from typing import Any, Dict, List

from ..logging import get_logger
from .models import (
    WIRE_CURRENCY,
    WIRE_DOCUMENT_NUMBER,
    WIRE_ITEM_NAME,
    WIRE_ITEM_QUANTITY,
    WIRE_ITEM_UNIT_PRICE,
    WIRE_LINE_ITEMS,
    WIRE_TOTAL_AMOUNT,
    WIRE_VAT_AMOUNT,
    JsonValue,
    LineItem,
    ReceiptRecord,
)

_LOG = get_logger("coerce")


def as_string(value: JsonValue) -> str:
    """Pass strings through unchanged; every other type becomes ``""``."""
    if isinstance(value, str):
        return value
    return ""


def as_number(value: JsonValue) -> float:
    """Coerce a JSON value to ``float`` with ``0.0`` as the fallback.

    Numbers pass through. Strings are parsed after replacing every comma with
    a period, so ``"12,50"`` gives ``12.5`` while a thousands-separated
    ``"1.234,56"`` turns into ``"1.234.56"`` and falls back to ``0.0``.
    Booleans are not JSON numbers and also give ``0.0``, as do NaN and
    infinities (``"nan"``, ``"inf"``, ``"Infinity"``).
    """
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, float):
        return _finite_or_zero(value)
    if isinstance(value, int):
        try:
            return float(value)
        except OverflowError:
            return 0.0
    if isinstance(value, str):
        candidate = value.replace(",", ".")
        # float() accepts "1_000"; a JSON-ish decimal does not
        if "_" in candidate:
            return 0.0
        try:
            return _finite_or_zero(float(candidate))
        except ValueError:
            return 0.0
    return 0.0


def _finite_or_zero(value: float) -> float:
    return value if math.isfinite(value) else 0.0


def _as_mapping(value: JsonValue) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_list(value: JsonValue) -> List[Any]:
    return value if isinstance(value, list) else []


def coerce_line_item(value: JsonValue) -> LineItem:
    item = _as_mapping(value)
    return LineItem(
        name=as_string(item.get(WIRE_ITEM_NAME)),
        quantity=as_number(item.get(WIRE_ITEM_QUANTITY)),
        unit_price=as_number(item.get(WIRE_ITEM_UNIT_PRICE)),
    )


def coerce_receipt(value: JsonValue) -> ReceiptRecord:
    """Map any decoded JSON value onto a fully populated :class:`ReceiptRecord`.

    Total over its input: a non-mapping top level yields the all-default
    record, unknown keys are dropped, and each field falls back to its
    default when the model sent the wrong type.
    """
    if not isinstance(value, dict):
        _LOG.debug(f"Top-level value is {type(value).__name__}, not an object; using defaults")
    payload = _as_mapping(value)
    items = tuple(coerce_line_item(raw) for raw in _as_list(payload.get(WIRE_LINE_ITEMS)))
    return ReceiptRecord(
        document_number=as_string(payload.get(WIRE_DOCUMENT_NUMBER)),
        total_amount=as_number(payload.get(WIRE_TOTAL_AMOUNT)),
        currency=as_string(payload.get(WIRE_CURRENCY)),
        vat_amount=as_number(payload.get(WIRE_VAT_AMOUNT)),
        line_items=items,
    )
