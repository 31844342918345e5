from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple, Union

from .mime import infer_mime_type

# Anything json.loads can hand back. Model replies are untrusted, so code
# consuming a JsonValue checks the concrete type before every access.
JsonValue = Union[None, bool, int, float, str, List[Any], Dict[str, Any]]


# Key names the model is asked to answer with (see extraction.prompts)
WIRE_DOCUMENT_NUMBER = "belge_numarasi"
WIRE_TOTAL_AMOUNT = "harcama_tutari"
WIRE_CURRENCY = "para_birimi"
WIRE_VAT_AMOUNT = "kdv_tutari"
WIRE_LINE_ITEMS = "urunler"
WIRE_ITEM_NAME = "ad"
WIRE_ITEM_QUANTITY = "adet"
WIRE_ITEM_UNIT_PRICE = "birim_fiyat"


@dataclass(frozen=True)
class ImageHandle:
    """Image bytes plus the file name used to guess the media type."""

    data: bytes
    name: str = ""

    @classmethod
    def from_path(cls, path: str) -> "ImageHandle":
        with open(path, "rb") as f:
            return cls(data=f.read(), name=os.path.basename(path))

    @property
    def mime_type(self) -> str:
        return infer_mime_type(self.name)


@dataclass(frozen=True)
class LineItem:
    name: str = ""
    quantity: float = 0.0
    unit_price: float = 0.0

    def as_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "quantity": self.quantity, "unit_price": self.unit_price}

    def to_wire_dict(self) -> Dict[str, Any]:
        return {
            WIRE_ITEM_NAME: self.name,
            WIRE_ITEM_QUANTITY: self.quantity,
            WIRE_ITEM_UNIT_PRICE: self.unit_price,
        }


@dataclass(frozen=True)
class ReceiptRecord:
    """Normalized receipt/invoice data.

    Every field always holds a value of its declared type; fields the model
    did not deliver carry the defaults below.
    """

    document_number: str = ""
    total_amount: float = 0.0
    currency: str = ""
    vat_amount: float = 0.0
    line_items: Tuple[LineItem, ...] = field(default_factory=tuple)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "document_number": self.document_number,
            "total_amount": self.total_amount,
            "currency": self.currency,
            "vat_amount": self.vat_amount,
            "line_items": [item.as_dict() for item in self.line_items],
        }

    def to_wire_dict(self) -> Dict[str, Any]:
        """Return the record under the model-facing key names."""
        return {
            WIRE_DOCUMENT_NUMBER: self.document_number,
            WIRE_TOTAL_AMOUNT: self.total_amount,
            WIRE_CURRENCY: self.currency,
            WIRE_VAT_AMOUNT: self.vat_amount,
            WIRE_LINE_ITEMS: [item.to_wire_dict() for item in self.line_items],
        }
