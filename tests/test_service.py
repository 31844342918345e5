import json

import pytest

from receipt_ocr.client import ChatResult
from receipt_ocr.config import OcrConfig
from receipt_ocr.domain.models import ImageHandle, LineItem, ReceiptRecord
from receipt_ocr.errors import ConfigurationError, TransportError
from receipt_ocr.extraction.prompts import RECEIPT_SYSTEM_INSTRUCTION
from receipt_ocr.service import ReceiptOcrService

IMAGE = ImageHandle(data=b"\xff\xd8\xff\xe0fake-jpeg", name="fis.JPG")


class StubTransport:
    def __init__(self, body="{}", status_code=200, exc=None):
        self.body = body
        self.status_code = status_code
        self.exc = exc
        self.payloads = []

    def post_chat(self, payload):
        self.payloads.append(payload)
        if self.exc is not None:
            raise self.exc
        return ChatResult(status_code=self.status_code, body=self.body)


def _envelope(content):
    return json.dumps({"choices": [{"index": 0, "message": {"role": "assistant", "content": content}}]})


def _service(transport, api_key="sk-test"):
    config = OcrConfig(api_key=api_key, model="grok-4-latest", vision_model="grok-3")
    return ReceiptOcrService(config, transport=transport)


def test_extract_receipt_end_to_end():
    content = (
        '```json\n{"belge_numarasi":"A-1","harcama_tutari":"12,50","para_birimi":"TRY",'
        '"kdv_tutari":0,"urunler":[{"ad":"Kalem","adet":2,"birim_fiyat":"3,5"}]}\n```'
    )
    transport = StubTransport(body=_envelope(content))

    record = _service(transport).extract_receipt(IMAGE)

    assert record == ReceiptRecord(
        document_number="A-1",
        total_amount=12.5,
        currency="TRY",
        vat_amount=0.0,
        line_items=(LineItem(name="Kalem", quantity=2.0, unit_price=3.5),),
    )
    assert len(transport.payloads) == 1
    payload = transport.payloads[0]
    assert payload["model"] == "grok-3"
    assert payload["messages"][0]["content"][0]["text"] == RECEIPT_SYSTEM_INSTRUCTION
    assert payload["messages"][1]["content"][1]["image_url"]["url"].startswith("data:image/jpeg;base64,")


def test_extract_receipt_with_prose_and_content_parts():
    content = [
        {"type": "output_text", "text": 'Sure, here it is: {"belge_numarasi": "B-7",'},
        {"type": "output_text", "text": ' "harcama_tutari": 40.5} Let me know!'},
    ]
    record = _service(StubTransport(body=_envelope(content))).extract_receipt(IMAGE)
    assert record == ReceiptRecord(document_number="B-7", total_amount=40.5)


def test_extract_receipt_degrades_to_defaults():
    for body in (
        _envelope("I could not read this receipt."),
        _envelope("```json\n[1, 2]\n```"),
        json.dumps({"unexpected": "shape"}),
        "<html>gateway page</html>",
        "",
    ):
        record = _service(StubTransport(body=body)).extract_receipt(IMAGE)
        assert record == ReceiptRecord()


def test_extract_plain_text_returns_stripped_content():
    transport = StubTransport(body=_envelope("\n  MİGROS\nTOPLAM 12,50\n  "))
    text = _service(transport).extract_plain_text(IMAGE)
    assert text == "MİGROS\nTOPLAM 12,50"
    assert transport.payloads[0]["stream"] is False
    assert transport.payloads[0]["temperature"] == 0


def test_extract_plain_text_passes_instruction():
    transport = StubTransport(body=_envelope("ok"))
    _service(transport).extract_plain_text(IMAGE, instruction="  Only the header.  ")
    assert transport.payloads[0]["messages"][0]["content"][0]["text"] == "Only the header."


def test_extract_plain_text_falls_back_to_raw_body():
    for body in (json.dumps({"choices": []}), _envelope(""), "not json"):
        assert _service(StubTransport(body=body)).extract_plain_text(IMAGE) == body


@pytest.mark.parametrize("api_key", [None, ""])
def test_missing_key_raises_before_any_transport_call(api_key):
    transport = StubTransport(body=_envelope("never used"))
    service = _service(transport, api_key=api_key)

    with pytest.raises(ConfigurationError):
        service.extract_plain_text(IMAGE)
    with pytest.raises(ConfigurationError):
        service.extract_receipt(IMAGE)

    assert transport.payloads == []


def test_transport_error_propagates_unchanged():
    error = TransportError.from_status(502, "Bad Gateway")
    service = _service(StubTransport(exc=error))

    with pytest.raises(TransportError) as info:
        service.extract_receipt(IMAGE)
    assert info.value is error
    assert info.value.status_code == 502
    assert info.value.body == "Bad Gateway"

    with pytest.raises(TransportError):
        service.extract_plain_text(IMAGE)


def test_each_call_issues_its_own_request():
    transport = StubTransport(body=_envelope('{"belge_numarasi": "X"}'))
    service = _service(transport)
    first = service.extract_receipt(IMAGE)
    second = service.extract_receipt(IMAGE)
    assert first == second
    assert len(transport.payloads) == 2
    assert transport.payloads[0] is not transport.payloads[1]


def test_default_transport_uses_requests(monkeypatch):
    import requests

    calls = []

    class _Resp:
        status_code = 200
        text = _envelope("hello")

    def _post(url, **kwargs):
        calls.append((url, kwargs))
        return _Resp()

    monkeypatch.setattr(requests, "post", _post)
    config = OcrConfig(api_key="sk-live", base_url="https://example.invalid/chat", vision_model="grok-3", timeout_seconds=9)

    assert ReceiptOcrService(config).extract_plain_text(IMAGE) == "hello"
    assert len(calls) == 1
    url, kwargs = calls[0]
    assert url == "https://example.invalid/chat"
    assert kwargs["headers"]["Authorization"] == "Bearer sk-live"
    assert kwargs["timeout"] == 9


def test_image_handle_from_path(tmp_path):
    path = tmp_path / "receipt.PNG"
    path.write_bytes(b"png-bytes")
    handle = ImageHandle.from_path(str(path))
    assert handle.data == b"png-bytes"
    assert handle.name == "receipt.PNG"
    assert handle.mime_type == "image/png"


@pytest.mark.parametrize("method", ["extract_plain_text", "extract_receipt"])
def test_entry_points_unwrap_through_extract_text(monkeypatch, method):
    from receipt_ocr.extraction import unwrap

    seen = []

    def _spy(response, raw_body):
        seen.append((response, raw_body))
        return unwrap.extract_text(response, raw_body)

    monkeypatch.setattr("receipt_ocr.service.extract_text", _spy)
    body = _envelope('{"belge_numarasi": "X"}')
    getattr(_service(StubTransport(body=body)), method)(IMAGE)

    assert seen == [(json.loads(body), body)]


def test_extract_receipt_rejects_nan_reply():
    body = _envelope('{"belge_numarasi": "A-1", "harcama_tutari": NaN, "kdv_tutari": "inf"}')
    record = _service(StubTransport(body=body)).extract_receipt(IMAGE)
    assert record == ReceiptRecord()
