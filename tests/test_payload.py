import base64
from decimal import Decimal

import pytest

from slipcheck import payload
from slipcheck.identifier import classify
from slipcheck.models import InvalidIdentifier, RenderFailure


def test_encode_rejects_invalid_identifier():
    with pytest.raises(InvalidIdentifier):
        payload.encode(classify("12345"))


def test_encode_passes_amount_only_when_positive(monkeypatch):
    calls = []

    def fake_generate(target, *args):
        calls.append((target, args))
        return "PAYLOAD"

    monkeypatch.setattr(payload.promptpay_qr, "generate_payload", fake_generate)

    phone = classify("081-234-5678")
    payload.encode(phone, Decimal("150.50"))
    payload.encode(phone, Decimal("0.00"))
    payload.encode(phone)

    assert calls == [
        ("0812345678", (150.5,)),
        ("0812345678", ()),
        ("0812345678", ()),
    ]


def test_encode_is_deterministic():
    wallet = classify("140001234567890")
    first = payload.encode(wallet, Decimal("99.00"))
    assert first == payload.encode(wallet, Decimal("99.00"))
    assert first.startswith("000201")
    assert "140001234567890" in first
    assert first != payload.encode(wallet)


def test_render_data_url_is_png():
    url = payload.render_data_url("000201010211")
    prefix = "data:image/png;base64,"
    assert url.startswith(prefix)
    assert base64.b64decode(url[len(prefix):]).startswith(b"\x89PNG")


def test_render_failure_is_wrapped(monkeypatch):
    class Broken:
        def __init__(self, *a, **kw):
            raise ValueError("encoder exploded")

    monkeypatch.setattr(payload.qrcode, "QRCode", Broken)
    with pytest.raises(RenderFailure, match="encoder exploded"):
        payload.render_data_url("000201")
