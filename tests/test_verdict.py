from decimal import Decimal

import pytest

from slipcheck.identifier import classify
from slipcheck.models import VerdictKind
from slipcheck.ocr import extract_amount_evidence, extract_identifier_evidence
from slipcheck.verdict import compose


def test_success_carries_amount_and_message():
    v = compose(True, Decimal("150.5"), "0812345678")
    assert v.kind is VerdictKind.SUCCESS
    assert v.amount == Decimal("150.5")
    assert v.message == "verification passed: found identifier and amount 150.50."
    assert v.to_response() == {"status": "success", "message": v.message, "amount": 150.5}


@pytest.mark.parametrize("amount", [None, Decimal("0"), Decimal("25.00")])
def test_missing_identifier_always_reported_first(amount):
    v = compose(False, amount, "0812345678")
    assert v.kind is VerdictKind.NO_IDENTIFIER
    assert v.message == "identifier (0812345678) not found in slip."
    assert v.amount is None


@pytest.mark.parametrize("amount", [None, Decimal("0"), Decimal("0.00")])
def test_missing_or_zero_amount(amount):
    v = compose(True, amount, "0812345678")
    assert v.kind is VerdictKind.NO_AMOUNT
    assert v.message == "amount not found in slip."
    assert v.to_response() == {"status": "fail", "message": "amount not found in slip."}


def test_debug_details_only_when_given():
    assert "debug" not in compose(True, Decimal("1"), "x").to_response()
    v = compose(False, None, "x", debug={"ocr": "text"})
    assert v.to_response()["debug"] == {"ocr": "text"}


def test_end_to_end_masked_wallet_slip():
    text = "โอนเงินสำเร็จ 140-xxxxxxxx-7315 จำนวน 150.50 บาท"
    expected = classify("0812345678")
    v = compose(
        extract_identifier_evidence(text, expected),
        extract_amount_evidence(text),
        expected.value,
    )
    assert v.passed
    assert v.amount == Decimal("150.50")


def test_end_to_end_no_currency_unit():
    text = "โอนเงินสำเร็จ 140-xxxxxxxx-7315 จำนวน 150.50"
    expected = classify("0812345678")
    v = compose(
        extract_identifier_evidence(text, expected),
        extract_amount_evidence(text),
        expected.value,
    )
    assert v.kind is VerdictKind.NO_AMOUNT


def test_end_to_end_zero_amount():
    text = "140001234567890 0.00 บาท"
    expected = classify("140001234567890")
    v = compose(
        extract_identifier_evidence(text, expected),
        extract_amount_evidence(text),
        expected.value,
    )
    assert v.kind is VerdictKind.NO_AMOUNT
