# slipcheck/identifier.py

import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional

from .models import (
    MSG_AMOUNT_TOO_LARGE,
    AmountTooLarge,
    IdentifierKind,
    NegativeAmount,
    RecipientIdentifier,
)

# G-Wallet ID: 15 digits, always starts with 14000
WALLET_RE = re.compile(r"14000[0-9]{10}")
# PromptPay mobile number: 10 digits starting with 0
PHONE_RE = re.compile(r"0[0-9]{9}")

_SEPARATORS_RE = re.compile(r"[\s-]+")

CENTS = Decimal("0.01")
# Tag 54 (transaction amount) holds at most 13 characters
MAX_AMOUNT = Decimal("9999999999.99")


def clean_identifier(raw) -> str:
    return _SEPARATORS_RE.sub("", str(raw or "").strip())


def classify(raw) -> RecipientIdentifier:
    """Normalize and classify a recipient identifier. Never raises."""
    value = clean_identifier(raw)
    if not value:
        kind = IdentifierKind.INVALID
    elif WALLET_RE.fullmatch(value):
        kind = IdentifierKind.WALLET_LONG
    elif PHONE_RE.fullmatch(value):
        kind = IdentifierKind.PHONE_SHORT
    else:
        kind = IdentifierKind.INVALID
    return RecipientIdentifier(value=value, kind=kind)


def parse_amount(raw) -> Optional[Decimal]:
    """
    Parse a requested amount into Decimal rounded to satang.
    Blank or non-numeric input counts as "no amount"; negatives and
    amounts that do not fit the QR amount field raise.
    """
    if raw is None or isinstance(raw, bool):
        return None
    text = str(raw).strip().replace(",", "")
    if not text:
        return None
    try:
        amount = Decimal(text)
    except InvalidOperation:
        return None
    if not amount.is_finite():
        return None
    if amount < 0:
        raise NegativeAmount()
    if amount > MAX_AMOUNT:
        raise AmountTooLarge(MSG_AMOUNT_TOO_LARGE.format(limit=MAX_AMOUNT))
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)
