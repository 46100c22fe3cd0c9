# slipcheck/verdict.py

from decimal import Decimal
from typing import Optional

from .models import (
    MSG_AMOUNT_NOT_FOUND,
    MSG_IDENTIFIER_NOT_FOUND,
    MSG_VERIFIED,
    Verdict,
    VerdictKind,
)


def compose(
    identifier_found: bool,
    amount: Optional[Decimal],
    expected_label: str,
    debug: Optional[dict] = None,
) -> Verdict:
    """
    Turn slip evidence into a verdict.

    A missing identifier is always reported before a missing amount.
    A zero amount counts as missing.
    """
    if identifier_found and amount is not None and amount > 0:
        return Verdict(
            kind=VerdictKind.SUCCESS,
            message=MSG_VERIFIED.format(amount=amount),
            amount=amount,
            debug=debug,
        )
    if not identifier_found:
        return Verdict(
            kind=VerdictKind.NO_IDENTIFIER,
            message=MSG_IDENTIFIER_NOT_FOUND.format(expected=expected_label),
            debug=debug,
        )
    return Verdict(kind=VerdictKind.NO_AMOUNT, message=MSG_AMOUNT_NOT_FOUND, debug=debug)
