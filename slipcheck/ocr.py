# slipcheck/ocr.py

import re
from decimal import Decimal
from typing import Callable, List, Optional, Tuple

from .models import RecipientIdentifier

# ----------------------------
# Regex library
# ----------------------------

# Masked G-Wallet as printed by most bank apps: 140-xxxxxxxx-7315
WALLET_MASKED_RE = re.compile(r"140-([xX0-9]{8,9})-7315")
# Full G-Wallet, hyphens optional around the middle block
WALLET_FULL_RE = re.compile(r"140-?[0-9]{9}-?7315")
WALLET_FULL_NODASH_RE = re.compile(r"140[0-9]{9}7315")
# 14000-123-456-7890
WALLET_GROUPED_RE = re.compile(r"14000-[0-9]{3}-[0-9]{3}-[0-9]{4}")
WALLET_BARE_RE = re.compile(r"14000[0-9]{10}")

# "150.50 บาท", "150THB", "99 thb"
AMOUNT_RE = re.compile(r"([0-9]+(?:\.[0-9]{1,2})?)\s*(บาท|THB)", re.I)

_NEWLINE_RE = re.compile(r"\r?\n")
_SEPARATORS_RE = re.compile(r"[\s-]")


# ----------------------------
# Identifier evidence
# ----------------------------

def _regex_check(rx: re.Pattern) -> Callable[[str, RecipientIdentifier], bool]:
    def check(text: str, expected: RecipientIdentifier) -> bool:
        return rx.search(text) is not None
    return check


def _contains_expected(text: str, expected: RecipientIdentifier) -> bool:
    if not expected.value:
        return False
    return expected.value in _SEPARATORS_RE.sub("", text)


# Evaluated in order, first hit wins. The wallet shapes accept ANY G-Wallet
# printed on the slip, not only the expected one; only "expected_digits"
# compares against the caller's identifier.
IDENTIFIER_CHECKS: List[Tuple[str, Callable[[str, RecipientIdentifier], bool]]] = [
    ("wallet_masked", _regex_check(WALLET_MASKED_RE)),
    ("wallet_full", _regex_check(WALLET_FULL_RE)),
    ("wallet_full_nodash", _regex_check(WALLET_FULL_NODASH_RE)),
    ("wallet_grouped", _regex_check(WALLET_GROUPED_RE)),
    ("wallet_bare", _regex_check(WALLET_BARE_RE)),
    ("expected_digits", _contains_expected),
]


def match_identifier_evidence(text: str, expected: RecipientIdentifier) -> Optional[str]:
    """Name of the first identifier check that fires on `text`, or None."""
    text = text or ""
    for name, check in IDENTIFIER_CHECKS:
        if check(text, expected):
            return name
    return None


def extract_identifier_evidence(text: str, expected: RecipientIdentifier) -> bool:
    return match_identifier_evidence(text, expected) is not None


# ----------------------------
# Amount evidence
# ----------------------------

def extract_amount_evidence(text: str) -> Optional[Decimal]:
    """
    First "<number> บาท|THB" in the slip text.

    The whole text is searched first; if that misses, each line is tried on
    its own and the first line with a match wins.
    """
    text = text or ""
    m = AMOUNT_RE.search(text)
    if not m:
        for line in _NEWLINE_RE.split(text):
            m = AMOUNT_RE.search(line)
            if m:
                break
    if not m:
        return None
    return Decimal(m.group(1))
