from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Optional

# ----------------------------
# Caller-visible messages
# ----------------------------

MSG_INVALID_IDENTIFIER = (
    "recipient identifier invalid — must be a 10-digit phone number "
    "or a 15-digit wallet ID starting with 14000."
)
MSG_NEGATIVE_AMOUNT = "amount must be greater than or equal to 0."
MSG_AMOUNT_TOO_LARGE = "amount must be at most {limit}."
MSG_VERIFIED = "verification passed: found identifier and amount {amount:.2f}."
MSG_IDENTIFIER_NOT_FOUND = "identifier ({expected}) not found in slip."
MSG_AMOUNT_NOT_FOUND = "amount not found in slip."


# ----------------------------
# Errors
# ----------------------------

class ValidationError(ValueError):
    """Bad caller input. Always reported back as-is, never retried."""

    message = "invalid request"

    def __init__(self, message=None):
        super().__init__(message or self.message)


class InvalidIdentifier(ValidationError):
    message = MSG_INVALID_IDENTIFIER


class NegativeAmount(ValidationError):
    message = MSG_NEGATIVE_AMOUNT


class AmountTooLarge(ValidationError):
    message = "amount too large."


class ExtractionFailure(RuntimeError):
    """The OCR engine could not read the slip image."""


class RenderFailure(RuntimeError):
    """The QR image encoder failed."""


# ----------------------------
# Value types
# ----------------------------

class IdentifierKind(str, Enum):
    WALLET_LONG = "wallet"
    PHONE_SHORT = "phone"
    INVALID = "invalid"


@dataclass(frozen=True)
class RecipientIdentifier:
    value: str
    kind: IdentifierKind

    @property
    def is_valid(self) -> bool:
        return self.kind is not IdentifierKind.INVALID


class VerdictKind(str, Enum):
    SUCCESS = "success"
    NO_IDENTIFIER = "no_identifier"
    NO_AMOUNT = "no_amount"


@dataclass(frozen=True)
class Verdict:
    kind: VerdictKind
    message: str
    amount: Optional[Decimal] = None
    debug: Optional[dict] = field(default=None, compare=False)

    @property
    def passed(self) -> bool:
        return self.kind is VerdictKind.SUCCESS

    def to_response(self) -> dict:
        body = {
            "status": "success" if self.passed else "fail",
            "message": self.message,
        }
        if self.amount is not None and self.passed:
            body["amount"] = float(self.amount)
        if self.debug is not None:
            body["debug"] = self.debug
        return body
