# slipcheck/payload.py

import base64
from decimal import Decimal
from io import BytesIO
from typing import Optional

import qrcode
from promptpay import qrcode as promptpay_qr

from .logging_config import get_logger
from .models import InvalidIdentifier, RecipientIdentifier, RenderFailure

logger = get_logger(__name__)

DEFAULT_DARK = "#000"
DEFAULT_LIGHT = "#fff"


def encode(identifier: RecipientIdentifier, amount: Optional[Decimal] = None) -> str:
    """
    Build the PromptPay payload string for a recipient.

    Amount 0 or None leaves the amount open so the payer types it in.
    """
    if not identifier.is_valid:
        raise InvalidIdentifier()
    if amount is not None and amount > 0:
        return promptpay_qr.generate_payload(identifier.value, float(amount))
    return promptpay_qr.generate_payload(identifier.value)


def render_data_url(payload: str, dark: str = DEFAULT_DARK, light: str = DEFAULT_LIGHT) -> str:
    """Render a payload as a PNG QR code and return it as a data: URI."""
    try:
        qr = qrcode.QRCode(error_correction=qrcode.constants.ERROR_CORRECT_M)
        qr.add_data(payload)
        qr.make(fit=True)
        img = qr.make_image(fill_color=dark, back_color=light)
        buf = BytesIO()
        img.save(buf)
    except Exception as e:
        logger.error("QR render failed for payload %r: %s", payload, e)
        raise RenderFailure(str(e)) from e
    return "data:image/png;base64," + base64.b64encode(buf.getvalue()).decode("ascii")
