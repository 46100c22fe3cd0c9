# slipcheck/routes.py

import os
import uuid

from flask import request, jsonify, current_app
from werkzeug.utils import secure_filename
from PIL import Image, ImageEnhance, ImageFilter
import pytesseract

from . import payments_bp
from .identifier import classify, parse_amount
from .logging_config import get_logger
from .models import (
    MSG_INVALID_IDENTIFIER,
    ExtractionFailure,
    RenderFailure,
    ValidationError,
)
from .ocr import extract_amount_evidence, match_identifier_evidence
from .payload import encode, render_data_url
from .verdict import compose

logger = get_logger(__name__)

# Image-only uploads
ALLOWED = {".png", ".jpg", ".jpeg"}
ALLOWED_MIMETYPES = {"image/png", "image/jpeg", "image/jpg"}

MSG_NO_FILE = "please select a slip file."
MSG_BAD_FILE_TYPE = "slip must be an image (jpg, jpeg, png)."


# ---------- OCR helpers ----------

def _preprocess_for_ocr(img: Image.Image) -> Image.Image:
    g = img.convert("L")
    g = ImageEnhance.Contrast(g).enhance(1.6)
    g = g.filter(ImageFilter.SHARPEN)
    return g


def _ocr_image(img: Image.Image, lang: str, cfg: str = "--oem 3 --psm 6", timeout=0) -> str:
    try:
        return pytesseract.image_to_string(img, lang=lang, config=cfg, timeout=timeout)
    except (pytesseract.TesseractError, RuntimeError, OSError) as e:
        raise ExtractionFailure(str(e)) from e


def read_slip(image_path) -> str:
    """Run tesseract over a stored slip image and return the flattened text."""
    lang = current_app.config["OCR_LANG"]
    timeout = current_app.config["OCR_TIMEOUT"]
    try:
        with Image.open(image_path) as raw:
            img = raw.convert("RGB")
    except (OSError, Image.DecompressionBombError) as e:
        raise ExtractionFailure(f"cannot open image: {e}") from e

    text = _ocr_image(_preprocess_for_ocr(img), lang, "--oem 3 --psm 6", timeout)
    if not text or len(text.strip()) < 8:
        alt = _ocr_image(img, lang, "--oem 3 --psm 4", timeout)
        if len(alt.strip()) > len((text or "").strip()):
            text = alt
    return text or ""


def _log_ocr_result(fname: str, text: str, expected: str, matched, amount):
    head = (text or "").strip().replace("\r", " ").replace("\n", " ")[:220]
    logger.info(
        "[OCR] %s :: expected=%s  matched=%s  amount=%s", fname, expected, matched, amount
    )
    logger.debug("[OCR TEXT HEAD] %s", head)


def _remove_upload(path: str):
    try:
        os.remove(path)
    except OSError as e:
        logger.error("Error deleting upload %s: %s", path, e)


def _request_data():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = request.form
    return data


def _is_debug() -> bool:
    flags = [request.form.get("debug"), request.args.get("debug")]
    if all(flag is None for flag in flags):
        return bool(current_app.config.get("SLIP_DEBUG"))
    return "true" in flags


def _allowed_upload(f) -> bool:
    ext = os.path.splitext(f.filename)[1].lower()
    return ext in ALLOWED and (f.mimetype or "").lower() in ALLOWED_MIMETYPES


# ---------- Routes ----------

@payments_bp.route("/generateQR", methods=["POST"])
def generate_qr():
    data = _request_data()
    logger.info(
        "Received /generateQR request: gWalletId=%r amount=%r",
        data.get("gWalletId"), data.get("amount"),
    )

    try:
        amount = parse_amount(data.get("amount"))
    except ValidationError as e:
        logger.info("Invalid amount: %r", data.get("amount"))
        return jsonify(RespCode=400, RespMessage=str(e)), 400

    identifier = classify(data.get("gWalletId"))
    if not identifier.is_valid:
        logger.info("Invalid gWalletId: %r", identifier.value)
        return jsonify(RespCode=400, RespMessage=MSG_INVALID_IDENTIFIER), 400

    try:
        payload = encode(identifier, amount)
    except Exception as e:
        logger.exception("Payload generation error")
        return jsonify(RespCode=500, RespMessage=f"error processing request: {e}"), 500

    try:
        url = render_data_url(
            payload,
            dark=current_app.config["QR_DARK_COLOR"],
            light=current_app.config["QR_LIGHT_COLOR"],
        )
    except RenderFailure as e:
        return jsonify(RespCode=500, RespMessage=f"error generating QR code: {e}"), 500

    return jsonify(RespCode=200, RespMessage="success", Result=url)


@payments_bp.route("/upload-slip", methods=["POST"])
def upload_slip():
    debug = _is_debug()
    f = request.files.get("slip")
    logger.info("Received /upload-slip request: file=%s", f.filename if f else None)

    if not f or not f.filename:
        return jsonify(status="fail", message=MSG_NO_FILE), 400
    if not _allowed_upload(f):
        return jsonify(status="fail", message=MSG_BAD_FILE_TYPE), 400

    expected = classify(request.form.get("gWalletId"))
    if not expected.is_valid:
        logger.info("Invalid gWalletId for slip: %r", expected.value)
        return jsonify(status="fail", message=MSG_INVALID_IDENTIFIER), 400

    upload_dir = current_app.config["UPLOAD_FOLDER"]
    os.makedirs(upload_dir, exist_ok=True)
    ext = os.path.splitext(secure_filename(f.filename) or f.filename)[1].lower()
    save_path = os.path.join(upload_dir, f"{uuid.uuid4().hex}{ext}")
    f.save(save_path)

    try:
        text = read_slip(save_path)
    except ExtractionFailure as e:
        logger.error("OCR error on %s: %s", f.filename, e)
        return jsonify(status="fail", message=f"error reading slip: {e}"), 500
    finally:
        _remove_upload(save_path)

    matched = match_identifier_evidence(text, expected)
    amount = extract_amount_evidence(text)
    _log_ocr_result(f.filename, text, expected.value, matched, amount)

    details = None
    if debug:
        details = {
            "ocr": text,
            "identifier_found": matched is not None,
            "matched_pattern": matched,
            "amount": float(amount) if amount is not None else None,
        }

    verdict = compose(matched is not None, amount, expected.value, debug=details)
    return jsonify(verdict.to_response())
