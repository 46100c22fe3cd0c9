import os
from pathlib import Path

from flask import Flask, jsonify
from dotenv import load_dotenv

import pytesseract

from slipcheck import payments_bp
from slipcheck.logging_config import get_logger, setup_logging

load_dotenv()

logger = get_logger(__name__)

# --- Config helpers ---
BASE_DIR = Path(__file__).resolve().parent
INSTANCE_DIR = BASE_DIR / "instance"
UPLOAD_DIR = INSTANCE_DIR / "uploads"
MAX_UPLOAD_BYTES = 2 * 1024 * 1024  # 2MB


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_number(name: str, default, cast=int):
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw)
    except ValueError:
        logger.warning("Ignoring bad %s=%r, using %r", name, raw, default)
        return default


def create_app(overrides=None):
    app = Flask(__name__, instance_relative_config=True)

    app.config["MAX_CONTENT_LENGTH"] = _env_number("MAX_CONTENT_LENGTH", MAX_UPLOAD_BYTES)
    app.config["OCR_LANG"] = os.getenv("OCR_LANG", "tha+eng")
    app.config["OCR_TIMEOUT"] = _env_number("OCR_TIMEOUT", 0, float)
    app.config["QR_DARK_COLOR"] = os.getenv("QR_DARK_COLOR", "#000")
    app.config["QR_LIGHT_COLOR"] = os.getenv("QR_LIGHT_COLOR", "#fff")
    app.config["SLIP_DEBUG"] = _env_flag("SLIP_DEBUG")
    app.config["LOG_LEVEL"] = os.getenv("LOG_LEVEL", "INFO")
    app.config["LOG_JSON"] = _env_flag("LOG_JSON")

    upload_folder = os.getenv("UPLOAD_FOLDER", str(UPLOAD_DIR))
    uf_path = Path(upload_folder)
    if not uf_path.is_absolute():
        uf_path = (BASE_DIR / uf_path).resolve()
    app.config["UPLOAD_FOLDER"] = str(uf_path)

    if overrides:
        app.config.update(overrides)

    setup_logging(app.config["LOG_LEVEL"], json_format=app.config["LOG_JSON"])

    Path(app.config["UPLOAD_FOLDER"]).mkdir(parents=True, exist_ok=True)

    # Optional tesseract path
    tcmd = os.getenv("TESSERACT_CMD")
    if tcmd:
        pytesseract.pytesseract.tesseract_cmd = tcmd

    app.register_blueprint(payments_bp)

    @app.after_request
    def allow_any_origin(response):
        response.headers["Access-Control-Allow-Origin"] = "*"
        response.headers["Access-Control-Allow-Headers"] = "Content-Type"
        response.headers["Access-Control-Allow-Methods"] = "GET, POST, OPTIONS"
        return response

    @app.errorhandler(413)
    def upload_too_large(e):
        limit_mb = app.config["MAX_CONTENT_LENGTH"] / (1024 * 1024)
        return jsonify(status="fail", message=f"slip file must be at most {limit_mb:g}MB."), 413

    @app.route("/health")
    def health():
        return jsonify(status="OK", message="API ready")

    logger.info("Uploads stored temporarily under %s", app.config["UPLOAD_FOLDER"])
    return app
