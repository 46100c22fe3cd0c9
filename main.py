import os
import shutil
import sys

from waitress import serve

from app import create_app
from slipcheck.logging_config import get_logger

logger = get_logger("slipcheck.server")


def _maybe_point_to_tesseract():
    """
    Point pytesseract at a usable binary:
    1. TESSERACT_CMD (already applied by create_app)
    2. Bundled copy (inside PyInstaller _MEIPASS)
    3. Whatever `tesseract` is on PATH
    """
    import pytesseract

    if os.getenv("TESSERACT_CMD"):
        return
    base = getattr(sys, "_MEIPASS", os.path.abspath("."))
    for name in ("tesseract", "tesseract.exe"):
        bundled = os.path.join(base, "tesseract", name)
        if os.path.exists(bundled):
            pytesseract.pytesseract.tesseract_cmd = bundled
            logger.info("Using bundled Tesseract at %s", bundled)
            return
    if shutil.which(pytesseract.pytesseract.tesseract_cmd) is None:
        logger.warning("Tesseract not found. Slip verification will fail until it is installed.")


def main():
    app = create_app()
    _maybe_point_to_tesseract()
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "3000"))
    logger.info("Server is running on port %s...", port)
    serve(app, host=host, port=port)


if __name__ == "__main__":
    main()
