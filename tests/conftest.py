from io import BytesIO

import pytest
from PIL import Image

from app import create_app


@pytest.fixture
def app(tmp_path):
    upload_dir = tmp_path / "uploads"
    return create_app({
        "TESTING": True,
        "UPLOAD_FOLDER": str(upload_dir),
        "SLIP_DEBUG": False,
        "OCR_TIMEOUT": 0,
    })


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def slip_png():
    """A tiny but real PNG so PIL can open it."""
    buf = BytesIO()
    Image.new("RGB", (40, 20), "white").save(buf, format="PNG")
    return buf.getvalue()
