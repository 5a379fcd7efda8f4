import io
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from trashtrack.config import settings
from trashtrack.main import app
from trashtrack.report_store import ReportStore
from trashtrack.services import gemini
from trashtrack.utils.audit import clear_audit_log


@pytest.fixture
def fixed_now():
    return datetime(2025, 3, 14, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def store(fixed_now):
    return ReportStore(token_prefix="TT", token_region="IND", clock=lambda: fixed_now)


@pytest.fixture
def draft():
    return {
        "title": "Plastic dump",
        "description": "Bags of plastic behind the bus stop",
        "category": "plastic",
        "severity": 3,
        "location": {"latitude": 28.61, "longitude": 77.20, "city": "Delhi"},
        "image_url": "https://cdn.example.org/before.jpg",
    }


@pytest.fixture
def jpeg_bytes():
    buf = io.BytesIO()
    Image.new("RGB", (64, 48), (120, 200, 80)).save(buf, format="JPEG")
    return buf.getvalue()


@pytest.fixture
def no_classifier(monkeypatch):
    monkeypatch.setattr(gemini, "_get_client", lambda: None)


@pytest.fixture
def client(tmp_path, monkeypatch, no_classifier):
    monkeypatch.setattr(settings, "upload_dir", str(tmp_path / "uploads"))
    monkeypatch.setattr(app.state, "report_store", ReportStore())
    clear_audit_log()
    with TestClient(app) as c:
        yield c
