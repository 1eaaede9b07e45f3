import os
from io import BytesIO
from typing import Dict

import pytest
from fastapi.testclient import TestClient
from PIL import Image
from reportlab.pdfgen import canvas
from sqlmodel import SQLModel, Session, create_engine

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

from app.main import app  # noqa: E402
from app import db as db_module  # noqa: E402
from app.db import get_session  # noqa: E402
from app import storage as storage_module  # noqa: E402
from app import service as service_module  # noqa: E402
from app.routers import pdfs as pdfs_router  # noqa: E402
from app.schemas import PdfField  # noqa: E402

A4 = (595.28, 841.89)


def make_pdf(*page_sizes) -> bytes:
    buf = BytesIO()
    c = canvas.Canvas(buf, pagesize=page_sizes[0] if page_sizes else A4)
    for size in page_sizes or (A4,):
        c.setPageSize(size)
        c.setFont("Helvetica", 12)
        c.drawString(50, 50, "Signature: ______________")
        c.showPage()
    c.save()
    return buf.getvalue()


def make_image(width=300, height=100, fmt="PNG") -> bytes:
    mode = "RGBA" if fmt == "PNG" else "RGB"
    img = Image.new(mode, (width, height), (20, 20, 120, 255) if mode == "RGBA" else (20, 20, 120))
    buf = BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()


def make_field(field_id="f1", page_index=0, type="signature", x=0.1, y=0.8, w=0.3, h=0.08, pdf_id="doc"):
    return PdfField(
        id=field_id, pdfId=pdf_id, pageIndex=page_index, type=type,
        xPct=x, yPct=y, wPct=w, hPct=h,
    )


@pytest.fixture(scope="session")
def test_engine(tmp_path_factory):
    db_path = tmp_path_factory.mktemp("data") / "test.db"
    engine = create_engine(
        f"sqlite:///{db_path}",
        connect_args={"check_same_thread": False},
    )
    return engine


@pytest.fixture
def setup_db(test_engine):
    SQLModel.metadata.drop_all(test_engine)
    SQLModel.metadata.create_all(test_engine)
    yield
    SQLModel.metadata.drop_all(test_engine)


@pytest.fixture
def db_session(test_engine, setup_db):
    with Session(test_engine) as session:
        yield session


@pytest.fixture
def mock_storage(monkeypatch) -> Dict[str, bytes]:
    store: Dict[str, bytes] = {}

    def fake_put_bytes(key: str, data: bytes, content_type: str = "application/octet-stream"):
        store[key] = bytes(data)

    def fake_get_bytes(key: str) -> bytes:
        if key not in store:
            raise storage_module.ObjectNotFound(key)
        return store[key]

    for target in (storage_module, service_module, pdfs_router):
        if hasattr(target, "put_bytes"):
            monkeypatch.setattr(target, "put_bytes", fake_put_bytes)
        if hasattr(target, "get_bytes"):
            monkeypatch.setattr(target, "get_bytes", fake_get_bytes)
    return store


@pytest.fixture
def client(test_engine, setup_db, mock_storage, monkeypatch):
    monkeypatch.setattr(db_module, "engine", test_engine)

    def override_session():
        with Session(test_engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_session
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
