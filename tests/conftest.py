import os
from contextlib import ExitStack

import pytest
from fastapi.testclient import TestClient
from starlette.requests import Request

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("SENTRY_DSN", "")

from httptoolkit.core.config import Settings
from httptoolkit.main import create_app

JPEG_BYTES = (
    b"\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00"
    + bytes(range(256)) * 8
    + b"\xff\xd9"
)
PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01\x08\x02\x00\x00\x00" + bytes(64)


@pytest.fixture()
def jpeg_bytes() -> bytes:
    return JPEG_BYTES


@pytest.fixture()
def png_bytes() -> bytes:
    return PNG_BYTES


@pytest.fixture()
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture()
def make_client(tmp_path, upload_dir):
    stack = ExitStack()

    def factory(**overrides) -> TestClient:
        values = {
            "upload_dir": str(upload_dir),
            "static_dir": str(tmp_path / "static"),
            "sentry_dsn": "",
        }
        values.update(overrides)
        return stack.enter_context(TestClient(create_app(Settings(**values))))

    with stack:
        yield factory


@pytest.fixture()
def client(make_client):
    return make_client()


@pytest.fixture()
def make_request():
    def factory(body: bytes, content_type: str = "application/json", path: str = "/") -> Request:
        chunks = [body]

        async def receive():
            chunk = chunks.pop(0) if chunks else b""
            return {"type": "http.request", "body": chunk, "more_body": False}

        scope = {
            "type": "http",
            "method": "POST",
            "path": path,
            "query_string": b"",
            "headers": [(b"content-type", content_type.encode("latin-1"))],
        }
        return Request(scope, receive)

    return factory
