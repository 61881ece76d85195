import os
import stat

import pytest

from httptoolkit.core.errors import StaticFileNotFoundError
from httptoolkit.services.storage_service import create_directory_if_not_exist, resolve_static_path


def test_create_directory_if_not_exist_creates_parents(tmp_path):
    target = tmp_path / "a" / "b" / "c"

    create_directory_if_not_exist(target)
    create_directory_if_not_exist(target)

    assert target.is_dir()


@pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
def test_create_directory_if_not_exist_uses_0755(tmp_path):
    target = tmp_path / "perm"
    old_umask = os.umask(0)
    try:
        create_directory_if_not_exist(target)
    finally:
        os.umask(old_umask)
    assert stat.S_IMODE(target.stat().st_mode) == 0o755


def test_resolve_static_path_rejects_traversal(tmp_path):
    (tmp_path / "secret.txt").write_text("hidden")
    public = tmp_path / "public"
    public.mkdir()

    with pytest.raises(StaticFileNotFoundError):
        resolve_static_path(public, "../secret.txt")


def test_resolve_static_path_rejects_missing_file(tmp_path):
    with pytest.raises(StaticFileNotFoundError):
        resolve_static_path(tmp_path, "nope.jpg")


def test_download_static_file_headers(client, upload_dir, jpeg_bytes):
    upload_dir.mkdir(parents=True, exist_ok=True)
    (upload_dir / "test_image.jpg").write_bytes(jpeg_bytes)

    resp = client.get("/v1/files/test_image.jpg/download", params={"displayName": "camping.jpg"})

    assert resp.status_code == 200
    assert resp.headers["content-disposition"] == 'attachment; filename="camping.jpg"'
    assert resp.headers["content-length"] == str(len(jpeg_bytes))
    assert resp.headers["content-type"] == "image/jpeg"
    assert resp.content == jpeg_bytes


def test_download_static_file_defaults_display_name(client, upload_dir):
    upload_dir.mkdir(parents=True, exist_ok=True)
    (upload_dir / "notes.txt").write_text("hello")

    resp = client.get("/v1/files/notes.txt/download")

    assert resp.status_code == 200
    assert resp.headers["content-disposition"] == 'attachment; filename="notes.txt"'


def test_download_missing_file_returns_error_envelope(client):
    resp = client.get("/v1/files/missing.jpg/download")

    assert resp.status_code == 404
    assert resp.json() == {"error": True, "message": "file not found"}
