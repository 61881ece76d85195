"""Multipart upload ingestion.

Uploads are handled all-or-nothing: every file part is type-checked before
anything is written, and files written earlier in the same call are removed
again if a later part cannot be stored.
"""

from __future__ import annotations

import logging
import os
import time
from collections.abc import AsyncGenerator, Iterable
from pathlib import Path
from typing import BinaryIO

import filetype
from starlette.datastructures import FormData, UploadFile
from starlette.formparsers import MultiPartException, MultiPartParser
from starlette.requests import Request

from httptoolkit.core.errors import (
    FileTooLargeError,
    FileTypeNotPermittedError,
    MultipartParseError,
    NoFileProvidedError,
    UploadError,
)
from httptoolkit.schemas.files import UploadedFile
from httptoolkit.services.storage_service import create_directory_if_not_exist
from httptoolkit.services.text_service import random_string

log = logging.getLogger(__name__)

GIGABYTE = 1024 * 1024 * 1024

SNIFF_LENGTH = 512
COPY_CHUNK_SIZE = 1_048_576  # 1 MiB
RENAME_TOKEN_LENGTH = 20

# Control bytes that mark content as binary when no signature matched.
_BINARY_BYTES = frozenset([*range(0x00, 0x09), 0x0B, *range(0x0E, 0x1B), *range(0x1C, 0x20)])


def detect_content_type(head: bytes) -> str:
    """Guess a MIME type from the leading bytes of a file."""
    if head:
        mime = filetype.guess_mime(head)
        if mime:
            return mime
    if any(byte in _BINARY_BYTES for byte in head):
        return "application/octet-stream"
    return "text/plain; charset=utf-8"


def is_allowed_type(content_type: str, allowed_file_types: Iterable[str]) -> bool:
    allowed = list(allowed_file_types)
    if not allowed:
        return True
    wanted = content_type.casefold()
    return any(wanted == item.casefold() for item in allowed)


def build_file_name(original_file_name: str, rename: bool) -> str:
    if not rename:
        return original_file_name
    _, ext = os.path.splitext(original_file_name)
    return f"{int(time.time())}_{random_string(RENAME_TOKEN_LENGTH)}{ext}"


class _BodyTooLarge(MultiPartException):
    # A MultiPartException so the parser closes its spooled files before re-raising.
    pass


async def _limited_stream(request: Request, max_bytes: int) -> AsyncGenerator[bytes, None]:
    received = 0
    async for chunk in request.stream():
        received += len(chunk)
        if received > max_bytes:
            log.warning("Upload body exceeded %d bytes", max_bytes)
            raise _BodyTooLarge("the uploaded file is too big")
        yield chunk


async def parse_multipart(request: Request, max_bytes: int) -> FormData:
    content_type = request.headers.get("content-type", "")
    if not content_type.lower().startswith("multipart/form-data"):
        raise UploadError("request content type must be multipart/form-data")

    declared = request.headers.get("content-length", "")
    if declared.isdigit() and int(declared) > max_bytes:
        log.warning("Upload declared %s bytes, limit is %d", declared, max_bytes)
        raise FileTooLargeError("the uploaded file is too big")

    parser = MultiPartParser(request.headers, _limited_stream(request, max_bytes))
    try:
        return await parser.parse()
    except _BodyTooLarge as exc:
        raise FileTooLargeError(exc.message) from exc
    except MultiPartException as exc:
        raise MultipartParseError(f"unable to parse multipart form: {exc.message}") from exc
    except ValueError as exc:
        # python-multipart reports malformed bodies as ValueError subclasses.
        raise MultipartParseError(f"unable to parse multipart form: {exc}") from exc


async def _check_file_type(part: UploadFile, allowed_file_types: list[str]) -> str:
    head = await part.read(SNIFF_LENGTH)
    await part.seek(0)

    content_type = detect_content_type(head)
    if not is_allowed_type(content_type, allowed_file_types):
        log.warning("Rejected upload %r with content type %s", part.filename, content_type)
        raise FileTypeNotPermittedError(
            "uploaded file type is not permitted",
            detected_type=content_type,
            file_name=part.filename or "",
        )
    return content_type


async def _copy_to(part: UploadFile, out: BinaryIO) -> int:
    size = 0
    while True:
        chunk = await part.read(COPY_CHUNK_SIZE)
        if not chunk:
            break
        out.write(chunk)
        size += len(chunk)
    return size


def _remove_files(paths: list[Path]) -> None:
    for path in paths:
        try:
            path.unlink(missing_ok=True)
        except OSError:
            log.exception("Failed to remove partially stored upload %s", path)


async def _store_all(parts: list[UploadFile], directory: Path, rename: bool) -> list[UploadedFile]:
    written: list[Path] = []
    uploaded: list[UploadedFile] = []
    try:
        for part in parts:
            original = part.filename or ""
            new_name = build_file_name(original, rename)
            target = directory / new_name
            with open(target, "wb") as out:
                written.append(target)
                size = await _copy_to(part, out)
            uploaded.append(
                UploadedFile(new_file_name=new_name, original_file_name=original, file_size=size)
            )
    except Exception:
        log.warning("Upload to %s failed, removing %d stored file(s)", directory, len(written))
        _remove_files(written)
        raise
    return uploaded


async def upload_files(
    request: Request,
    upload_directory: str | os.PathLike[str],
    rename: bool = True,
    *,
    max_file_size: int = 0,
    allowed_file_types: Iterable[str] = (),
) -> list[UploadedFile]:
    """Store every file part of a multipart request in ``upload_directory``.

    ``max_file_size`` caps the whole request body; zero means one gigabyte.
    An empty ``allowed_file_types`` accepts any detected content type.
    """
    max_bytes = max_file_size or GIGABYTE
    allowed = list(allowed_file_types)
    directory = Path(upload_directory)

    create_directory_if_not_exist(directory)
    form = await parse_multipart(request, max_bytes)
    try:
        parts = [value for _, value in form.multi_items() if isinstance(value, UploadFile)]
        for part in parts:
            await _check_file_type(part, allowed)
        uploaded = await _store_all(parts, directory, rename)
    finally:
        await form.close()

    log.info("Stored %d uploaded file(s) in %s", len(uploaded), directory)
    return uploaded


async def upload_one_file(
    request: Request,
    upload_directory: str | os.PathLike[str],
    rename: bool = True,
    *,
    max_file_size: int = 0,
    allowed_file_types: Iterable[str] = (),
) -> UploadedFile:
    uploaded = await upload_files(
        request,
        upload_directory,
        rename,
        max_file_size=max_file_size,
        allowed_file_types=allowed_file_types,
    )
    if not uploaded:
        raise NoFileProvidedError("no file provided")
    return uploaded[0]
