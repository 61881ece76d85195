"""Configured entry point to the toolkit helpers.

``Tools`` only holds configuration. Zero limits and an empty allow-list mean
"use the default" and are resolved per call, never written back.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, TypeVar

import httpx
from fastapi import status
from starlette.requests import Request
from starlette.responses import FileResponse, Response

from httptoolkit.core.config import Settings
from httptoolkit.core.lifecycle import FAREWELL_MESSAGE, CloseListener, close_listener
from httptoolkit.schemas.files import UploadedFile
from httptoolkit.services import json_service, remote_service, storage_service, text_service, upload_service

T = TypeVar("T")


@dataclass(slots=True)
class Tools:
    max_json_size: int = 0
    allow_unknown_fields: bool = False
    max_file_size: int = 0
    allowed_file_types: list[str] = field(default_factory=list)
    remote_timeout_seconds: float = remote_service.DEFAULT_TIMEOUT_SECONDS

    @classmethod
    def from_settings(cls, settings: Settings) -> Tools:
        return cls(
            max_json_size=settings.max_json_size,
            allow_unknown_fields=settings.allow_unknown_fields,
            max_file_size=settings.max_file_size,
            allowed_file_types=settings.allowed_file_type_list,
            remote_timeout_seconds=settings.remote_timeout_seconds,
        )

    # -- text & storage ------------------------------------------------------

    def random_string(self, length: int) -> str:
        return text_service.random_string(length)

    def create_slug(self, text: str) -> str:
        return text_service.create_slug(text)

    def create_directory_if_not_exist(self, path: str | os.PathLike[str]) -> None:
        storage_service.create_directory_if_not_exist(path)

    def download_static_file(
        self,
        directory: str | os.PathLike[str],
        file: str,
        display_name: str,
    ) -> FileResponse:
        return storage_service.download_static_file(directory, file, display_name)

    # -- uploads -------------------------------------------------------------

    async def upload_files(
        self,
        request: Request,
        upload_directory: str | os.PathLike[str],
        rename: bool = True,
    ) -> list[UploadedFile]:
        return await upload_service.upload_files(
            request,
            upload_directory,
            rename,
            max_file_size=self.max_file_size,
            allowed_file_types=self.allowed_file_types,
        )

    async def upload_one_file(
        self,
        request: Request,
        upload_directory: str | os.PathLike[str],
        rename: bool = True,
    ) -> UploadedFile:
        return await upload_service.upload_one_file(
            request,
            upload_directory,
            rename,
            max_file_size=self.max_file_size,
            allowed_file_types=self.allowed_file_types,
        )

    # -- json ----------------------------------------------------------------

    async def read_json(self, request: Request, destination: type[T]) -> T:
        return await json_service.read_json(
            request,
            destination,
            max_json_size=self.max_json_size,
            allow_unknown_fields=self.allow_unknown_fields,
        )

    def write_json(
        self,
        status_code: int,
        data: Any,
        headers: Mapping[str, str] | None = None,
    ) -> Response:
        return json_service.write_json(status_code, data, headers)

    def error_json(
        self,
        error: BaseException | str,
        status_code: int = status.HTTP_400_BAD_REQUEST,
    ) -> Response:
        return json_service.error_json(error, status_code)

    # -- remote & process ----------------------------------------------------

    async def post_json_to_remote(
        self,
        url: str | httpx.URL,
        data: Any,
        client: httpx.AsyncClient | None = None,
    ) -> tuple[httpx.Response, int]:
        return await remote_service.post_json_to_remote(
            url, data, client, timeout=self.remote_timeout_seconds
        )

    def close_listener(
        self,
        on_shutdown: Callable[[], Any] | None = None,
        message: str = FAREWELL_MESSAGE,
    ) -> CloseListener:
        return close_listener(on_shutdown, message)
