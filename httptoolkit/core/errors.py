"""Exception types raised by the toolkit.

Service code stays HTTP-agnostic: every error carries a human-readable
``message`` and the ``status_code`` the reference app uses when it turns the
error into a JSON envelope.
"""

from __future__ import annotations

from fastapi import status


class ToolkitError(Exception):
    """Base class for all toolkit failures."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def __str__(self) -> str:
        return self.message


class SlugError(ToolkitError):
    """Raised when a slug cannot be built from the given text."""


class StaticFileNotFoundError(ToolkitError):
    status_code = status.HTTP_404_NOT_FOUND


# -- uploads -----------------------------------------------------------------


class UploadError(ToolkitError):
    """Raised for any failure while ingesting a multipart upload."""


class FileTooLargeError(UploadError):
    status_code = status.HTTP_413_REQUEST_ENTITY_TOO_LARGE


class MultipartParseError(UploadError):
    pass


class FileTypeNotPermittedError(UploadError):
    status_code = status.HTTP_415_UNSUPPORTED_MEDIA_TYPE

    def __init__(self, message: str, *, detected_type: str, file_name: str) -> None:
        super().__init__(message)
        self.detected_type = detected_type
        self.file_name = file_name


class NoFileProvidedError(UploadError):
    pass


# -- json --------------------------------------------------------------------


class JSONBodyError(ToolkitError):
    """Raised when a request body cannot be decoded into its destination."""


class JSONBodyTooLargeError(JSONBodyError):
    status_code = status.HTTP_413_REQUEST_ENTITY_TOO_LARGE

    def __init__(self, max_bytes: int) -> None:
        super().__init__(f"body must not be larger than {max_bytes} bytes")
        self.max_bytes = max_bytes


class JSONEmptyBodyError(JSONBodyError):
    pass


class JSONSyntaxError(JSONBodyError):
    def __init__(self, message: str, *, offset: int | None = None) -> None:
        super().__init__(message)
        self.offset = offset


class JSONTypeError(JSONBodyError):
    def __init__(self, message: str, *, field: str | None = None, offset: int | None = None) -> None:
        super().__init__(message)
        self.field = field
        self.offset = offset


class JSONUnknownFieldError(JSONBodyError):
    def __init__(self, field: str) -> None:
        super().__init__(f'body contains unknown key "{field}"')
        self.field = field


class JSONMissingFieldError(JSONBodyError):
    def __init__(self, field: str) -> None:
        super().__init__(f'body is missing required field "{field}"')
        self.field = field


class JSONMultipleValuesError(JSONBodyError):
    pass


# -- remote ------------------------------------------------------------------


class RemoteError(ToolkitError):
    status_code = status.HTTP_502_BAD_GATEWAY


class RemoteEncodeError(RemoteError):
    status_code = status.HTTP_400_BAD_REQUEST


class RemoteRequestError(RemoteError):
    pass


class RemoteTransportError(RemoteError):
    pass
