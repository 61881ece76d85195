from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from functools import lru_cache
from typing import Any, TypeVar

from fastapi import status
from fastapi.encoders import jsonable_encoder
from pydantic import AliasChoices, BaseModel, RootModel, TypeAdapter, ValidationError
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from httptoolkit.core.errors import (
    JSONBodyError,
    JSONBodyTooLargeError,
    JSONEmptyBodyError,
    JSONMissingFieldError,
    JSONMultipleValuesError,
    JSONSyntaxError,
    JSONTypeError,
    JSONUnknownFieldError,
)
from httptoolkit.schemas.envelope import ResponseEnvelope

log = logging.getLogger(__name__)

MEGABYTE = 1024 * 1024

T = TypeVar("T")

_decoder = json.JSONDecoder()
_WHITESPACE = " \t\n\r"


@lru_cache(maxsize=128)
def _adapter(destination: Any) -> TypeAdapter:
    return TypeAdapter(destination)


async def read_body(request: Request, max_bytes: int) -> bytes:
    declared = request.headers.get("content-length", "")
    if declared.isdigit() and int(declared) > max_bytes:
        raise JSONBodyTooLargeError(max_bytes)

    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > max_bytes:
            raise JSONBodyTooLargeError(max_bytes)
    return bytes(body)


def _skip_whitespace(text: str, index: int) -> int:
    while index < len(text) and text[index] in _WHITESPACE:
        index += 1
    return index


def _field_name(loc: tuple[Any, ...]) -> str:
    return ".".join(str(part) for part in loc)


@lru_cache(maxsize=128)
def _field_keys(model: type[BaseModel]) -> dict[str, str]:
    """Map every JSON key a model accepts (names and aliases) to its field name."""
    keys: dict[str, str] = {}
    for name, info in model.model_fields.items():
        keys[name] = name
        for alias in (info.alias, info.validation_alias):
            if isinstance(alias, str):
                keys[alias] = name
            elif isinstance(alias, AliasChoices):
                keys.update((choice, name) for choice in alias.choices if isinstance(choice, str))
    return keys


def _find_unknown_field(raw: Any, value: Any, path: tuple[str, ...] = ()) -> str | None:
    """Walk decoded JSON next to its validated value; return the path of the first unknown key."""
    if isinstance(value, RootModel):
        return _find_unknown_field(raw, value.root, path)
    if isinstance(value, BaseModel):
        if not isinstance(raw, dict):
            return None
        keys = _field_keys(type(value))
        for key, item in raw.items():
            name = keys.get(key)
            if name is None:
                return _field_name((*path, key))
            found = _find_unknown_field(item, getattr(value, name), (*path, key))
            if found:
                return found
        return None

    if isinstance(value, (list, tuple)) and isinstance(raw, list):
        pairs = zip((str(index) for index in range(len(raw))), raw, value)
    elif isinstance(value, dict) and isinstance(raw, dict):
        # pydantic keeps input order, so validated values line up with the raw keys
        pairs = zip(raw.keys(), raw.values(), value.values())
    else:
        return None
    for key, raw_item, item in pairs:
        found = _find_unknown_field(raw_item, item, (*path, key))
        if found:
            return found
    return None


def _translate_validation_error(exc: ValidationError, end: int) -> JSONBodyError:
    first = exc.errors()[0]
    kind = first["type"]
    field = _field_name(first["loc"])

    if kind == "extra_forbidden":
        return JSONUnknownFieldError(field)
    if kind == "missing":
        return JSONMissingFieldError(field)
    if field:
        return JSONTypeError(f'body contains incorrect JSON type for field "{field}"', field=field)
    if kind.endswith("_type") or kind.endswith("_parsing"):
        return JSONTypeError(f"body contains incorrect JSON type (at character {end})", offset=end)
    return JSONBodyError(f"error unmarshalling JSON: {first['msg']}")


def decode_json(
    body: bytes,
    destination: type[T],
    *,
    allow_unknown_fields: bool = False,
) -> T:
    """Decode exactly one JSON value from ``body`` and validate it against ``destination``."""
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise JSONBodyError(f"error unmarshalling JSON: {exc}") from exc

    start = _skip_whitespace(text, 0)
    if start == len(text):
        raise JSONEmptyBodyError("body must not be empty")

    try:
        value, end = _decoder.raw_decode(text, start)
    except json.JSONDecodeError as exc:
        # input that ends early, including inside a string, carries no offset
        if exc.msg.startswith("Unterminated string") or _skip_whitespace(text, exc.pos) >= len(text):
            raise JSONSyntaxError("body contains badly-formed JSON") from exc
        offset = exc.pos + 1
        raise JSONSyntaxError(
            f"body contains badly-formed JSON (at character {offset})", offset=offset
        ) from exc

    try:
        if isinstance(destination, type) and issubclass(destination, BaseModel):
            result = destination.model_validate(value)
        else:
            result = _adapter(destination).validate_python(value)
    except ValidationError as exc:
        raise _translate_validation_error(exc, end) from exc

    if not allow_unknown_fields:
        unknown = _find_unknown_field(value, result)
        if unknown:
            raise JSONUnknownFieldError(unknown)

    if _skip_whitespace(text, end) != len(text):
        raise JSONMultipleValuesError("body must contain only one JSON value")
    return result


async def read_json(
    request: Request,
    destination: type[T],
    *,
    max_json_size: int = 0,
    allow_unknown_fields: bool = False,
) -> T:
    max_bytes = max_json_size or MEGABYTE
    body = await read_body(request, max_bytes)
    try:
        return decode_json(body, destination, allow_unknown_fields=allow_unknown_fields)
    except JSONBodyError as exc:
        log.warning("Rejected JSON body for %s: %s", request.url.path, exc)
        raise


def write_json(
    status_code: int,
    data: Any,
    headers: Mapping[str, str] | None = None,
) -> Response:
    """Serialize ``data`` into a JSON response; ``Content-Type`` always wins over caller headers."""
    content = jsonable_encoder(data, by_alias=True)
    merged = {key: value for key, value in (headers or {}).items() if key.lower() != "content-type"}
    return JSONResponse(content=content, status_code=status_code, headers=merged, media_type="application/json")


def error_json(error: BaseException | str, status_code: int = status.HTTP_400_BAD_REQUEST) -> Response:
    envelope = ResponseEnvelope(error=True, message=str(error))
    return write_json(status_code, envelope.to_payload())
