from __future__ import annotations

import json
import logging
from typing import Any

import httpx
from fastapi.encoders import jsonable_encoder

from httptoolkit.core.errors import RemoteEncodeError, RemoteRequestError, RemoteTransportError

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 15.0


def encode_json(data: Any) -> bytes:
    try:
        return json.dumps(jsonable_encoder(data, by_alias=True), allow_nan=False).encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise RemoteEncodeError(f"unable to encode JSON payload: {exc}") from exc


async def post_json_to_remote(
    url: str | httpx.URL,
    data: Any,
    client: httpx.AsyncClient | None = None,
    *,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> tuple[httpx.Response, int]:
    """POST ``data`` as JSON to ``url`` and return the response with its status code.

    A non-2xx status is returned rather than raised. When ``client`` is omitted a
    short-lived client is used and closed before returning, so the response body
    has already been read.
    """
    body = encode_json(data)

    owns_client = client is None
    http_client = client or httpx.AsyncClient(timeout=timeout)
    try:
        try:
            request = http_client.build_request(
                "POST",
                url,
                content=body,
                headers={"Content-Type": "application/json"},
            )
        except (httpx.InvalidURL, httpx.UnsupportedProtocol, TypeError, ValueError) as exc:
            raise RemoteRequestError(f"unable to build request for {url}: {exc}") from exc

        try:
            response = await http_client.send(request)
        except httpx.UnsupportedProtocol as exc:
            raise RemoteRequestError(f"unable to build request for {url}: {exc}") from exc
        except httpx.TransportError as exc:
            log.warning("POST %s failed: %s", url, exc)
            raise RemoteTransportError(f"request to {url} failed: {exc}") from exc
    finally:
        if owns_client:
            await http_client.aclose()

    log.info("POST %s -> %s", url, response.status_code)
    return response, response.status_code
