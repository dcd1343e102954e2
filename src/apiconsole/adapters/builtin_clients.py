"""Built-in services available in every session.

`Utility` and `Authentication` work on the shared HTTP client (default
headers, authorization) and on values captured in variables (base64, JSON
selection). They follow the same call contract as catalog clients: the
constructor takes the shared client, every public coroutine is a verb and
returns a `Response`.
"""

from __future__ import annotations

import base64
import binascii
import json
import re
from typing import Any

import httpx

from apiconsole.core.domain.models import FilePayload, Response

_PATH_TOKEN = re.compile(r"\[(-?\d+)\]|\['([^']*)'\]|\.?([^.\[\]]+)")

AUTHORIZATION_HEADER = "Authorization"


def _text_response(text: str, *, status_code: int = 200, media_type: str = "text/plain") -> Response:
    return Response(
        status_code=status_code,
        headers={"Content-Type": [f"{media_type}; charset=utf-8"]},
        body=text.encode("utf-8"),
    )


def select_path(document: Any, path: str) -> Any:
    """Select `data.items[0]['id']`-style paths (optional leading `$`)."""

    path = path.strip()
    if path.startswith("$"):
        path = path[1:]

    node = document
    position = 0
    while position < len(path):
        match = _PATH_TOKEN.match(path, position)
        if match is None:
            raise ValueError(f"Invalid path near '{path[position:]}'")
        index, quoted, key = match.groups()
        if index is not None:
            if not isinstance(node, list):
                raise ValueError(f"'[{index}]' applied to a non-array value")
            try:
                node = node[int(index)]
            except IndexError:
                raise ValueError(f"Index {index} is out of range") from None
        else:
            name = quoted if quoted is not None else key
            if not isinstance(node, dict) or name not in node:
                raise ValueError(f"Property '{name}' not found")
            node = node[name]
        position = match.end()
    return node


class UtilityClient:
    """Header management and value transformations."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def add_http_header(self, key: str, value: str) -> Response:
        self._client.headers[key] = value
        return Response(status_code=200)

    async def remove_http_header(self, key: str) -> Response:
        self._client.headers.pop(key, None)
        return Response(status_code=200)

    async def encode_base64(self, file: FilePayload) -> Response:
        return _text_response(base64.b64encode(file.data).decode("ascii"))

    async def decode_base64(self, encoded: str) -> Response:
        try:
            data = base64.b64decode(encoded, validate=True)
        except binascii.Error as exc:
            return _text_response(f"Invalid base64 input: {exc}", status_code=400)
        return Response(
            status_code=200,
            headers={"Content-Type": ["application/octet-stream"]},
            body=data,
        )

    async def json_select(self, json_text: str, path: str) -> Response:
        try:
            selected = select_path(json.loads(json_text), path)
        except ValueError as exc:
            return _text_response(f"json_select failed: {exc}", status_code=400)
        if isinstance(selected, str):
            return _text_response(selected)
        return _text_response(json.dumps(selected, indent=2), media_type="application/json")


class AuthenticationClient:
    """Authorization header of the shared client."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def use_token(self, scheme: str, token: str) -> Response:
        self._client.headers[AUTHORIZATION_HEADER] = f"{scheme} {token}"
        return Response(status_code=200)

    async def get_token(self) -> Response:
        value = self._client.headers.get(AUTHORIZATION_HEADER)
        if not value:
            return Response(status_code=200)
        scheme, _, parameter = value.partition(" ")
        payload = json.dumps({"scheme": scheme, "parameter": parameter})
        return _text_response(payload, media_type="application/json")

    async def reset(self) -> Response:
        self._client.headers.pop(AUTHORIZATION_HEADER, None)
        return Response(status_code=200)
