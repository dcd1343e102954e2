"""Client classes used as an operation catalog in tests."""

from __future__ import annotations

import json
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field

from apiconsole.core.domain.models import ApiError, FilePayload, Response
from apiconsole.core.domain.types import Float32, Float64, Int32, Int64, UInt16


class ChangePassword(BaseModel):
    access_token: str | None = None
    current_password: str | None = None
    proposed_password: str | None = None


class Nested(BaseModel):
    change_password: ChangePassword | None = None


class Point(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: Int32
    y: Int32


class Order(BaseModel):
    name: str | None = None
    tags: list[str] = Field(default_factory=list)


def _jsonable(value: Any) -> Any:
    if isinstance(value, FilePayload):
        return {"file_name": value.file_name, "data": value.data.decode("utf-8")}
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    return value


def echo(*values: Any) -> Response:
    """JSON array of the received arguments."""

    body = json.dumps([_jsonable(v) for v in values]).encode("utf-8")
    return Response(status_code=200, headers={"Content-Type": ["application/json"]}, body=body)


class AccountsClient:
    received: tuple[Any, ...] = ()

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    def _record(self, *values: Any) -> Response:
        type(self).received = values
        return echo(*values)

    async def sign_up_async(self, email: str, password: str) -> Response:
        return self._record(email, password)

    async def change_password_async(self, change: ChangePassword) -> Response:
        return self._record(change)

    async def change_password_nested_async(self, nested: Nested) -> Response:
        return self._record(nested)

    async def move_async(self, point: Point) -> Response:
        return self._record(point)

    async def create_async(self, name: str, file: FilePayload) -> Response:
        return self._record(name, file)

    async def use_some_numbers_async(self, l: Int64, i: Int32, us: UInt16, d: Float64, f: Float32) -> Response:
        return self._record(l, i, us, d, f)

    async def search_async(self, query: str, limit: Int32 = 10, active: bool | None = None) -> Response:
        return self._record(query, limit, active)

    async def tags_async(self, tags: list[str]) -> Response:
        return self._record(tags)

    async def order_async(self, order: Order) -> Response:
        order.tags.append("x")
        return self._record(order)

    async def maybe_async(self, label: str, change: ChangePassword | None = None) -> Response:
        return self._record(label, change)

    async def fail_async(self, status: Int32) -> Response:
        raise ApiError(
            "Request failed",
            status_code=status,
            body='{"error": "boom"}',
            headers={"Content-Type": ["application/json"]},
        )

    async def crash_async(self) -> Response:
        raise RuntimeError("unexpected")

    async def get_profile_async(self, user_id: Int32) -> httpx.Response:
        response = await self._client.get(f"/users/{user_id}")
        response.raise_for_status()
        return response

    async def avatar_async(self) -> Response:
        return Response(status_code=200, headers={"Content-Type": ["image/png"]}, body=b"\x89PNG\r\n")


def api_handler(request: httpx.Request) -> httpx.Response:
    """MockTransport handler standing in for the remote API."""

    if request.url.path == "/users/1":
        return httpx.Response(
            200,
            content=b'{"id":1,"name":"Ada"}',
            headers={"Content-Type": "application/json", "X-Trace": "abc"},
        )
    return httpx.Response(404, content=b'{"detail":"not found"}', headers={"Content-Type": "application/json"})
