"""Domain models (Pydantic v2).

Scope:
- Parsed commands (`ParsedCommand`, `Parameter`).
- Call contract of catalog operations (`FilePayload`, `ApiError`).
- Normalized response envelope (`Response`).
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class ParamKind(str, Enum):
    """Classification of a parsed argument token."""

    PLAIN_STRING = "PlainString"
    JSON_LITERAL = "JsonLiteral"
    VARIABLE_REFERENCE = "VariableReference"


class Parameter(BaseModel):
    """One argument of a parsed command.

    An empty `name` marks a positional argument.
    """

    model_config = ConfigDict(frozen=True)

    kind: ParamKind = Field(
        ...,
        description="How the value was written on the command line.",
    )
    name: str = Field(
        default="",
        description="Parameter name for `name=value` arguments, empty when positional.",
    )
    value: str = Field(
        ...,
        description="Raw value with quoting removed (variable name for references).",
    )

    @property
    def is_named(self) -> bool:
        return bool(self.name.strip())


class ParsedCommand(BaseModel):
    """A single input line broken into service, verb and ordered parameters."""

    model_config = ConfigDict(frozen=True)

    service: str = Field(..., min_length=1)
    verb: str = Field(..., min_length=1)
    parameters: tuple[Parameter, ...] = Field(default_factory=tuple)


class FilePayload(BaseModel):
    """File argument handed to operations that upload content."""

    data: bytes = Field(..., description="File content.")
    file_name: str | None = Field(
        default=None,
        description="File name sent along with the content, if known.",
    )


class Response(BaseModel):
    """Normalized result of an invocation.

    The body is always fully materialized; no transport resource outlives the
    processor call that produced it.
    """

    status_code: int = Field(..., ge=0)
    headers: dict[str, list[str]] = Field(default_factory=dict)
    body: bytes = Field(default=b"")

    def header(self, name: str) -> list[str]:
        """Case-insensitive header lookup."""

        lowered = name.lower()
        for key, values in self.headers.items():
            if key.lower() == lowered:
                return values
        return []

    @property
    def media_type(self) -> str | None:
        """Media type of the `Content-Type` header without its parameters."""

        values = self.header("Content-Type")
        if not values or not values[0] or not values[0].strip():
            return None
        media_type = values[0].split(";", 1)[0].strip()
        return media_type or None

    @property
    def is_error(self) -> bool:
        return self.status_code >= 400

    def text(self) -> str:
        return self.body.decode("utf-8-sig", errors="replace")


class ApiError(Exception):
    """API-level failure raised by catalog operations.

    The processor turns it into a `Response` instead of propagating it.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        body: str | bytes = b"",
        headers: dict[str, list[str]] | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body
        self.headers = headers or {}

    def to_response(self) -> Response:
        body = self.body.encode("utf-8") if isinstance(self.body, str) else bytes(self.body)
        return Response(status_code=self.status_code, headers=dict(self.headers), body=body)
