"""Request descriptors and response wrappers exchanged with the REST server."""

from __future__ import annotations

import json
from enum import Enum
from typing import Any, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .exceptions import ResponseParseError

Header = Tuple[str, str]


class Method(str, Enum):
    """HTTP verbs the client knows how to dispatch."""

    GET = "GET"
    PUT = "PUT"
    POST = "POST"
    DELETE = "DELETE"

    @property
    def carries_body(self) -> bool:
        return self in (Method.PUT, Method.POST)


class Request(BaseModel):
    """Immutable description of one pending HTTP request."""

    model_config = ConfigDict(frozen=True)

    method: Method = Field(..., description="HTTP verb used when the request is sent.")
    endpoint: str = Field(..., description="Path appended to the client's server URL.")
    headers: Tuple[Header, ...] = Field(
        default=(), description="Ordered (name, value) pairs; duplicates are kept."
    )
    content: str = Field(default="", description="Literal body text, or a file path.")
    content_is_file_path: bool = Field(
        default=False, description="Treat ``content`` as the path of a file to upload."
    )

    @model_validator(mode="after")
    def _bodyless_methods_are_empty(self) -> "Request":
        if not self.method.carries_body and (self.content or self.content_is_file_path):
            raise ValueError(f"{self.method.value} requests cannot carry content")
        return self

    def header_values(self, name: str) -> list[str]:
        """Return every value sent for ``name`` (case-insensitive), in order."""

        wanted = name.lower()
        return [value for key, value in self.headers if key.lower() == wanted]


class Response:
    """Read-only view of a completed HTTP exchange.

    ``status()`` and ``text()`` always succeed. ``json()`` parses the body on
    each call and raises :class:`ResponseParseError` when it is not JSON.
    """

    __slots__ = ("_request", "_status", "_text")

    def __init__(self, request: Request, status: int, text: str) -> None:
        self._request = request
        self._status = status
        self._text = text

    @property
    def request(self) -> Request:
        return self._request

    @property
    def ok(self) -> bool:
        return self._status < 400

    def status(self) -> int:
        return self._status

    def text(self) -> str:
        return self._text

    def json(self) -> Any:
        try:
            return json.loads(self._text)
        except json.JSONDecodeError as exc:
            raise ResponseParseError(
                f"Response to {self._request.method.value} {self._request.endpoint} "
                f"is not valid JSON: {exc.msg}",
                self._text,
            ) from exc

    def __repr__(self) -> str:
        return (
            f"<Response [{self._status}] {self._request.method.value} "
            f"{self._request.endpoint}>"
        )
