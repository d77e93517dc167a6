"""Blocking REST client that builds, sends and wraps JSON-oriented requests.

Use :meth:`RestClient.get`, :meth:`RestClient.put` and friends to build a
:class:`~jsonr8r.models.Request`, then pass it to :meth:`RestClient.send`::

    with RestClient() as client:
        response = client.send(client.get("/"))
        print(response.status(), response.text())
"""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any, Iterable, Optional, Type, Union

import requests
from requests.structures import CaseInsensitiveDict

from .config import get_settings
from .exceptions import TransportError, UnsupportedMethodError
from .models import Header, Method, Request, Response

LOGGER = logging.getLogger(__name__)

_ACCEPT_JSON: Header = ("accept", "application/json")
_CONTENT_TYPE_JSON: Header = ("content-type", "application/json")


def _merge_headers(headers: Iterable[Header]) -> CaseInsensitiveDict:
    """Fold repeated header names into one comma-separated field, keeping order."""

    merged: CaseInsensitiveDict = CaseInsensitiveDict()
    for name, value in headers:
        merged[name] = f"{merged[name]}, {value}" if name in merged else value
    return merged


def _decode_body(response: requests.Response) -> str:
    """Decode with the declared charset, or UTF-8 when the server names none."""

    content_type = response.headers.get("content-type", "")
    encoding = response.encoding if "charset=" in content_type.lower() else None
    try:
        return response.content.decode(encoding or "utf-8", errors="replace")
    except LookupError:
        LOGGER.debug("Unknown charset %r; decoding body as UTF-8.", encoding)
        return response.content.decode("utf-8", errors="replace")


class RestClient:
    """Build and send requests against a single REST server."""

    def __init__(
        self,
        server_url: Optional[str] = None,
        *,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ) -> None:
        settings = get_settings()
        self._server_url = (server_url if server_url is not None else settings.server_url).rstrip("/")
        if timeout is not None and timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout!r}")
        self._timeout = timeout if timeout is not None else settings.http_timeout
        self._owns_session = session is None
        self._session = session or requests.Session()

    @property
    def server_url(self) -> str:
        return self._server_url

    @property
    def timeout(self) -> Optional[float]:
        return self._timeout

    # ------------------------------------------------------------------
    def get(self, endpoint: str) -> Request:
        """Build a GET request for ``endpoint``."""

        return Request(method=Method.GET, endpoint=endpoint, headers=(_ACCEPT_JSON,))

    def put(self, endpoint: str, content: str, content_is_file_path: bool = False) -> Request:
        """Build a PUT request.

        When ``content_is_file_path`` is true, ``content`` is the path of a file
        whose bytes are uploaded; otherwise ``content`` is sent as literal text.
        """

        return Request(
            method=Method.PUT,
            endpoint=endpoint,
            headers=(_ACCEPT_JSON, _CONTENT_TYPE_JSON),
            content=content,
            content_is_file_path=content_is_file_path,
        )

    def post(self, endpoint: str, content: str, content_is_file_path: bool = False) -> Request:
        """Build a POST request; ``content`` is handled as in :meth:`put`."""

        return Request(
            method=Method.POST,
            endpoint=endpoint,
            headers=(_ACCEPT_JSON, _CONTENT_TYPE_JSON),
            content=content,
            content_is_file_path=content_is_file_path,
        )

    def delete(self, endpoint: str) -> Request:
        """Build a DELETE request for ``endpoint``."""

        return Request(method=Method.DELETE, endpoint=endpoint, headers=(_ACCEPT_JSON,))

    # HTTP verb spellings
    GET = get
    PUT = put
    POST = post
    DELETE = delete

    # ------------------------------------------------------------------
    def send(self, request: Request) -> Response:
        """Perform the HTTP exchange described by ``request``.

        Raises :class:`TransportError` when the server cannot be reached,
        ``OSError`` when an upload file cannot be opened and
        :class:`UnsupportedMethodError` for methods outside :class:`Method`.
        """

        method = request.method
        if method is Method.GET or method is Method.DELETE:
            return self._dispatch(request, None)
        if method is Method.PUT or method is Method.POST:
            if request.content_is_file_path:
                with open(request.content, "rb") as body:
                    return self._dispatch(request, body)
            return self._dispatch(request, request.content.encode("utf-8"))
        raise UnsupportedMethodError(f"Cannot send {getattr(method, 'value', method)!r} requests")

    def request(
        self,
        method: Union[Method, str],
        endpoint: str,
        content: str = "",
        content_is_file_path: bool = False,
    ) -> Response:
        """Build the request for ``method`` by name and send it.

        GET and DELETE with content raise :class:`pydantic.ValidationError`.
        """

        if isinstance(method, Method):
            verb = method
        else:
            try:
                verb = Method(method.upper())
            except ValueError as exc:
                raise UnsupportedMethodError(f"Cannot send {method!r} requests") from exc

        if verb.carries_body:
            builder = self.put if verb is Method.PUT else self.post
            return self.send(builder(endpoint, content, content_is_file_path))
        return self.send(
            Request(
                method=verb,
                endpoint=endpoint,
                headers=(_ACCEPT_JSON,),
                content=content,
                content_is_file_path=content_is_file_path,
            )
        )

    def _dispatch(self, request: Request, body: Any) -> Response:
        url = f"{self._server_url}{request.endpoint}"
        LOGGER.debug("Sending %s %s", request.method.value, url)
        try:
            http_response = self._session.request(
                request.method.value,
                url,
                headers=_merge_headers(request.headers),
                data=body,
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            raise TransportError(f"{request.method.value} {url} failed: {exc}") from exc

        LOGGER.debug("%s %s returned %s", request.method.value, url, http_response.status_code)
        return Response(request, http_response.status_code, _decode_body(http_response))

    # ------------------------------------------------------------------
    def close(self) -> None:
        """Close the underlying session if this client created it."""

        if self._owns_session:
            self._session.close()

    def __enter__(self) -> "RestClient":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"RestClient({self._server_url!r})"


__all__ = ["RestClient"]
