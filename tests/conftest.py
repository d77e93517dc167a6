"""Shared fixtures: settings isolation and an in-process REST fixture server."""

from __future__ import annotations

import json
import re
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import Iterator

import pytest

from jsonr8r.config import get_settings

DATA_DIR = Path(__file__).parent / "data"

_PROP_PATH = re.compile(r"^/props/([^/]+)$")
_MSG_PATH = re.compile(r"^/msgs/(\d+)$")


class _RestAreaHandler(BaseHTTPRequestHandler):
    """Tiny property/message store answering like the REST_area test server."""

    server: "_RestAreaServer"

    def log_message(self, format: str, *args: object) -> None:
        pass

    def _read_body(self) -> bytes:
        if self.headers.get("Transfer-Encoding", "").lower() == "chunked":
            chunks = []
            while True:
                size = int(self.rfile.readline().split(b";")[0].strip(), 16)
                if size == 0:
                    self.rfile.readline()
                    return b"".join(chunks)
                chunks.append(self.rfile.read(size))
                self.rfile.readline()
        length = int(self.headers.get("Content-Length", 0))
        return self.rfile.read(length) if length else b""

    def _reply(self, status: int, body: bytes | str, content_type: str = "text/plain; charset=utf-8") -> None:
        payload = body.encode("utf-8") if isinstance(body, str) else body
        self.send_response(status)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(payload)))
        self.end_headers()
        self.wfile.write(payload)

    def do_GET(self) -> None:
        if self.path == "/":
            self._reply(200, "Hello from REST_area server!")
            return
        if self.path == "/echo":
            self._echo()
            return
        if self.path == "/not-json":
            self._reply(200, "<html>nope</html>", "text/html; charset=utf-8")
            return
        prop = _PROP_PATH.match(self.path)
        if prop and prop.group(1) in self.server.props:
            self._reply(200, self.server.props[prop.group(1)], "application/json")
            return
        msg = _MSG_PATH.match(self.path)
        if msg and int(msg.group(1)) < len(self.server.msgs):
            self._reply(200, self.server.msgs[int(msg.group(1))], "application/json")
            return
        self._reply(404, "Not found")

    def do_PUT(self) -> None:
        body = self._read_body()
        if self.path == "/echo":
            self._echo(body)
            return
        prop = _PROP_PATH.match(self.path)
        if not prop:
            self._reply(404, "Not found")
            return
        self.server.props[prop.group(1)] = body
        self._reply(200, "OK")

    def do_POST(self) -> None:
        body = self._read_body()
        if self.path == "/echo":
            self._echo(body)
            return
        if self.path != "/msgs":
            self._reply(404, "Not found")
            return
        self.server.msgs.append(body)
        self._reply(200, f"New message #{len(self.server.msgs) - 1} received")

    def do_DELETE(self) -> None:
        if self.path == "/echo":
            self._echo()
            return
        prop = _PROP_PATH.match(self.path)
        if prop and self.server.props.pop(prop.group(1), None) is not None:
            self._reply(200, "OK")
            return
        self._reply(404, "Not found")

    def _echo(self, body: bytes = b"") -> None:
        seen = {
            "method": self.command,
            "headers": [[name.lower(), value] for name, value in self.headers.items()],
            "body": body.decode("utf-8"),
        }
        self._reply(200, json.dumps(seen), "application/json")


class _RestAreaServer(ThreadingHTTPServer):
    daemon_threads = True

    def __init__(self) -> None:
        super().__init__(("127.0.0.1", 0), _RestAreaHandler)
        self.props: dict[str, bytes] = {}
        self.msgs: list[bytes] = []


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in ("JSONR8R_SERVER_URL", "JSONR8R_HTTP_TIMEOUT", "JSONR8R_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def rest_server() -> Iterator[str]:
    """Run the fixture server on a free local port and yield its base URL."""

    server = _RestAreaServer()
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    host, port = server.server_address[:2]
    try:
        yield f"http://{host}:{port}"
    finally:
        server.shutdown()
        server.server_close()
        thread.join(timeout=5)


@pytest.fixture()
def menu_path() -> Path:
    return DATA_DIR / "menu.json"
