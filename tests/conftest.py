"""Shared fixtures: a recording transport double and a local API server."""

import socket
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from urllib.parse import urlsplit

import httpx
import pytest
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import Response


SPEECH_BYTES = b"ID3\x04\x00\x00\xff\xfb\x90\x64\x00\x0f\xf0"


class RecordingTransport(httpx.MockTransport):
    """Mock transport that records every request it receives."""

    def __init__(
        self,
        status_code: int = 200,
        content: bytes = b"{}",
        reason_phrase: Optional[bytes] = None,
        error: Optional[Exception] = None,
    ):
        self.requests: List[httpx.Request] = []
        self.status_code = status_code
        self.content = content
        self.reason_phrase = reason_phrase
        self.error = error
        super().__init__(self._handle)

    @property
    def called(self) -> bool:
        return bool(self.requests)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        extensions = {}
        if self.reason_phrase is not None:
            extensions["reason_phrase"] = self.reason_phrase
        return httpx.Response(self.status_code, content=self.content, extensions=extensions)


@pytest.fixture
def transport():
    return RecordingTransport()


@dataclass
class RecordedRequest:
    method: str
    path: str
    headers: Dict[str, str]
    body: bytes


@dataclass
class APIServer:
    base_uri: str
    requests: List[RecordedRequest] = field(default_factory=list)

    @property
    def last(self) -> RecordedRequest:
        return self.requests[-1]


class ProxyTargetMiddleware:
    """Serve absolute-form request targets, as an HTTP proxy receives them."""

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] == "http" and "://" in scope["path"]:
            path = urlsplit(scope["path"]).path or "/"
            scope = dict(scope, path=path, raw_path=path.encode("ascii"))
        await self.app(scope, receive, send)


def create_recorder_app(requests: List[RecordedRequest]) -> FastAPI:
    """FastAPI app that records requests and echoes method and path."""
    app = FastAPI()
    app.add_middleware(ProxyTargetMiddleware)

    async def record(request: Request) -> None:
        requests.append(
            RecordedRequest(
                method=request.method,
                path=request.url.path,
                headers=dict(request.headers),
                body=await request.body(),
            )
        )

    @app.post("/v1/audio/speech")
    async def speech(request: Request):
        await record(request)
        return Response(content=SPEECH_BYTES, media_type="audio/mpeg")

    @app.get("/v1/files/{file_id}/content")
    async def file_content(file_id: str, request: Request):
        await record(request)
        return Response(content=b'{"prompt": "a"}\n{"prompt": "b"}\n', media_type="text/plain")

    @app.get("/v1/models/missing-model")
    async def missing_model(request: Request):
        await record(request)
        return Response(content=b'{"error": "not found"}', status_code=404)

    @app.api_route("/{path:path}", methods=["GET", "POST", "DELETE"])
    async def echo(path: str, request: Request) -> Dict[str, Any]:
        await record(request)
        return {"method": request.method, "path": request.url.path}

    return app


def _free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


@pytest.fixture(scope="session")
def _running_server():
    recorded: List[RecordedRequest] = []
    port = _free_port()
    config = uvicorn.Config(
        create_recorder_app(recorded),
        host="127.0.0.1",
        port=port,
        log_level="warning",
    )
    server = uvicorn.Server(config)
    thread = threading.Thread(target=server.run, daemon=True)
    thread.start()

    deadline = time.time() + 10
    while not server.started:
        if time.time() > deadline:
            raise RuntimeError("test API server did not start")
        time.sleep(0.01)

    yield APIServer(base_uri=f"http://127.0.0.1:{port}", requests=recorded)

    server.should_exit = True
    thread.join(timeout=5)


@pytest.fixture
def api_server(_running_server):
    """Local API server with an empty request log."""
    _running_server.requests.clear()
    return _running_server


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("OPENAI_BASE_URL", "OPENAI_API_KEY", "OPENAI_PROXY"):
        monkeypatch.delenv(name, raising=False)
