"""HTTP transport session with a strict success policy."""

import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, List, Optional, Union

import httpx

from .config import DEFAULT_BASE_URI
from .multipart import FormPart, to_httpx_files


logger = logging.getLogger(__name__)

# Applied to every request; not exposed as configuration
REQUEST_TIMEOUT = 600.0

USER_AGENT = "openai-rest/0.1.0"


@dataclass(frozen=True)
class Success:
    """Request completed with status 200."""

    content: bytes
    text: str


@dataclass(frozen=True)
class Failure(ABC):
    """Request did not produce a 200 response."""

    @property
    @abstractmethod
    def diagnostic(self) -> str:
        """Human-readable description of the failure."""


@dataclass(frozen=True)
class TransportFailure(Failure):
    """No HTTP response was received (DNS, connect, TLS, timeout)."""

    error: str

    @property
    def diagnostic(self) -> str:
        return self.error


@dataclass(frozen=True)
class HTTPFailure(Failure):
    """A response was received but its status was not 200."""

    status_code: int
    reason: str

    @property
    def diagnostic(self) -> str:
        return self.reason


Outcome = Union[Success, TransportFailure, HTTPFailure]


class Session:
    """One persistent HTTP client bound to a base endpoint.

    Every call performs exactly one round trip and returns an Outcome.
    The base endpoint is fixed at construction; the bearer token and the
    proxy may be changed between calls.
    """

    def __init__(
        self,
        base_uri: str = DEFAULT_BASE_URI,
        verbose: bool = False,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self._base_uri = base_uri
        self._verbose = verbose
        self._transport = transport
        self._token: Optional[str] = None
        self._proxy: Optional[str] = None
        self._lock = threading.Lock()
        self._client = self._build_client()

    @property
    def base_uri(self) -> str:
        return self._base_uri

    @property
    def token(self) -> Optional[str]:
        return self._token

    @property
    def proxy(self) -> Optional[str]:
        return self._proxy

    def _build_client(self) -> httpx.Client:
        headers = {"User-Agent": USER_AGENT}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"

        event_hooks = {}
        if self._verbose:
            event_hooks = {"request": [_log_request], "response": [_log_response]}

        return httpx.Client(
            base_url=self._base_uri,
            headers=headers,
            # an injected transport handles routing itself
            proxy=self._proxy if self._transport is None else None,
            transport=self._transport,
            trust_env=False,
            timeout=REQUEST_TIMEOUT,
            event_hooks=event_hooks,
        )

    def set_token(self, token: str) -> None:
        """Send `token` as a bearer credential on every subsequent request."""
        with self._lock:
            self._token = token or None
            if self._token:
                self._client.headers["Authorization"] = f"Bearer {self._token}"
            else:
                self._client.headers.pop("Authorization", None)

    def set_proxy(self, host: str, port: int) -> None:
        """Route subsequent requests through the HTTP proxy at host:port."""
        with self._lock:
            self._proxy = f"http://{host}:{port}"
            old_client = self._client
            self._client = self._build_client()
        # an injected transport belongs to the caller and stays open
        if self._transport is None:
            old_client.close()

    def get(self, path: str) -> Outcome:
        return self._send("GET", path)

    def post_json(
        self,
        path: str,
        body: str,
        content_type: str = "application/json",
    ) -> Outcome:
        return self._send(
            "POST",
            path,
            content=body.encode("utf-8"),
            headers={"Content-Type": content_type},
        )

    def post_multipart(self, path: str, parts: List[FormPart]) -> Outcome:
        return self._send("POST", path, files=to_httpx_files(parts))

    def delete(self, path: str) -> Outcome:
        return self._send("DELETE", path)

    def _send(self, method: str, path: str, **kwargs: Any) -> Outcome:
        with self._lock:
            client = self._client

        try:
            response = client.request(method, path, **kwargs)
        except httpx.RequestError as e:
            logger.warning("%s %s failed: %r", method, path, e)
            return TransportFailure(str(e) or type(e).__name__)

        if response.status_code != httpx.codes.OK:
            logger.warning(
                "%s %s returned %d %s",
                method,
                path,
                response.status_code,
                response.reason_phrase,
            )
            return HTTPFailure(response.status_code, response.reason_phrase)

        return Success(response.content, response.text)

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def _redact(headers: httpx.Headers) -> dict:
    shown = dict(headers)
    if "authorization" in shown:
        shown["authorization"] = "Bearer ***"
    return shown


def _log_request(request: httpx.Request) -> None:
    try:
        body = request.content
    except httpx.RequestNotRead:
        # multipart bodies are streamed
        body = b"<multipart>"
    logger.debug(
        "%s %s\n%s\n\n%s",
        request.method,
        request.url.raw_path.decode("ascii"),
        _redact(request.headers),
        body.decode("utf-8", errors="replace"),
    )


def _log_response(response: httpx.Response) -> None:
    response.read()
    logger.debug(
        "%d %s\n%s\n\n%s",
        response.status_code,
        response.reason_phrase,
        dict(response.headers),
        response.text,
    )
