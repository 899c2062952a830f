"""OpenAI REST client: decoded requests over one transport session."""

import json
import logging
from typing import Any, Dict, List, Optional

import httpx

from .categories import (
    Audio,
    Chat,
    Embeddings,
    Files,
    FineTuning,
    Images,
    Models,
    Moderations,
)
from .config import ClientConfig, DEFAULT_BASE_URI
from .errors import APIStatusError, TransportError
from .multipart import FormPart
from .session import HTTPFailure, Outcome, Session, Success


logger = logging.getLogger(__name__)


def decode_outcome(outcome: Outcome) -> Any:
    """Turn a transport outcome into a decoded result.

    A successful body is parsed as JSON. Bodies that are not JSON are
    returned wrapped as ``{"response": <body text>}``.

    Raises:
        TransportError: If no response was received
        APIStatusError: If the response status was not 200
    """
    if isinstance(outcome, HTTPFailure):
        raise APIStatusError(outcome.status_code, outcome.reason)
    if not isinstance(outcome, Success):
        raise TransportError(outcome.diagnostic)

    try:
        return json.loads(outcome.text)
    except ValueError:
        logger.debug("Response body is not JSON, wrapping %d bytes", len(outcome.content))
        return {"response": outcome.text}


def raw_outcome(outcome: Outcome) -> bytes:
    """Return the undecoded body of a successful outcome.

    Raises the same errors as decode_outcome for failures.
    """
    if isinstance(outcome, HTTPFailure):
        raise APIStatusError(outcome.status_code, outcome.reason)
    if not isinstance(outcome, Success):
        raise TransportError(outcome.diagnostic)
    return outcome.content


class OpenAIClient:
    """Client for the OpenAI REST API.

    Owns a single Session. API operations are grouped by category:

        client = OpenAIClient(token="sk-...")
        client.chat.create({"model": "gpt-4o-mini", "messages": [...]})
        client.models.retrieve("gpt-4o-mini")
    """

    def __init__(
        self,
        base_uri: str = DEFAULT_BASE_URI,
        token: Optional[str] = None,
        proxy: Optional[str] = None,
        verbose: bool = False,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        config = ClientConfig(base_uri=base_uri, token=token, proxy=proxy, verbose=verbose)
        self.session = Session(config.base_uri, verbose=config.verbose, transport=transport)

        if config.token:
            self.session.set_token(config.token)

        proxy_host_port = config.proxy_host_port()
        if proxy_host_port is not None:
            self.session.set_proxy(*proxy_host_port)

        self.audio = Audio(self)
        self.chat = Chat(self)
        self.embeddings = Embeddings(self)
        self.files = Files(self)
        self.fine_tuning = FineTuning(self)
        self.images = Images(self)
        self.models = Models(self)
        self.moderations = Moderations(self)

    @classmethod
    def from_config(
        cls,
        config: ClientConfig,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> "OpenAIClient":
        return cls(
            base_uri=config.base_uri,
            token=config.token,
            proxy=config.proxy,
            verbose=config.verbose,
            transport=transport,
        )

    def get(self, path: str) -> Any:
        return decode_outcome(self.session.get(path))

    def post(self, path: str, body: Dict[str, Any]) -> Any:
        """POST `body` encoded as JSON and decode the response."""
        return decode_outcome(self.session.post_json(path, json.dumps(body)))

    def post_text(self, path: str, data: str, content_type: str = "application/json") -> Any:
        return decode_outcome(self.session.post_json(path, data, content_type))

    def post_raw(self, path: str, body: Dict[str, Any]) -> bytes:
        """POST `body` encoded as JSON and return the raw response body."""
        return raw_outcome(self.session.post_json(path, json.dumps(body)))

    def post_multipart(self, path: str, parts: List[FormPart]) -> Any:
        return decode_outcome(self.session.post_multipart(path, parts))

    def delete(self, path: str) -> Any:
        return decode_outcome(self.session.delete(path))

    def close(self) -> None:
        """Close the client and its session."""
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
