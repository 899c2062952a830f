"""OpenAI REST API client

Typed wrappers over the OpenAI HTTP endpoints (chat, embeddings, audio,
images, files, fine-tuning, models, moderations) sharing one transport
session with JSON and multipart encodings.
"""

__version__ = "0.1.0"

from .client import OpenAIClient, decode_outcome
from .config import ClientConfig
from .errors import (
    APIStatusError,
    InvalidRequestError,
    LocalFileError,
    OpenAIError,
    TransportError,
)
from .session import Session

__all__ = [
    "APIStatusError",
    "ClientConfig",
    "InvalidRequestError",
    "LocalFileError",
    "OpenAIClient",
    "OpenAIError",
    "Session",
    "TransportError",
    "decode_outcome",
]
