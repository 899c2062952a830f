"""Exceptions raised by the OpenAI REST client."""

from typing import Optional


class OpenAIError(Exception):
    """Base exception for OpenAI client errors."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class TransportError(OpenAIError):
    """Raised when no HTTP response was received."""


class APIStatusError(OpenAIError):
    """Raised when the server answered with a status other than 200."""

    def __init__(self, status_code: int, reason: str):
        super().__init__(reason, status_code=status_code)
        self.reason = reason


class LocalFileError(OpenAIError):
    """Raised when a file referenced by a request could not be read."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"could not read local file {path}: {reason}")
        self.path = path
        self.reason = reason


class InvalidRequestError(OpenAIError):
    """Raised when a request cannot be encoded for its endpoint."""
