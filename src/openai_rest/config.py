"""Session configuration for the OpenAI REST client."""

import os
from typing import Optional, Tuple

from pydantic import BaseModel, field_validator


DEFAULT_BASE_URI = "https://api.openai.com"


class ClientConfig(BaseModel):
    """Base endpoint, bearer credential and proxy for one client session."""

    base_uri: str = DEFAULT_BASE_URI
    token: Optional[str] = None
    proxy: Optional[str] = None
    verbose: bool = False

    @field_validator("base_uri")
    @classmethod
    def _check_base_uri(cls, value: str) -> str:
        if not value:
            raise ValueError("base_uri must not be empty")
        return value

    @field_validator("token", "proxy", mode="before")
    @classmethod
    def _empty_as_unset(cls, value):
        # The CLI passes "" for options that were not given
        if value == "":
            return None
        return value

    @field_validator("proxy")
    @classmethod
    def _check_proxy(cls, value: Optional[str]) -> Optional[str]:
        if value is not None:
            _split_host_port(value)
        return value

    def proxy_host_port(self) -> Optional[Tuple[str, int]]:
        """Return the proxy as (host, port), or None when no proxy is set."""
        if self.proxy is None:
            return None
        return _split_host_port(self.proxy)

    @classmethod
    def from_env(cls, **overrides) -> "ClientConfig":
        """Build a config from OPENAI_* environment variables.

        Keyword arguments that are not None take precedence over the
        environment.
        """
        values = {
            "base_uri": os.environ.get("OPENAI_BASE_URL", DEFAULT_BASE_URI),
            "token": os.environ.get("OPENAI_API_KEY"),
            "proxy": os.environ.get("OPENAI_PROXY"),
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)


def _split_host_port(value: str) -> Tuple[str, int]:
    """Split "host:port" on the first colon."""
    host, sep, port = value.partition(":")
    if not sep or not host:
        raise ValueError(f"proxy must be host:port, got {value!r}")
    try:
        port_number = int(port)
    except ValueError:
        raise ValueError(f"proxy port must be an integer, got {port!r}") from None
    if not 0 < port_number < 65536:
        raise ValueError(f"proxy port out of range: {port_number}")
    return host, port_number
