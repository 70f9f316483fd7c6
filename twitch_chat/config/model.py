from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..constants import (
    CLIENT_NUMBER_MAX,
    CLIENT_NUMBER_MIN,
    DEFAULT_CLIENT_NUMBER,
    IRC_CONNECT_POLL_INTERVAL,
    IRC_CONNECT_TIMEOUT,
    IRC_RECEIVE_BUFFER_SIZE,
    IRC_WRITE_TIMEOUT,
    OAUTH_PREFIX,
    TWITCH_IRC_HOST,
    TWITCH_IRC_PORT,
)


class Credentials(BaseModel):
    """Identity presented during the handshake.

    Attributes:
        nickname: The bot's Twitch username, sent as NICK and USER.
        token: OAuth token, stored without the ``oauth:`` prefix.
        client_number: Protocol-variant number sent with TWITCHCLIENT (1-3).
    """

    model_config = ConfigDict(frozen=True)

    nickname: str = Field(min_length=1)
    token: str = Field(min_length=1, repr=False)
    client_number: int = Field(
        default=DEFAULT_CLIENT_NUMBER, ge=CLIENT_NUMBER_MIN, le=CLIENT_NUMBER_MAX
    )

    @field_validator("nickname", mode="before")
    @classmethod
    def validate_nickname(cls, v: Any) -> str:
        if not isinstance(v, str):
            raise ValueError("nickname must be a string")
        stripped = v.strip()
        if not stripped or any(ch.isspace() for ch in stripped):
            raise ValueError("nickname must be a single non-empty word")
        return stripped

    @field_validator("token", mode="before")
    @classmethod
    def validate_token(cls, v: Any) -> str:
        """Accept tokens with or without the ``oauth:`` prefix."""
        if not isinstance(v, str):
            raise ValueError("token must be a string")
        token = v.strip()
        if token.startswith(OAUTH_PREFIX):
            token = token[len(OAUTH_PREFIX) :]
        if not token:
            raise ValueError("token must not be empty")
        return token

    @property
    def password(self) -> str:
        return f"{OAUTH_PREFIX}{self.token}"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Credentials:
        """Build credentials from ``TWITCH_USERNAME`` / ``TWITCH_ACCESS_TOKEN``.

        ``TWITCH_CLIENT_NUMBER`` is optional and defaults to 3.

        Raises:
            pydantic.ValidationError: when a variable is missing or invalid.
        """
        env = os.environ if environ is None else environ
        data: dict[str, Any] = {
            "nickname": env.get("TWITCH_USERNAME", ""),
            "token": env.get("TWITCH_ACCESS_TOKEN", ""),
        }
        client_number = env.get("TWITCH_CLIENT_NUMBER")
        if client_number:
            data["client_number"] = client_number
        return cls.model_validate(data)


class ClientSettings(BaseModel):
    """Transport tuning; defaults come from ``constants``."""

    model_config = ConfigDict(frozen=True)

    host: str = TWITCH_IRC_HOST
    port: int = Field(default=TWITCH_IRC_PORT, ge=1, le=65535)
    auto_pong: bool = True
    buffer_size: int = Field(default=IRC_RECEIVE_BUFFER_SIZE, ge=64)
    connect_timeout: float = Field(default=IRC_CONNECT_TIMEOUT, gt=0)
    poll_interval: float = Field(default=IRC_CONNECT_POLL_INTERVAL, gt=0)
    write_timeout: float = Field(default=IRC_WRITE_TIMEOUT, gt=0)
