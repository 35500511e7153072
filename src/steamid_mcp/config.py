"""Server configuration read from the environment.

Values come from process environment variables, optionally populated from a
.env file via python-dotenv (see server.py):

- STEAM_USER_ID: owner's SteamID in any supported format, enables 'me'/'my'
- STEAMID_NEWER_STEAM2: render public Steam2 IDs as STEAM_1:... by default
- STEAMID_LOG_LEVEL: logging level name (default: INFO)
"""

import logging
import os
from dataclasses import dataclass


TRUTHY_VALUES = ("1", "true", "yes", "on")


def _env_flag(name: str, default: bool = False) -> bool:
    """Read a boolean flag from the environment."""
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in TRUTHY_VALUES


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the SteamID MCP server."""

    owner_steam_id: str | None = None
    newer_steam2_format: bool = False
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ValueError(f"Unknown log level: '{self.log_level}'")

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables."""
        owner_steam_id = os.getenv("STEAM_USER_ID", "").strip() or None
        log_level = os.getenv("STEAMID_LOG_LEVEL", "INFO").strip().upper() or "INFO"

        return cls(
            owner_steam_id=owner_steam_id,
            newer_steam2_format=_env_flag("STEAMID_NEWER_STEAM2"),
            log_level=log_level,
        )
