"""SteamID codec: parse, render and validate 64-bit Steam identifiers."""

from .enums import ChatInstanceFlags, Instance, Type, TYPE_CHARS, Universe
from .steam_id import (
    FormatError,
    SteamID,
    SteamIDError,
    UnsupportedOperation,
    parse_steam_id,
)

__all__ = [
    "ChatInstanceFlags",
    "FormatError",
    "Instance",
    "SteamID",
    "SteamIDError",
    "TYPE_CHARS",
    "Type",
    "Universe",
    "UnsupportedOperation",
    "parse_steam_id",
]
