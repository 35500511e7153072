"""SteamID field domains.

Named values for the four fields packed into a 64-bit SteamID, plus the
bit masks and the canonical Steam3 type characters.
"""

from enum import IntEnum, IntFlag


# Mask for the AccountID (low 32 bits of a SteamID64)
ACCOUNT_ID_MASK = 0xFFFFFFFF

# Mask for the instance (low 20 bits of the upper 32 bits of a SteamID64)
ACCOUNT_INSTANCE_MASK = 0x000FFFFF

# Bit widths of the packed fields
UNIVERSE_BITS = 8
TYPE_BITS = 4
INSTANCE_BITS = 20
ACCOUNT_ID_BITS = 32


class Universe(IntEnum):
    """Top-level partition of the SteamID space."""

    INVALID = 0
    PUBLIC = 1
    BETA = 2
    INTERNAL = 3
    DEV = 4
    RC = 5  # Reserved


class Type(IntEnum):
    """Kind of entity a SteamID names."""

    INVALID = 0
    INDIVIDUAL = 1
    MULTISEAT = 2
    GAMESERVER = 3
    ANON_GAMESERVER = 4
    PENDING = 5
    CONTENT_SERVER = 6
    CLAN = 7
    CHAT = 8
    P2P_SUPER_SEEDER = 9  # Reserved
    ANON_USER = 10


class Instance(IntEnum):
    """Named client instances for individual accounts."""

    ALL = 0
    DESKTOP = 1
    CONSOLE = 2
    WEB = 4


class ChatInstanceFlags(IntFlag):
    """Instance bits marking the sub-kind of a CHAT-typed SteamID."""

    CLAN = (ACCOUNT_INSTANCE_MASK + 1) >> 1
    LOBBY = (ACCOUNT_INSTANCE_MASK + 1) >> 2
    MMS_LOBBY = (ACCOUNT_INSTANCE_MASK + 1) >> 3


# Steam3 type characters. Chat sub-kinds use 'c' and 'L' instead of 'T'.
TYPE_CHARS: dict[Type, str] = {
    Type.INVALID: "I",
    Type.INDIVIDUAL: "U",
    Type.MULTISEAT: "M",
    Type.GAMESERVER: "G",
    Type.ANON_GAMESERVER: "A",
    Type.PENDING: "P",
    Type.CONTENT_SERVER: "C",
    Type.CLAN: "g",
    Type.CHAT: "T",
    Type.ANON_USER: "a",
}

CLAN_CHAT_CHAR = "c"
LOBBY_CHAR = "L"
UNKNOWN_TYPE_CHAR = "i"


def type_from_char(type_char: str) -> Type:
    """Reverse lookup of TYPE_CHARS; unknown characters map to Type.INVALID."""
    for id_type, char in TYPE_CHARS.items():
        if char == type_char:
            return id_type
    return Type.INVALID
