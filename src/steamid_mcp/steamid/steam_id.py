"""SteamID parsing, rendering and validation.

A SteamID packs four fields into one unsigned 64-bit integer:

    universe (8 bits) | type (4 bits) | instance (20 bits) | accountid (32 bits)

It is written in several textual forms that users might provide:
- SteamID64: 76561198006409530 (decimal packed value)
- Steam2: STEAM_0:0:23071901 (individual accounts only)
- Steam3: [U:1:46143802], [A:1:46124:11245], [L:1:12345]

This module converts between all of them and applies Steam's validity rules.
Nothing here talks to the network; a valid SteamID is not guaranteed to belong
to a real account.
"""

import logging
import re

from steamid_mcp.steamid.enums import (
    ACCOUNT_ID_BITS,
    ACCOUNT_ID_MASK,
    ACCOUNT_INSTANCE_MASK,
    CLAN_CHAT_CHAR,
    INSTANCE_BITS,
    LOBBY_CHAR,
    TYPE_BITS,
    TYPE_CHARS,
    UNIVERSE_BITS,
    UNKNOWN_TYPE_CHAR,
    ChatInstanceFlags,
    Instance,
    Type,
    Universe,
    type_from_char,
)


logger = logging.getLogger(__name__)


class SteamIDError(Exception):
    """Base class for SteamID codec errors."""

    pass


class FormatError(SteamIDError, ValueError):
    """Raised when input matches none of the accepted SteamID formats."""

    def __init__(self, value: object):
        super().__init__(f'Unknown SteamID input format "{value}"')
        self.value = value


class UnsupportedOperation(SteamIDError):
    """Raised when a SteamID cannot be rendered in the requested format."""

    pass


# Largest value representable in the packed form
MAX_STEAMID64 = (1 << 64) - 1

# Regex patterns for the textual formats, matched against the whole input
STEAMID64_PATTERN = re.compile(r"[0-9]+")
STEAM2_PATTERN = re.compile(r"STEAM_([0-5]):([01]):([0-9]+)")
STEAM3_PATTERN = re.compile(r"\[([a-zA-Z]):([0-5]):([0-9]+)(?::([0-9]+))?\]")


def _coerce_field(name: str, value: int | str, bits: int) -> int:
    """
    Coerce a field value to a plain int that fits in `bits` bits.

    Accepts ints (including enum members) and decimal strings.

    Raises:
        TypeError: If the value is neither an int nor a string
        ValueError: If the string is not decimal or the value is out of range
    """
    if isinstance(value, bool):
        raise TypeError(f"{name} must be an integer, not bool")

    if isinstance(value, int):
        number = int(value)
    elif isinstance(value, str):
        text = value.strip()
        if not STEAMID64_PATTERN.fullmatch(text):
            raise ValueError(f"{name} must be a decimal integer, got '{value}'")
        number = int(text)
    else:
        raise TypeError(
            f"{name} must be an integer or decimal string, not {type(value).__name__}"
        )

    if not 0 <= number < (1 << bits):
        raise ValueError(f"{name} {number} does not fit in {bits} bits")
    return number


LEADING_INT_PATTERN = re.compile(r"\s*([+-]?[0-9]+)")


def _leading_int(value: object) -> object:
    """Read leading decimal digits of a string, truncate a float; pass others through."""
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        match = LEADING_INT_PATTERN.match(value)
        if not match:
            raise ValueError(f"'{value}' has no leading digits")
        return int(match.group(1))
    return value


class SteamID:
    """
    A SteamID value.

    Fields can be assigned after construction. Every assignment is coerced
    to an int and range-checked against the field's bit width, so the packed
    form is always well-defined. A rejected assignment leaves the SteamID
    unchanged.

    SteamIDs compare equal when their packed values are equal. They are
    mutable and so unhashable; use int(steam_id) as a key instead.
    """

    __slots__ = ("_universe", "_type", "_instance", "_accountid")

    def __init__(
        self,
        value: int | str | None = None,
        *,
        universe: int | str | None = None,
        type: int | str | None = None,
        instance: int | str | None = None,
        accountid: int | str | None = None,
    ) -> None:
        """
        Create a SteamID from a parsable value or from individual fields.

        SteamID(value) is shorthand for parse_steam_id(value). Otherwise the
        keyword fields are used, each defaulting to its invalid/ALL/0 value.

        Raises:
            TypeError: If both a value and keyword fields are given
            FormatError: If the value cannot be parsed
        """
        fields = (universe, type, instance, accountid)

        if value is not None and value != "":
            if any(field is not None for field in fields):
                raise TypeError("SteamID() takes either a value or keyword fields, not both")
            parsed = parse_steam_id(value)
            universe, type, instance, accountid = (
                parsed.universe,
                parsed.type,
                parsed.instance,
                parsed.accountid,
            )

        self._universe = _coerce_field(
            "universe", Universe.INVALID if universe is None else universe, UNIVERSE_BITS
        )
        self._type = _coerce_field(
            "type", Type.INVALID if type is None else type, TYPE_BITS
        )
        self._instance = _coerce_field(
            "instance", Instance.ALL if instance is None else instance, INSTANCE_BITS
        )
        self._accountid = _coerce_field(
            "accountid", 0 if accountid is None else accountid, ACCOUNT_ID_BITS
        )

    @classmethod
    def from_individual_account_id(cls, accountid: int | float | str) -> "SteamID":
        """
        Create a public desktop individual SteamID from a 32-bit account ID.

        A string is read up to its first non-digit character and a
        float is truncated. An account ID with no leading digits, or one
        out of range, is logged and replaced by 0, which yields an invalid
        SteamID instead of raising.
        """
        try:
            parsed = _coerce_field(
                "accountid", _leading_int(accountid), ACCOUNT_ID_BITS
            )
        except (TypeError, ValueError, OverflowError):
            logger.warning(
                f"from_individual_account_id() called with unusable argument "
                f"'{accountid}' (type {type(accountid).__name__})"
            )
            parsed = 0

        return cls(
            universe=Universe.PUBLIC,
            type=Type.INDIVIDUAL,
            instance=Instance.DESKTOP,
            accountid=parsed,
        )

    @property
    def universe(self) -> int:
        return self._universe

    @universe.setter
    def universe(self, value: int | str) -> None:
        self._universe = _coerce_field("universe", value, UNIVERSE_BITS)

    @property
    def type(self) -> int:
        return self._type

    @type.setter
    def type(self, value: int | str) -> None:
        self._type = _coerce_field("type", value, TYPE_BITS)

    @property
    def instance(self) -> int:
        return self._instance

    @instance.setter
    def instance(self, value: int | str) -> None:
        self._instance = _coerce_field("instance", value, INSTANCE_BITS)

    @property
    def accountid(self) -> int:
        return self._accountid

    @accountid.setter
    def accountid(self, value: int | str) -> None:
        self._accountid = _coerce_field("accountid", value, ACCOUNT_ID_BITS)

    # Validation

    def is_valid(self) -> bool:
        """
        Whether Steam would consider this ID valid.

        Does not check that the ID belongs to a real account, nor that it is
        an individual account in the public universe.
        """
        if self._type <= Type.INVALID or self._type > Type.ANON_USER:
            return False

        if self._universe <= Universe.INVALID or self._universe > Universe.DEV:
            return False

        if self._type == Type.INDIVIDUAL and (
            self._accountid == 0 or self._instance > Instance.WEB
        ):
            return False

        if self._type == Type.CLAN and (
            self._accountid == 0 or self._instance != Instance.ALL
        ):
            return False

        if self._type == Type.GAMESERVER and self._accountid == 0:
            return False

        return True

    def is_valid_individual(self) -> bool:
        """Whether this is a valid public-universe desktop user ID."""
        return (
            self._universe == Universe.PUBLIC
            and self._type == Type.INDIVIDUAL
            and self._instance == Instance.DESKTOP
            and self.is_valid()
        )

    def is_group_chat(self) -> bool:
        """Whether this ID is for a legacy group chat."""
        return self._type == Type.CHAT and bool(self._instance & ChatInstanceFlags.CLAN)

    def is_lobby(self) -> bool:
        """Whether this ID is for a game lobby."""
        return self._type == Type.CHAT and bool(
            self._instance & (ChatInstanceFlags.LOBBY | ChatInstanceFlags.MMS_LOBBY)
        )

    # Rendering

    def render_steam2(self, newer_format: bool = False) -> str:
        """
        Render in Steam2 format, e.g. "STEAM_0:0:23071901".

        Args:
            newer_format: Use 1 instead of 0 as the universe digit for the
                          public universe

        Raises:
            UnsupportedOperation: If this is not an individual ID
        """
        if self._type != Type.INDIVIDUAL:
            raise UnsupportedOperation(
                "Can't get Steam2 rendered ID for non-individual ID"
            )

        universe = self._universe
        if not newer_format and universe == Universe.PUBLIC:
            universe = 0

        return f"STEAM_{universe}:{self._accountid & 1}:{self._accountid // 2}"

    def render_steam3(self) -> str:
        """Render in Steam3 format, e.g. "[U:1:46143802]"."""
        type_char = TYPE_CHARS.get(self._type, UNKNOWN_TYPE_CHAR)

        if self._instance & ChatInstanceFlags.CLAN:
            type_char = CLAN_CHAT_CHAR
        elif self._instance & ChatInstanceFlags.LOBBY:
            type_char = LOBBY_CHAR

        render_instance = (
            self._type == Type.ANON_GAMESERVER
            or self._type == Type.MULTISEAT
            or (self._type == Type.INDIVIDUAL and self._instance != Instance.DESKTOP)
        )

        rendered = f"{type_char}:{self._universe}:{self._accountid}"
        if render_instance:
            rendered += f":{self._instance}"
        return f"[{rendered}]"

    def render_packed(self) -> int:
        """The packed 64-bit value."""
        return (
            (self._universe << 56)
            | (self._type << 52)
            | (self._instance << 32)
            | self._accountid
        )

    def render_steam64(self) -> str:
        """Render as a decimal SteamID64 string, e.g. "76561198006409530"."""
        return str(self.render_packed())

    def __int__(self) -> int:
        return self.render_packed()

    def __str__(self) -> str:
        return self.render_steam64()

    def __repr__(self) -> str:
        return (
            f"SteamID(universe={self._universe}, type={self._type}, "
            f"instance={self._instance}, accountid={self._accountid})"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SteamID):
            return NotImplemented
        return self.render_packed() == other.render_packed()

    __hash__ = None  # type: ignore[assignment]


def _build(value: object, **fields: int) -> SteamID:
    """Construct a SteamID from parsed fields, reporting overflow as FormatError."""
    try:
        return SteamID(**fields)
    except ValueError as e:
        raise FormatError(value) from e


def _from_steamid64(value: int | str) -> SteamID:
    number = int(value)
    if not 0 <= number <= MAX_STEAMID64:
        raise FormatError(value)

    return _build(
        value,
        universe=number >> 56,
        type=(number >> 52) & 0xF,
        instance=(number >> 32) & ACCOUNT_INSTANCE_MASK,
        accountid=number & ACCOUNT_ID_MASK,
    )


def _from_steam2(value: str, match: re.Match[str]) -> SteamID:
    universe, mod, account = match.groups()

    return _build(
        value,
        # Universe 0 in Steam2 means public
        universe=int(universe) or Universe.PUBLIC,
        type=Type.INDIVIDUAL,
        instance=Instance.DESKTOP,
        accountid=int(account) * 2 + int(mod),
    )


def _from_steam3(value: str, match: re.Match[str]) -> SteamID:
    type_char, universe, account, instance_text = match.groups()

    instance = int(instance_text) if instance_text is not None else Instance.ALL

    if type_char == "U":
        id_type = Type.INDIVIDUAL
        if instance_text is None:
            instance = Instance.DESKTOP
    elif type_char == CLAN_CHAT_CHAR:
        id_type = Type.CHAT
        instance |= ChatInstanceFlags.CLAN.value
    elif type_char == LOBBY_CHAR:
        id_type = Type.CHAT
        instance |= ChatInstanceFlags.LOBBY.value
    else:
        id_type = type_from_char(type_char)

    return _build(
        value,
        universe=int(universe),
        type=id_type,
        instance=instance,
        accountid=int(account),
    )


def parse_steam_id(value: int | str | None = None) -> SteamID:
    """
    Parse a SteamID from a 64-bit integer or any supported text format.

    Formats are tried in order: SteamID64 (integer or decimal string),
    Steam2, Steam3. Input is matched exactly; surrounding whitespace is not
    stripped.

    Args:
        value: SteamID64 int, or a SteamID64/Steam2/Steam3 string. None or
               an empty string gives the default invalid SteamID.

    Returns:
        Parsed SteamID

    Raises:
        FormatError: If the input matches no supported format, or a field
                     does not fit in its bit width
    """
    if value is None or value == "":
        return SteamID()

    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise FormatError(value)

    if isinstance(value, int) or STEAMID64_PATTERN.fullmatch(value):
        logger.debug(f"Parsing '{value}' as SteamID64")
        return _from_steamid64(value)

    match = STEAM2_PATTERN.fullmatch(value)
    if match:
        logger.debug(f"Parsing '{value}' as Steam2")
        return _from_steam2(value, match)

    match = STEAM3_PATTERN.fullmatch(value)
    if match:
        logger.debug(f"Parsing '{value}' as Steam3")
        return _from_steam3(value, match)

    raise FormatError(value)
