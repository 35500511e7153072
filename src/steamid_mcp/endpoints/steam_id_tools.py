"""SteamID conversion and validation tools.

These tools work entirely offline: they parse and render SteamIDs locally
and never check whether an account exists.
"""

import json
from enum import IntEnum
from typing import Any

from steamid_mcp.endpoints.base import BaseEndpoint, endpoint
from steamid_mcp.steamid import (
    SteamID,
    SteamIDError,
    Type,
    Universe,
    UnsupportedOperation,
)


STEAM_ID_PARAM = {
    "type": "string",
    "description": (
        "SteamID in any supported format: SteamID64 (76561198006409530), "
        "Steam2 (STEAM_0:0:23071901) or Steam3 ([U:1:46143802]). Use 'me' or 'my' "
        "for your own ID (requires STEAM_USER_ID to be configured)."
    ),
    "required": True,
}


def _enum_name(enum_class: type[IntEnum], value: int) -> str:
    """Name of an enum member, or a placeholder for values outside the enum."""
    try:
        return enum_class(value).name
    except ValueError:
        return f"UNKNOWN ({value})"


def _error(message: str, format: str) -> str:
    if format == "json":
        return json.dumps({"error": message})
    return f"Error: {message}"


class SteamIDTools(BaseEndpoint):
    """Offline SteamID parsing, rendering and validation."""

    def _renderings(self, sid: SteamID, newer_format: bool) -> dict[str, Any]:
        try:
            steam2 = sid.render_steam2(newer_format)
        except UnsupportedOperation:
            steam2 = None

        return {
            "steamid64": sid.render_steam64(),
            "steam2": steam2,
            "steam3": sid.render_steam3(),
            "universe": _enum_name(Universe, sid.universe),
            "type": _enum_name(Type, sid.type),
            "instance": sid.instance,
            "accountid": sid.accountid,
        }

    def _format_renderings(self, title: str, data: dict[str, Any]) -> str:
        output = [
            title,
            f"SteamID64: {data['steamid64']}",
            f"Steam2: {data['steam2'] or 'not available for this type'}",
            f"Steam3: {data['steam3']}",
            "",
            f"Universe: {data['universe']}",
            f"Type: {data['type']}",
            f"Instance: {data['instance']}",
            f"Account ID: {data['accountid']}",
        ]
        return "\n".join(output)

    @endpoint(
        name="convert_steam_id",
        description=(
            "Convert a SteamID between formats. Accepts SteamID64, Steam2 or Steam3 "
            "and returns all renderings plus the decoded universe, type, instance "
            "and account ID. Works offline; does not check the account exists."
        ),
        supports_json=True,
        params={
            "steam_id": STEAM_ID_PARAM,
            "newer_format": {
                "type": "boolean",
                "description": (
                    "Render public-universe Steam2 IDs as STEAM_1:... instead of "
                    "STEAM_0:... (defaults to the server setting)"
                ),
                "required": False,
            },
        },
    )
    async def convert_steam_id(
        self,
        steam_id: str,
        newer_format: bool | None = None,
        format: str = "text",
    ) -> str:
        """Render a SteamID in every supported format."""
        try:
            sid = self._resolve_steam_id(steam_id)
        except SteamIDError as e:
            return _error(str(e), format)

        if newer_format is None:
            newer_format = self.settings.newer_steam2_format

        data = self._renderings(sid, newer_format)

        if format == "json":
            return json.dumps(data, indent=2)
        return self._format_renderings(f"SteamID {steam_id.strip()}", data)

    @endpoint(
        name="validate_steam_id",
        description=(
            "Check whether a SteamID is structurally valid, whether it is a normal "
            "individual user ID, and whether it is a group chat or lobby ID. "
            "Does not check that the account exists."
        ),
        supports_json=True,
        params={"steam_id": STEAM_ID_PARAM},
    )
    async def validate_steam_id(self, steam_id: str, format: str = "text") -> str:
        """Report the validator predicates for a SteamID."""
        try:
            sid = self._resolve_steam_id(steam_id)
        except SteamIDError as e:
            return _error(str(e), format)

        data = {
            "steamid64": sid.render_steam64(),
            "universe": _enum_name(Universe, sid.universe),
            "type": _enum_name(Type, sid.type),
            "is_valid": sid.is_valid(),
            "is_valid_individual": sid.is_valid_individual(),
            "is_group_chat": sid.is_group_chat(),
            "is_lobby": sid.is_lobby(),
        }

        if format == "json":
            return json.dumps(data, indent=2)

        def yes_no(flag: bool) -> str:
            return "yes" if flag else "no"

        output = [
            f"SteamID {steam_id.strip()} ({data['steamid64']})",
            f"Universe: {data['universe']}",
            f"Type: {data['type']}",
            "",
            f"Valid: {yes_no(data['is_valid'])}",
            f"Valid individual: {yes_no(data['is_valid_individual'])}",
            f"Group chat: {yes_no(data['is_group_chat'])}",
            f"Lobby: {yes_no(data['is_lobby'])}",
        ]
        return "\n".join(output)

    @endpoint(
        name="steam_id_from_account_id",
        description=(
            "Build a public individual SteamID from a 32-bit account ID "
            "(the number in [U:1:X]) and render it in every format."
        ),
        supports_json=True,
        params={
            "account_id": {
                "type": "integer",
                "description": "32-bit Steam account ID, e.g. 46143802",
                "required": True,
                "minimum": 1,
                "maximum": 0xFFFFFFFF,
            },
        },
    )
    async def steam_id_from_account_id(
        self, account_id: int, format: str = "text"
    ) -> str:
        """Render an individual SteamID built from an account ID."""
        sid = SteamID.from_individual_account_id(account_id)
        if not sid.is_valid():
            return _error(f"Invalid account ID: {account_id}", format)

        data = self._renderings(sid, self.settings.newer_steam2_format)

        if format == "json":
            return json.dumps(data, indent=2)
        return self._format_renderings(f"Account ID {account_id}", data)
