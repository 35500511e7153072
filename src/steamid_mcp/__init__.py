"""SteamID codec with an MCP tool server."""

__version__ = "0.1.0"
