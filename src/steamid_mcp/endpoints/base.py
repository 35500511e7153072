"""Base endpoint class and tool registry for the SteamID tool surface.

Endpoint classes inherit from BaseEndpoint and mark async methods with the
@endpoint decorator. Defining the class registers its tools; the server only
has to import the module.

Example usage:

    from steamid_mcp.endpoints import BaseEndpoint, endpoint

    class SteamIDTools(BaseEndpoint):
        '''SteamID conversion tools.'''

        @endpoint(
            name="render_steam3",
            description="Render a SteamID in Steam3 format",
            params={
                "steam_id": {
                    "type": "string",
                    "description": "SteamID64, Steam2 or Steam3 ID",
                    "required": True,
                }
            },
        )
        async def render_steam3(self, steam_id: str) -> str:
            return self._resolve_steam_id(steam_id).render_steam3()
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Coroutine, TypeVar

from mcp.types import Tool, TextContent

from steamid_mcp.config import Settings
from steamid_mcp.steamid import SteamID, SteamIDError, parse_steam_id


logger = logging.getLogger(__name__)

# Type for async endpoint methods
F = TypeVar("F", bound=Callable[..., Coroutine[Any, Any, str]])

# Inputs that refer to the configured owner
OWNER_ALIASES = ("me", "my", "myself", "mine")


@dataclass
class EndpointTool:
    """Metadata for a registered endpoint tool."""

    name: str
    description: str
    input_schema: dict[str, Any]
    handler: Callable[..., Coroutine[Any, Any, str]]
    endpoint_class: type["BaseEndpoint"]
    supports_json: bool = False


class EndpointRegistry:
    """Registry of tools across all endpoint classes.

    Populated by BaseEndpointMeta when endpoint classes are defined and read
    by the MCP server to list and dispatch tools.
    """

    _tools: dict[str, EndpointTool] | None = None
    _endpoint_classes: list[type["BaseEndpoint"]] | None = None

    @classmethod
    def _ensure_initialized(cls) -> None:
        if cls._tools is None:
            cls._tools = {}
        if cls._endpoint_classes is None:
            cls._endpoint_classes = []

    @classmethod
    def register_tool(cls, tool: EndpointTool) -> None:
        """Register a tool, replacing any tool with the same name."""
        cls._ensure_initialized()
        assert cls._tools is not None  # For type checker
        if tool.name in cls._tools:
            logger.warning(f"Tool '{tool.name}' already registered, overwriting")
        cls._tools[tool.name] = tool
        logger.debug(f"Registered tool: {tool.name}")

    @classmethod
    def register_endpoint_class(cls, endpoint_class: type["BaseEndpoint"]) -> None:
        cls._ensure_initialized()
        assert cls._endpoint_classes is not None  # For type checker
        if endpoint_class not in cls._endpoint_classes:
            cls._endpoint_classes.append(endpoint_class)
            logger.debug(f"Registered endpoint class: {endpoint_class.__name__}")

    @classmethod
    def get_tool(cls, name: str) -> EndpointTool | None:
        cls._ensure_initialized()
        assert cls._tools is not None  # For type checker
        return cls._tools.get(name)

    @classmethod
    def get_all_tools(cls) -> list[EndpointTool]:
        cls._ensure_initialized()
        assert cls._tools is not None  # For type checker
        return list(cls._tools.values())

    @classmethod
    def get_mcp_tools(cls) -> list[Tool]:
        """All registered tools as MCP Tool definitions."""
        return [
            Tool(
                name=tool.name,
                description=tool.description,
                inputSchema=tool.input_schema,
            )
            for tool in cls.get_all_tools()
        ]

    @classmethod
    def clear(cls) -> None:
        """Clear all registered tools (useful for testing)."""
        cls._tools = {}
        cls._endpoint_classes = []


# JSON Schema keywords copied through from parameter definitions
SCHEMA_KEYWORDS = ("enum", "default", "minimum", "maximum")


def _build_input_schema(params: dict[str, dict[str, Any]]) -> dict[str, Any]:
    """Build a JSON Schema object from parameter definitions."""
    properties: dict[str, Any] = {}
    required: list[str] = []

    for name, param in params.items():
        param_schema = {
            "type": param.get("type", "string"),
            "description": param.get("description", ""),
        }
        for keyword in SCHEMA_KEYWORDS:
            if keyword in param:
                param_schema[keyword] = param[keyword]
        if param.get("required", True):
            required.append(name)

        properties[name] = param_schema

    return {
        "type": "object",
        "properties": properties,
        "required": required,
    }


def endpoint(
    name: str,
    description: str,
    params: dict[str, dict[str, Any]] | None = None,
    supports_json: bool = False,
) -> Callable[[F], F]:
    """
    Decorator to mark an async method as an MCP tool.

    The method is called with keyword arguments named after `params`.

    Args:
        name: Tool name, unique across all endpoints
        description: Human-readable description of what the tool does
        params: Parameter definitions. Each is a dict with keys type,
                description, required, and optionally enum, default,
                minimum, maximum
        supports_json: If True, adds a 'format' parameter switching between
                       'text' (default) and 'json' output

    Returns:
        The undecorated function, with tool metadata attached
    """
    params = params or {}

    if supports_json:
        params = dict(params)
        params["format"] = {
            "type": "string",
            "description": "Output format: 'text' for human-readable output, 'json' for structured JSON",
            "enum": ["text", "json"],
            "default": "text",
            "required": False,
        }

    input_schema = _build_input_schema(params)

    def decorator(func: F) -> F:
        func._endpoint_meta = {  # type: ignore[attr-defined]
            "name": name,
            "description": description,
            "input_schema": input_schema,
            "supports_json": supports_json,
        }
        return func

    return decorator


class BaseEndpointMeta(type):
    """Metaclass that registers endpoint classes and their tools."""

    def __new__(
        mcs,
        name: str,
        bases: tuple[type, ...],
        namespace: dict[str, Any],
        **kwargs: Any,
    ) -> type:
        cls = super().__new__(mcs, name, bases, namespace, **kwargs)

        # Don't register the base class itself
        if name != "BaseEndpoint" and any(
            isinstance(b, BaseEndpointMeta) for b in bases
        ):
            EndpointRegistry.register_endpoint_class(cls)  # type: ignore[arg-type]

            for attr_value in namespace.values():
                meta = getattr(attr_value, "_endpoint_meta", None)
                if meta is None:
                    continue
                EndpointRegistry.register_tool(
                    EndpointTool(
                        name=meta["name"],
                        description=meta["description"],
                        input_schema=meta["input_schema"],
                        handler=attr_value,
                        endpoint_class=cls,  # type: ignore[arg-type]
                        supports_json=meta["supports_json"],
                    )
                )

        return cls


class BaseEndpoint(metaclass=BaseEndpointMeta):
    """
    Base class for SteamID tool endpoints.

    Attributes:
        settings: Server settings shared by all endpoints
    """

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    def _resolve_steam_id(self, steam_id: str) -> SteamID:
        """
        Parse a user-supplied SteamID, handling 'me'/'my' shortcuts.

        Args:
            steam_id: SteamID64, Steam2 or Steam3 ID, or 'me'/'my' for the
                      configured owner

        Returns:
            Parsed SteamID

        Raises:
            SteamIDError: If the input cannot be parsed, or 'me' is used
                          without an owner configured
        """
        steam_id = steam_id.strip()
        if steam_id.lower() in OWNER_ALIASES:
            if not self.settings.owner_steam_id:
                raise SteamIDError(
                    "No owner Steam ID configured. "
                    "Set STEAM_USER_ID environment variable to use 'me'/'my' shortcuts."
                )
            steam_id = self.settings.owner_steam_id

        return parse_steam_id(steam_id)

    @classmethod
    def get_tools(cls) -> list[Tool]:
        """MCP Tool definitions for this endpoint class."""
        tools = []
        for attr_name in dir(cls):
            meta = getattr(getattr(cls, attr_name), "_endpoint_meta", None)
            if meta is not None:
                tools.append(
                    Tool(
                        name=meta["name"],
                        description=meta["description"],
                        inputSchema=meta["input_schema"],
                    )
                )
        return tools


class EndpointManager:
    """
    Instantiates endpoint classes and routes tool calls to them.
    """

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self._instances: dict[type[BaseEndpoint], BaseEndpoint] = {}

    def _get_instance(self, endpoint_class: type[BaseEndpoint]) -> BaseEndpoint:
        if endpoint_class not in self._instances:
            self._instances[endpoint_class] = endpoint_class(self.settings)
        return self._instances[endpoint_class]

    def get_all_tools(self) -> list[Tool]:
        return EndpointRegistry.get_mcp_tools()

    async def call_tool(
        self, name: str, arguments: dict[str, Any] | None
    ) -> list[TextContent]:
        """
        Route a tool call to its endpoint handler.

        Handler exceptions are logged and returned as an error text result.

        Raises:
            ValueError: If the tool is not registered
        """
        tool = EndpointRegistry.get_tool(name)
        if not tool:
            raise ValueError(f"Unknown tool: {name}")

        instance = self._get_instance(tool.endpoint_class)

        try:
            result = await tool.handler(instance, **(arguments or {}))
            return [TextContent(type="text", text=result)]
        except Exception as e:
            logger.exception(f"Error executing tool {name}")
            return [TextContent(type="text", text=f"Error: {e}")]
