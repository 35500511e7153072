"""MCP tool endpoints.

Each endpoint module defines a BaseEndpoint subclass whose @endpoint methods
are exposed as MCP tools.
"""

from .base import BaseEndpoint, endpoint, EndpointRegistry

__all__ = ["BaseEndpoint", "endpoint", "EndpointRegistry"]
