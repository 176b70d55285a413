"""Shared context types for the MCP server.

This module contains context types used across server and tools modules,
separated to avoid circular imports.
"""

from dataclasses import dataclass

from mcp.server.fastmcp import Context
from mcp.server.session import ServerSession

from .config import ProviderSettings
from .engine.secrets import SecretMasker, SecretProvider


@dataclass
class AppContext:
    """Application context containing shared resources for MCP tools.

    Created during server startup and made available to all tools via the
    Context parameter.
    """

    settings: ProviderSettings
    provider: SecretProvider

    def create_masker(self, min_length: int | None = None) -> SecretMasker:
        """Create a fresh masker for one tool call.

        No masked value is shared between calls. Tool responses are redacted
        with this masker before they are returned.
        """
        if min_length is None:
            min_length = self.settings.min_mask_length
        return SecretMasker(min_length=min_length)


# Type alias for MCP tool context parameter
AppContextType = Context[ServerSession, AppContext]


__all__ = ["AppContext", "AppContextType"]
