"""FastMCP server for secret interpolation.

The server owns a single secret provider, built from the environment when the
lifespan starts and handed to every tool call through ``AppContext``. Tool
definitions live in the tools module; this module only creates the
``FastMCP`` instance and the console entry point.
"""

import logging
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from mcp.server.fastmcp import FastMCP

from .config import ProviderSettings, configure_logging
from .context import AppContext, AppContextType
from .engine.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def app_lifespan(_server: FastMCP) -> AsyncIterator[AppContext]:
    """Build the provider from ``YAML_SECRETS_*`` variables for the server's lifetime.

    See the config module for the variables that are read.

    Raises:
        ConfigurationError: If a provider setting is invalid
    """
    settings = ProviderSettings.from_env()
    provider = settings.create_provider()

    logger.info(f"Using {provider.name} (min mask length {settings.min_mask_length})")
    if settings.provider == "secretmanager" and not settings.access_token:
        logger.warning(
            "GOOGLE_OAUTH_ACCESS_TOKEN is not set. Secret Manager requests will be unauthenticated."
        )

    try:
        yield AppContext(settings=settings, provider=provider)
    finally:
        # Providers open their HTTP clients per request
        logger.info("Secret provider released")


mcp = FastMCP("yaml_secrets_mcp", lifespan=app_lifespan)


def main() -> None:
    """Serve MCP over stdio until the client disconnects or Ctrl+C.

    Exits with status 1 on configuration or server errors.
    """
    configure_logging()
    logger.info("yaml-secrets MCP server starting on stdio")

    try:
        mcp.run()
    except KeyboardInterrupt:
        logger.info("Interrupted, stopping")
    except ConfigurationError as e:
        logger.error(f"Invalid server configuration: {e}")
        sys.exit(1)
    except Exception as e:
        logger.exception(f"MCP server failed: {e}")
        sys.exit(1)

    logger.info("yaml-secrets MCP server stopped")


__all__ = ["AppContext", "AppContextType", "main", "mcp"]
