"""Run the yaml-secrets MCP server (``python -m yaml_secrets_mcp``).

The tools module must be imported before the server starts so its
``@mcp.tool`` registrations exist when clients list tools. The GitHub Action
has a separate entry point, ``yaml_secrets_mcp.action``.
"""


def main() -> None:
    """Register the MCP tools and start the stdio server."""
    from . import tools  # noqa: F401  registers the tools on the shared FastMCP instance
    from .server import main as run_server

    run_server()


if __name__ == "__main__":
    main()
