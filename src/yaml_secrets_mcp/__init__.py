"""yaml-secrets-mcp: substitute secret values into YAML documents."""

__version__ = "0.1.0"
