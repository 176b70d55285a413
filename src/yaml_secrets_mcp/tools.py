"""MCP tool implementations for secret interpolation.

Following official Anthropic MCP Python SDK patterns:
- Tool functions decorated with @mcp.tool()
- Flat parameter signatures with Annotated types for validation
- Async functions for all tools
- Clear docstrings (become tool descriptions)

Tools never return fetched secret values. Errors from a run that fetched
secrets are redacted with that run's masker before they are returned.
"""

import logging
from typing import Annotated, Any

from mcp.types import ToolAnnotations
from pydantic import Field, ValidationError

from .config import ActionConfig
from .context import AppContextType
from .engine.exceptions import YamlSecretsError
from .engine.interpolation import interpolate_with_report
from .engine.reference import parse_secret_references
from .engine.secrets import SecretError
from .runner import run_interpolation
from .server import mcp

logger = logging.getLogger(__name__)

SECRETS_DESCRIPTION = "Entries of the form <locator>:<OUTPUT_KEY>, newline or comma separated"

_NO_CONTEXT = {
    "status": "failure",
    "error": "Server context not available. Tool requires context to access resources.",
}


@mcp.tool(
    name="parse_secret_references",
    annotations=ToolAnnotations(
        title="Parse Secret References",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    )
)
async def parse_references(
    secrets: Annotated[
        str,
        Field(
            description=SECRETS_DESCRIPTION,
            min_length=1,
            max_length=100000,
        ),
    ],
) -> dict[str, Any]:
    """Parse a secrets specification and return locator/output pairs without fetching."""
    try:
        references = parse_secret_references(secrets)
    except YamlSecretsError as e:
        return {"status": "failure", "error": str(e)}

    return {
        "status": "success",
        "references": [{"locator": ref.locator, "output": ref.output} for ref in references],
    }


@mcp.tool(
    annotations=ToolAnnotations(
        title="Interpolate YAML",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    )
)
async def interpolate_yaml(
    document: Annotated[
        str,
        Field(description="YAML document text", max_length=1000000),
    ],
    substitutions: Annotated[
        dict[str, str],
        Field(description="Output key -> value; replaces scalars containing $KEY or ${KEY}"),
    ],
    verbose: Annotated[
        bool,
        Field(description="Log every substitution path at INFO"),
    ] = False,
) -> dict[str, Any]:
    """Replace $KEY / ${KEY} placeholder scalars in YAML text with the given values."""
    try:
        report = interpolate_with_report(document, substitutions, verbose=verbose)
    except YamlSecretsError as e:
        return {"status": "failure", "error": str(e)}

    return {
        "status": "success",
        "document": report.document,
        "substitutions": [{"path": s.path, "key": s.key} for s in report.substitutions],
    }


@mcp.tool(
    annotations=ToolAnnotations(
        title="Interpolate Secrets Into File",
        readOnlyHint=False,
        destructiveHint=True,  # Rewrites the target file
        idempotentHint=False,
        openWorldHint=True,  # Fetches secrets from the configured provider
    )
)
async def interpolate_secrets_file(
    secrets: Annotated[
        str,
        Field(
            description=SECRETS_DESCRIPTION,
            min_length=1,
            max_length=100000,
        ),
    ],
    document_path: Annotated[
        str,
        Field(description="Path of the YAML file to interpolate", min_length=1),
    ],
    output_path: Annotated[
        str | None,
        Field(description="Where to write the result (default: rewrite document_path)"),
    ] = None,
    min_mask_length: Annotated[
        int | None,
        Field(description="Minimum secret line length to redact from responses", ge=0),
    ] = None,
    *,
    ctx: AppContextType,
) -> dict[str, Any]:
    """Fetch secrets and substitute them into a YAML file. Returns paths and keys, never values."""
    if ctx is None:
        return dict(_NO_CONTEXT)

    app_ctx = ctx.request_context.lifespan_context
    masker = app_ctx.create_masker(min_mask_length)

    try:
        config = ActionConfig.model_validate(
            {
                **app_ctx.settings.model_dump(),
                "secrets": secrets,
                "document_path": document_path,
                "output_path": output_path,
                "min_mask_length": masker.min_length,
            }
        )
    except ValidationError as e:
        return {"status": "failure", "error": f"Invalid arguments: {e}"}

    try:
        result = await run_interpolation(config, app_ctx.provider, masker)
    except (YamlSecretsError, SecretError, OSError) as e:
        logger.warning(f"Interpolation failed: {masker.redact(str(e))}")
        return {"status": "failure", "error": masker.redact(str(e))}

    return {"status": "success", **result.to_dict()}
