"""GitHub Action entry point.

Reads the action inputs, fetches the referenced secrets, masks them in the
workflow log, interpolates the YAML document in place (or into
``output_file``) and sets the ``output_file`` step output.

Any failure is reported once as
``yaml-secrets failed with: <message>`` through an ``::error::`` command
and the process exits with status 1. Messages are redacted before printing.
"""

import asyncio
import logging

from . import github
from .config import ActionConfig, configure_logging
from .engine.secrets import SecretMasker
from .runner import RunResult, run_interpolation

logger = logging.getLogger(__name__)


async def run(config: ActionConfig, masker: SecretMasker) -> RunResult:
    """Execute one action run and set the ``output_file`` step output."""
    provider = config.create_provider()
    logger.info(f"Secret provider: {provider.name}")

    result = await run_interpolation(config, provider, masker)
    github.set_output("output_file", str(result.output_file))
    return result


def main() -> None:
    """Entry point for the ``yaml-secrets`` console script."""
    configure_logging()

    masker: SecretMasker | None = None
    try:
        config = ActionConfig.from_env()
        masker = SecretMasker(min_length=config.min_mask_length, sink=github.add_mask)
        result = asyncio.run(run(config, masker))
    except Exception as e:
        logger.debug("Action failed", exc_info=True)
        message = str(e) if masker is None else masker.redact(str(e))
        github.set_failed(f"yaml-secrets failed with: {message}")

    logger.info(f"Interpolated {len(result.substitutions)} value(s) into {result.output_file}")


if __name__ == "__main__":
    main()
