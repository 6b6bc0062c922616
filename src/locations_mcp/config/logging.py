"""Root logger setup for the CLI and the MCP server."""

from __future__ import annotations

import logging


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Send log records to stderr; stdout belongs to the MCP stdio protocol.

    ``force=True`` replaces handlers installed earlier (tests, repeated CLI runs).
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
