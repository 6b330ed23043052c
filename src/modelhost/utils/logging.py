"""Logging utilities."""

import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(level: str = "INFO"):
    """Setup logging configuration.

    Everything goes to stderr: stdout is inherited by the downstream
    process after the handoff and must stay clean.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        datefmt="%H:%M:%S",
        handlers=[
            RichHandler(
                console=Console(stderr=True),
                show_path=False,
                markup=False,
            )
        ],
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
