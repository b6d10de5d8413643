"""Logging setup shared by the CLI and the web server."""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(level: str = "INFO", console: Optional[Console] = None) -> None:
    """Route stdlib logging through a rich handler.

    Args:
        level: Level name such as "DEBUG" or "INFO"
        console: Optional console to write to (defaults to stderr)
    """
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    logging.basicConfig(
        level=level.upper(),
        format="%(name)s: %(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )
    # requests' connection pool is noisy at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)
