"""Logging setup for the terminal front end."""

import logging

from rich.logging import RichHandler


def configure_logging(level: str = "WARNING") -> None:
    """
    Route log records through Rich.

    Args:
        level: Root log level name (e.g. "DEBUG", "INFO")
    """
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )
    # Keep HTTP client chatter out of the prompt unless debugging
    if level.upper() != "DEBUG":
        logging.getLogger("httpx").setLevel(logging.WARNING)
