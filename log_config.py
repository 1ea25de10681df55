"""
Loggning med rich
"""

import logging

from rich.logging import RichHandler

from config import LOG_LEVEL


def configure(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_time=False, show_path=False)],
    )
    # httpx loggar varje anrop på INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
