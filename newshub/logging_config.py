"""Logging setup for the CLI and long-running callers."""

import logging
from pathlib import Path
from typing import Optional

from rich.logging import RichHandler


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """Route newshub loggers through rich, optionally mirroring to a file."""
    handlers: list[logging.Handler] = [
        RichHandler(rich_tracebacks=True, show_path=False),
    ]

    if log_file:
        path = Path(log_file).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
        )
        handlers.append(file_handler)

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(message)s",
        datefmt="[%X]",
        handlers=handlers,
        force=True,
    )

    # httpx logs every request at INFO, which would leak API keys in query strings
    logging.getLogger("httpx").setLevel(logging.WARNING)
