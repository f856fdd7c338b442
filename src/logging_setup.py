"""Centralized logging configuration for postmeta."""

from __future__ import annotations

import logging
import os
from typing import Final

from rich.console import Console
from rich.logging import RichHandler

__all__ = ["configure_logging", "console"]

_LOG_LEVEL_ENV: Final[str] = "POSTMETA_LOG_LEVEL"
_DEFAULT_LEVEL_NAME: Final[str] = "WARNING"

console = Console(stderr=True)


def _resolve_level() -> int:
    """Return the logging level defined via environment variable."""
    level_name = os.getenv(_LOG_LEVEL_ENV, _DEFAULT_LEVEL_NAME).upper()
    level = getattr(logging, level_name, None)
    return level if isinstance(level, int) else logging.WARNING


def configure_logging(*, verbose: bool = False) -> None:
    """Configure the root logger once with a Rich handler.

    Repeated calls only adjust the level.
    """
    root_logger = logging.getLogger()
    level = logging.DEBUG if verbose else _resolve_level()

    handler = next(
        (h for h in root_logger.handlers if getattr(h, "_postmeta_managed", False)),
        None,
    )
    if handler is None:
        handler = RichHandler(
            console=console,
            rich_tracebacks=True,
            show_path=False,
            markup=False,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        handler._postmeta_managed = True  # type: ignore[attr-defined]
        root_logger.addHandler(handler)

    handler.setLevel(level)
    root_logger.setLevel(level)
