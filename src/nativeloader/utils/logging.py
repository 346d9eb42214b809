"""Logging configuration with Rich formatting.

Every step of an extraction (resolve, copy, load) is reported as a leveled
log record, rendered by Rich so diagnostics stay readable on a terminal.
"""

import logging
import sys
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

_KEYWORDS = ["resource", "extract", "load", "scratch", "cleanup"]


def _rich_handler(
    console: Console,
    level: int,
    rich_tracebacks: bool = True,
    show_path: bool = False,
    show_time: bool = True,
) -> RichHandler:
    handler = RichHandler(
        console=console,
        show_path=show_path,
        show_time=show_time,
        rich_tracebacks=rich_tracebacks,
        markup=True,
        show_level=True,
        level=level,
        omit_repeated_times=False,
        keywords=_KEYWORDS,
    )
    handler.setFormatter(logging.Formatter(fmt="%(message)s", datefmt="[%X]"))
    return handler


def setup_logging(
    level: int = logging.INFO,
    show_path: bool = False,
    show_time: bool = True,
    rich_tracebacks: bool = True,
    console: Optional[Console] = None,
) -> None:
    """
    Configure the root logger with Rich formatting.

    Args:
        level: Logging level (default: INFO).
        show_path: Show file path in log messages (default: False).
        show_time: Show timestamp in log messages (default: True).
        rich_tracebacks: Use Rich for traceback formatting (default: True).
        console: Optional Rich Console instance (default: creates new one).
    """
    if console is None:
        console = Console(stderr=True)

    handler = _rich_handler(
        console,
        level,
        rich_tracebacks=rich_tracebacks,
        show_path=show_path,
        show_time=show_time,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.propagate = False


def configure_module_logger(
    module_name: str,
    level: int = logging.INFO,
    use_colors: bool = True,
) -> logging.Logger:
    """
    Configure a module-specific logger.

    Args:
        module_name: Module name (typically __name__).
        level: Logging level.
        use_colors: Enable colored output (default: True).

    Returns:
        Configured logger instance.
    """
    logger = logging.getLogger(module_name)
    logger.setLevel(level)
    logger.handlers.clear()

    handler: Union[RichHandler, logging.Handler]
    if use_colors:
        console = Console(stderr=True, force_terminal=True, legacy_windows=False)
        # NOTSET lets the logger do the filtering
        handler = _rich_handler(console, logging.NOTSET)
    else:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )

    logger.addHandler(handler)
    logger.propagate = False

    return logger
