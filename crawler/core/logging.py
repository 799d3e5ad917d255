"""
Logging configuration module for the simulator.

Provides centralized logging setup with colored output using rich. The
simulation modules log through catchery, whose records propagate to the root
logger configured here.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(level: int = logging.INFO, width: int = 120) -> None:
    """
    Sets up logging configuration with rich colored output.

    Args:
        level (int): The logging level to set. Defaults to logging.INFO.
        width (int): The console width used by the rich handler.

    """
    console = Console(width=width, force_terminal=True, force_jupyter=False)

    rich_handler = RichHandler(
        console=console,
        show_time=True,
        show_level=True,
        show_path=False,
        markup=True,
        rich_tracebacks=True,
        tracebacks_show_locals=True,
    )
    rich_handler.setFormatter(
        logging.Formatter("%(name)s - %(message)s", datefmt="[%X]")
    )

    # Replace any handler installed before, e.g. by an earlier call.
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[rich_handler],
        force=True,
    )
