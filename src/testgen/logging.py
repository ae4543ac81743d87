"""Logging configuration for testgen."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

from rich.console import Console
from rich.logging import RichHandler
from rich.progress import (
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)

# Console instances for stdout/stderr
console = Console()
err_console = Console(stderr=True)

LOGGER_NAME = "testgen"


def setup_logging(
    verbosity: Literal["quiet", "normal", "verbose"] = "normal",
    log_file: Path | None = None,
) -> logging.Logger:
    """Configure logging based on verbosity level.

    Args:
        verbosity: Console verbosity
        log_file: Optional file that receives a plain-text copy of every record
    """
    logger = logging.getLogger(LOGGER_NAME)

    # Clear existing handlers
    logger.handlers.clear()

    level_map = {
        "quiet": logging.ERROR,
        "normal": logging.INFO,
        "verbose": logging.DEBUG,
    }
    logger.setLevel(level_map[verbosity])

    handler = RichHandler(
        console=err_console,
        show_time=verbosity == "verbose",
        show_path=verbosity == "verbose",
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


def get_logger() -> logging.Logger:
    """Get the testgen logger instance."""
    return logging.getLogger(LOGGER_NAME)


def create_progress() -> Progress:
    """Create a Rich spinner for generation phases."""
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TimeElapsedColumn(),
        console=err_console,
        transient=True,
    )


def print_error(message: str) -> None:
    """Print an error message to stderr."""
    err_console.print(f"[red]Error:[/red] {message}")


def print_warning(message: str) -> None:
    """Print a warning message to stderr."""
    err_console.print(f"[yellow]Warning:[/yellow] {message}")


def print_success(message: str) -> None:
    """Print a success message to stdout."""
    console.print(f"[green]{message}[/green]")


def print_info(message: str) -> None:
    """Print an info message to stdout."""
    console.print(message)
