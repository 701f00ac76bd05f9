"""Logging helpers shared by the elementgen pipeline and CLI."""

from __future__ import annotations

import logging
from pathlib import Path

ROOT_LOGGER = "elementgen"
CONSOLE_FORMAT = "[elementgen] %(levelname)s %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``elementgen.<name>``, or the package root logger."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}" if name else ROOT_LOGGER)


def configure_logging(*, verbose: bool = False, log_file: Path | None = None) -> logging.Logger:
    """Send elementgen records to stderr and, with ``log_file``, to a run log.

    Calling it again replaces the handlers of the previous call, closing any
    open run log first.
    """
    level = logging.DEBUG if verbose else logging.INFO
    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(level)
    root.propagate = False

    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    root.addHandler(console)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        # The run log always records debug detail, whatever the console shows.
        run_log = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        run_log.setLevel(logging.DEBUG)
        run_log.setFormatter(logging.Formatter(FILE_FORMAT))
        root.addHandler(run_log)
        root.setLevel(logging.DEBUG)

    return root


__all__ = ["configure_logging", "get_logger"]
