"""
logging_utils.py

Logging helpers used across the book notes client.

Two kinds of output exist:

    • diagnostic logs (reads that degraded, writes, auth events, uploads)
      go through the standard `logging` module via get_logger()
    • high-level CLI progress goes through log_verbose(), which prints with
      Typer's echo so it matches the rest of the CLI output
"""

import logging
import threading

import typer

_LOCK = threading.Lock()
_FORMAT = "[booknotes] %(asctime)s %(levelname)s %(name)s %(message)s"


def get_logger(name: str = "booknotes", level: str = "INFO") -> logging.Logger:
    """
    Return a logger with a single stream handler at `level`.

    Calling this repeatedly for the same name never stacks handlers; the
    level is updated on each call so the latest configuration wins.
    """
    with _LOCK:
        logger = logging.getLogger(name)
        logger.setLevel(getattr(logging, level.upper(), logging.INFO))
        if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter(_FORMAT))
            logger.addHandler(handler)
        return logger


def log_verbose(message: str, verbose: bool) -> None:
    """
    Print a high-level progress message when verbose mode is enabled.

    Parameters
    ----------
    message : str
        Short, plain-English description of what the command is doing
        (e.g., "Signing in...", "Refreshing feed...").

    verbose : bool
        Whether verbose mode is active. When False, this function does
        nothing.
    """
    if verbose:
        typer.echo(message)
