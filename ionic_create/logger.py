"""Diagnostic logging for ionic-create.

The pipeline treats its logger as a pure sink: it writes warnings for
degraded optional steps and debug traces in verbose mode, and never reads
anything back.  Output goes through Rich so it interleaves cleanly with the
stage lines printed on the shared console.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "ionic_create"


def get_logger(
    verbose: bool = False,
    name: str = LOGGER_NAME,
    console: Console | None = None,
) -> logging.Logger:
    """Return the tool logger, configured once with a ``RichHandler``.

    Args:
        verbose: Emit ``DEBUG`` records when ``True``, ``INFO`` otherwise.
        name: Logger name; child modules use ``ionic_create.<module>``.
        console: Console the handler renders to (stderr by default).
    """
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    if not any(isinstance(handler, RichHandler) for handler in logger.handlers):
        handler = RichHandler(
            console=console or Console(stderr=True),
            show_time=False,
            show_path=False,
            markup=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
        logger.propagate = False

    return logger
