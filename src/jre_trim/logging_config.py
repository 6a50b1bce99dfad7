"""
Logging for jre-trim.

Every module logs through ``get_logger(__name__)`` under the ``jre_trim``
namespace. The CLI calls ``setup_logging`` once per command so analysis
warnings (skipped class files, jdeps failures, dropped JavaFX modules) reach
stderr without mixing with ``--json`` output on stdout.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER_NAME = "jre_trim"


def setup_logging(
    verbose: bool = False, quiet: bool = False, log_file: Optional[str] = None
) -> logging.Logger:
    """
    Route jre-trim log records to a Rich handler on stderr.

    Args:
        verbose: DEBUG level, with per-class parsing and unmapped-type records
        quiet: ERROR level only, for scripted builds
        log_file: Also append plain-text records here (useful for jlink runs)

    Returns:
        The ``jre_trim`` namespace logger
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    handlers: list[logging.Handler] = [
        RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            tracebacks_show_locals=verbose,
            markup=False,
            show_time=verbose,
            show_path=verbose,
        )
    ]

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s %(levelname)-7s %(name)s: %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
            )
        )
        handlers.append(file_handler)

    # force=True so repeated CLI invocations in one process pick up the new level
    logging.basicConfig(
        level=level, format="%(message)s", datefmt="[%X]", handlers=handlers, force=True
    )

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger under the ``jre_trim`` namespace.

    ``get_logger("builder.image")`` and ``get_logger("jre_trim.builder.image")``
    name the same logger; None gives the namespace root.
    """
    if name is None:
        return logging.getLogger(ROOT_LOGGER_NAME)

    if not name.startswith(ROOT_LOGGER_NAME):
        name = f"{ROOT_LOGGER_NAME}.{name}"

    return logging.getLogger(name)
