"""Logging setup for the maskperms command line."""

from __future__ import annotations

import logging
from typing import Final

# emit INFO records on every start (migration checks, engine setup)
NOISY_LOGGERS: Final[tuple[str, ...]] = ("alembic", "sqlalchemy")


def configure_logging(*, level: int = logging.INFO) -> None:
    """Initialise the root logger with a terse CLI format.

    Database and migration loggers stay at WARNING unless ``level`` is DEBUG.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
    )
    library_level = logging.NOTSET if level <= logging.DEBUG else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)
