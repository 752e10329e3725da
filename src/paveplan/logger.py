"""Logging for paveplan with verbosity levels between the standard ones."""

from __future__ import annotations

import logging
import sys
from typing import Any, TextIO

# Custom levels sit between the standard ones
CHANGES_LEVEL = 25  # INFO < CHANGES < WARNING: mutations, verbosity 1
CHECKS_LEVEL = 15  # DEBUG < CHECKS < INFO: per-task computation steps, verbosity 2

logging.addLevelName(CHANGES_LEVEL, "CHANGES")
logging.addLevelName(CHECKS_LEVEL, "CHECKS")

VERBOSITY_SILENT = 0
VERBOSITY_CHANGES = 1
VERBOSITY_CHECKS = 2
VERBOSITY_DEBUG = 3

_LEVELS = {
    VERBOSITY_SILENT: logging.ERROR,
    VERBOSITY_CHANGES: CHANGES_LEVEL,
    VERBOSITY_CHECKS: CHECKS_LEVEL,
    VERBOSITY_DEBUG: logging.DEBUG,
}


class PaveplanLogger(logging.Logger):
    """Logger with semantic methods for the two extra levels.

    - changes(): task dates or dependencies were rewritten
    - checks(): forward/backward pass values for a single task
    """

    def changes(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log a mutation (verbosity level 1)."""
        if self.isEnabledFor(CHANGES_LEVEL):
            self._log(CHANGES_LEVEL, msg, args, **kwargs)

    def checks(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log a computation step (verbosity level 2)."""
        if self.isEnabledFor(CHECKS_LEVEL):
            self._log(CHECKS_LEVEL, msg, args, **kwargs)


def get_logger() -> PaveplanLogger:
    """Return the shared paveplan logger."""
    logging.setLoggerClass(PaveplanLogger)
    logger = logging.getLogger("paveplan")
    assert isinstance(logger, PaveplanLogger)
    return logger


def setup_logger(verbosity: int, stream: TextIO | None = None) -> None:
    """Configure the paveplan logger.

    Safe to call repeatedly; each call replaces the previous handler.

    Args:
        verbosity: 0=errors only, 1=changes, 2=checks, 3=debug
        stream: Output stream, stderr when omitted
    """
    logger = get_logger()
    logger.handlers.clear()
    logger.setLevel(_LEVELS.get(verbosity, logging.ERROR))

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.propagate = False


def reset_logger() -> None:
    """Drop handlers and return to errors-only (used between tests)."""
    logger = get_logger()
    logger.handlers.clear()
    logger.setLevel(logging.ERROR)
    logger.propagate = True


def checks_enabled() -> bool:
    """True when checks-level output is on (verbosity >= 2)."""
    return get_logger().isEnabledFor(CHECKS_LEVEL)
