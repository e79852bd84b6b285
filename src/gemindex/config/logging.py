"""Root logger setup for the command line."""

from __future__ import annotations

import logging
import os
from typing import Final

from .errors import ConfigurationError

LOG_LEVEL_ENV_VAR: Final[str] = "GEMINDEX_LOG_LEVEL"
LOG_FORMAT: Final[str] = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def resolve_log_level(*, verbose: bool = False) -> int:
    """``--verbose`` means DEBUG; otherwise ``$GEMINDEX_LOG_LEVEL`` or INFO."""

    if verbose:
        return logging.DEBUG
    raw = os.getenv(LOG_LEVEL_ENV_VAR, "").strip()
    if not raw:
        return logging.INFO
    level = logging.getLevelNamesMapping().get(raw.upper())
    if level is None:
        raise ConfigurationError(f"{LOG_LEVEL_ENV_VAR} is not a logging level: {raw!r}")
    return level


def configure_logging(*, verbose: bool = False, force: bool = False) -> int:
    level = resolve_log_level(verbose=verbose)
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%H:%M:%S", force=force)
    return level
