"""Root logger setup for the command-line entry point."""

from __future__ import annotations

import logging

from .env import optional_env_var
from .errors import ConfigurationError

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
# httpx and httpcore log every request at INFO; batches issue hundreds.
QUIET_LOGGERS = ("httpx", "httpcore")


def resolve_log_level(default: int = logging.INFO) -> int:
    """Read ``SUBSTANCE_IMPORT_LOG_LEVEL`` (a level name such as ``DEBUG``)."""

    name = optional_env_var("SUBSTANCE_IMPORT_LOG_LEVEL")
    if name is None:
        return default
    level = logging.getLevelNamesMapping().get(name.upper())
    if level is None:
        raise ConfigurationError(f"SUBSTANCE_IMPORT_LOG_LEVEL has unknown level {name!r}")
    return level


def configure_logging(*, level: int | None = None, force: bool = False) -> None:
    """Initialise the root logger once.

    ``level`` defaults to ``SUBSTANCE_IMPORT_LOG_LEVEL`` or INFO. Pass ``force=True``
    to reconfigure during tests.
    """

    resolved = resolve_log_level() if level is None else level
    logging.basicConfig(level=resolved, format=LOG_FORMAT, datefmt="%H:%M:%S", force=force)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(resolved, logging.WARNING))
