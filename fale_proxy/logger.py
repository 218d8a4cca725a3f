"""Logging setup for **FaleProxy**.

The proxy writes through one named logger, :data:`logger`::

    from fale_proxy.logger import logger
    logger.info("Fetched %s", url)

aiohttp's own server loggers (access log, request errors) get the same
handlers, so ``faleproxy serve`` prints one uniform stream and, with
``--log-file``, writes everything to the same rotating file.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, List, Tuple, Union

# --------------------------------------------------------------------------- #
# Constants                                                                   #
# --------------------------------------------------------------------------- #

_DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_LOGGER_NAME: Final[str] = "FaleProxy"
# loggers aiohttp.web uses while serving requests
_AIOHTTP_LOGGERS: Final[Tuple[str, ...]] = ("aiohttp.access", "aiohttp.server", "aiohttp.web")

_MAX_BYTES: Final[int] = 5 * 1024 * 1024
_BACKUP_COUNT: Final[int] = 3

_LevelT = Union[int, str]


# --------------------------------------------------------------------------- #
# Handlers                                                                    #
# --------------------------------------------------------------------------- #


def _build_handlers(log_file: str | Path | None, fmt: str) -> List[logging.Handler]:
    formatter = logging.Formatter(fmt)
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file is not None:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                filename=str(path),
                maxBytes=_MAX_BYTES,
                backupCount=_BACKUP_COUNT,
                encoding="utf-8",
            )
        )
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def _install(lg: logging.Logger, level: _LevelT, handlers: List[logging.Handler]) -> None:
    for old in list(lg.handlers):
        lg.removeHandler(old)
        old.close()
    lg.setLevel(level)
    for handler in handlers:
        lg.addHandler(handler)
    lg.propagate = False


# --------------------------------------------------------------------------- #
# Public API                                                                  #
# --------------------------------------------------------------------------- #


def init_logging(
    level: _LevelT = "INFO",
    log_file: str | Path | None = None,
    log_format: str = _DEFAULT_FORMAT,
) -> logging.Logger:
    """(Re)configure the proxy logger and aiohttp's server loggers.

    Previous handlers are closed and replaced, so repeated calls (the CLI
    calls this once per invocation) never duplicate output.

    Parameters
    ----------
    level
        Numeric or textual logging level (e.g. ``"DEBUG"``).
    log_file
        Rotating logfile. *None* → console only.
    log_format
        Format string for :class:`logging.Formatter`.
    """
    handlers = _build_handlers(log_file, log_format)
    lg = logging.getLogger(_LOGGER_NAME)
    _install(lg, level, handlers)
    for name in _AIOHTTP_LOGGERS:
        _install(logging.getLogger(name), level, handlers)
    return lg


# --------------------------------------------------------------------------- #
# Ready-to-use instance                                                       #
# --------------------------------------------------------------------------- #

logger: logging.Logger = init_logging()

__all__ = ["logger", "init_logging"]
