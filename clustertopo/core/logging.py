"""Logging setup for the clustertopo CLI and test runs."""

from __future__ import annotations

import sys
from collections.abc import Iterable

from loguru import logger

LOG_FORMAT = "{time:HH:mm:ss.SSS} | {level: <8} | {name}:{line} - {message}"
PACKAGE = "clustertopo"


def scope_module(scope: str) -> str:
    """Expand ``core.topology`` to ``clustertopo.core.topology``."""
    scope = scope.strip()
    if scope == PACKAGE or scope.startswith(f"{PACKAGE}."):
        return scope
    return f"{PACKAGE}.{scope}"


def configure_logging(
    level: str,
    *,
    debug_scopes: Iterable[str] = (),
    colorize: bool = False,
) -> int:
    """Replace loguru's handlers with one stderr sink.

    Records below ``level`` are dropped, except DEBUG records from modules
    named in ``debug_scopes``. Returns the handler id.
    """
    logger.remove()

    modules = {scope_module(scope): "DEBUG" for scope in debug_scopes if scope.strip()}
    if not modules:
        return logger.add(sys.stderr, level=level, format=LOG_FORMAT, colorize=colorize)

    # loguru picks the most specific module entry; "" covers everything else
    return logger.add(
        sys.stderr,
        level="DEBUG",
        format=LOG_FORMAT,
        colorize=colorize,
        filter={"": level.upper(), **modules},
    )
