"""Library logging with a TRACE level below DEBUG.

kaydle never installs handlers; applications configure output through the
standard ``logging`` machinery.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Mapping

TRACE_LEVEL: Final[int] = logging.DEBUG - 5


class KaydleLogger(logging.Logger):
    """Logger with support for a TRACE level used for per-node dispatch decisions."""

    def trace(
        self,
        msg: object,
        *args: object,
        extra: Mapping[str, object] | None = None,
    ) -> None:
        """Log 'msg % args' with severity 'TRACE'."""
        if self.isEnabledFor(TRACE_LEVEL):
            self._log(
                TRACE_LEVEL,
                msg=msg,
                args=args,
                extra=extra,
                stacklevel=2,
            )


if logging.getLevelName(TRACE_LEVEL) != "TRACE":
    logging.addLevelName(TRACE_LEVEL, "TRACE")


class KaydleLoggerAdapter(logging.LoggerAdapter):
    """Provides ``trace()`` for a plain logger created before kaydle was imported."""

    def trace(
        self,
        msg: object,
        *args: object,
        extra: Mapping[str, object] | None = None,
    ) -> None:
        """Log 'msg % args' with severity 'TRACE'."""
        if self.isEnabledFor(TRACE_LEVEL):
            self.logger.log(TRACE_LEVEL, msg, *args, extra=extra, stacklevel=2)


def get_logger(name: str) -> KaydleLogger | KaydleLoggerAdapter:
    """Return the logger called ``name`` with ``trace()`` support.

    The logger class is swapped in only for the duration of the lookup, so
    loggers created by the host application are unaffected. A logger the host
    already created under ``name`` keeps its class and is wrapped instead.
    """
    manager = logging.Logger.manager
    previous = manager.loggerClass
    manager.setLoggerClass(KaydleLogger)
    try:
        logger = logging.getLogger(name)
    finally:
        manager.loggerClass = previous
    if isinstance(logger, KaydleLogger):
        return logger
    return KaydleLoggerAdapter(logger)
