from __future__ import annotations

import logging
import sys
from typing import Any, Mapping, Optional, Protocol

from ops.structured_logger import JsonFormatter

DEFAULT_LOGGER_NAME = "whatsapp.client"


class Logger(Protocol):
    def info(self, message: str, context: Optional[Mapping[str, Any]] = None) -> None: ...

    def error(self, message: str, context: Optional[Mapping[str, Any]] = None) -> None: ...

    def warn(self, message: str, context: Optional[Mapping[str, Any]] = None) -> None: ...


def console_log() -> logging.Logger:
    """
    The `whatsapp.client` logger, wired to stdout as JSON lines the first time
    it is used without handlers. An application that attaches its own handlers
    to this logger beforehand keeps full control of it.
    """
    log = logging.getLogger(DEFAULT_LOGGER_NAME)
    if not log.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JsonFormatter())
        log.addHandler(handler)
        log.setLevel(logging.INFO)
        log.propagate = False
    return log


class StdlibLogger:
    """
    Default Logger: forwards to the `logging` module.

    Context goes under extra={"extra": {...}} so ops.structured_logger.JsonFormatter
    merges it into the JSON line. Without an explicit `log`, events go to stdout
    through console_log().
    """

    def __init__(self, log: Optional[logging.Logger] = None):
        self._log = log

    @property
    def log(self) -> logging.Logger:
        if self._log is not None:
            return self._log
        return console_log()

    def info(self, message: str, context: Optional[Mapping[str, Any]] = None) -> None:
        self.log.info(message, extra={"extra": dict(context or {})})

    def error(self, message: str, context: Optional[Mapping[str, Any]] = None) -> None:
        self.log.error(message, extra={"extra": dict(context or {})})

    def warn(self, message: str, context: Optional[Mapping[str, Any]] = None) -> None:
        self.log.warning(message, extra={"extra": dict(context or {})})
