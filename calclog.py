"""Logging facade for the calculator.

Four severity channels (debug, info, warning, error), each with its own
visibility toggle that the host may flip at any time.  Visible messages
are forwarded to a standard ``logging.Logger``; ignored ones are dropped
before they reach it.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

DEFAULT_LOGGER_NAME = "calculator"


class Severity(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    @property
    def level(self) -> int:
        return _LEVELS[self]


_LEVELS = {
    Severity.DEBUG: logging.DEBUG,
    Severity.INFO: logging.INFO,
    Severity.WARNING: logging.WARNING,
    Severity.ERROR: logging.ERROR,
}


class LogVisibility(Enum):
    DISPLAY = 0
    IGNORE = 1


@dataclass
class ChannelVisibility:
    """Which severity channels are currently shown."""

    debug: bool = True
    info: bool = True
    warning: bool = True
    error: bool = True

    def get(self, severity: Severity) -> bool:
        return getattr(self, severity.value)

    def set(self, severity: Severity, shown: bool) -> None:
        setattr(self, severity.value, shown)


class SessionAdapter(logging.LoggerAdapter):
    """Tags records with a session id while sharing one logger."""

    def process(self, msg, kwargs):
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return f"[session {self.extra['session_id']}] {msg}", kwargs


class CalcLogger:
    """Severity-gated wrapper around a ``logging.Logger``.

    With a ``session_id`` the messages go through a SessionAdapter on the
    shared logger, so opening sessions never registers new loggers.
    """

    def __init__(
        self,
        name: str = DEFAULT_LOGGER_NAME,
        visibility: ChannelVisibility | None = None,
        session_id: str | None = None,
    ) -> None:
        self._logger = logging.getLogger(name)
        self._log: logging.Logger | logging.LoggerAdapter = self._logger
        if session_id is not None:
            self._log = SessionAdapter(self._logger, {"session_id": session_id})
        self.session_id = session_id
        self.visibility = visibility if visibility is not None else ChannelVisibility()

    @property
    def name(self) -> str:
        return self._logger.name

    # -- toggles -------------------------------------------------------------

    def show(self, severity: Severity) -> None:
        self.visibility.set(severity, True)

    def ignore(self, severity: Severity) -> None:
        self.visibility.set(severity, False)

    def is_visible(self, severity: Severity) -> bool:
        return self.visibility.get(severity)

    def get_visibility(self, severity: Severity) -> LogVisibility:
        if self.is_visible(severity):
            return LogVisibility.DISPLAY
        return LogVisibility.IGNORE

    def set_visibility(self, severity: Severity, visibility: LogVisibility) -> None:
        if visibility == LogVisibility.DISPLAY:
            self.show(severity)
        else:
            self.ignore(severity)

    # -- channels ------------------------------------------------------------

    def _emit(self, severity: Severity, msg: str, *args: object) -> None:
        if self.is_visible(severity):
            self._log.log(severity.level, msg, *args)

    def debug(self, msg: str, *args: object) -> None:
        self._emit(Severity.DEBUG, msg, *args)

    def info(self, msg: str, *args: object) -> None:
        self._emit(Severity.INFO, msg, *args)

    def warning(self, msg: str, *args: object) -> None:
        self._emit(Severity.WARNING, msg, *args)

    def error(self, msg: str, *args: object) -> None:
        self._emit(Severity.ERROR, msg, *args)
