"""Shared fixtures for calculator tests."""
from __future__ import annotations

import logging

import pytest

from calculator import Calculator
from calclog import DEFAULT_LOGGER_NAME, CalcLogger, ChannelVisibility
from store import SessionStore


@pytest.fixture
def calc() -> Calculator:
    return Calculator()


@pytest.fixture
def quiet_calc() -> Calculator:
    """A calculator whose logger drops every channel."""
    silent = ChannelVisibility(debug=False, info=False, warning=False, error=False)
    return Calculator(log=CalcLogger(visibility=silent))


@pytest.fixture
def store() -> SessionStore:
    return SessionStore()


@pytest.fixture
def calc_logs(caplog):
    """caplog capturing every level from the calculator loggers."""
    caplog.set_level(logging.DEBUG, logger=DEFAULT_LOGGER_NAME)
    return caplog


def records_at(caplog, level: int) -> list[logging.LogRecord]:
    return [
        r for r in caplog.records
        if r.levelno == level and r.name.startswith(DEFAULT_LOGGER_NAME)
    ]
