"""Wire models for the calculator HTTP host.

Pydantic models for button presses, state snapshots and log visibility.
No calculator logic lives here, only structure and field validation.
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field, model_validator

from calculator import Calculator, Op, format_number
from calclog import CalcLogger, Severity


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid.uuid4().hex


# ---------------------------------------------------------------------------
# Buttons
# ---------------------------------------------------------------------------

class Button(str, Enum):
    DIGIT = "digit"
    DECIMAL_POINT = "decimal_point"
    NEGATE = "negate"
    ADD = "add"
    SUB = "sub"
    MUL = "mul"
    DIV = "div"
    EQUALS = "equals"
    CLEAR = "clear"
    SQUARE = "square"
    PERCENT = "percent"

    @property
    def operator(self) -> Op | None:
        try:
            return Op(self.value)
        except ValueError:
            return None


class ButtonPress(BaseModel):
    """One button press. ``digit`` is required for, and only for, DIGIT."""

    button: Button
    digit: int | None = Field(default=None, ge=0, le=9)

    @model_validator(mode="after")
    def digit_matches_button(self) -> ButtonPress:
        if self.button == Button.DIGIT and self.digit is None:
            raise ValueError("digit is required when button is 'digit'")
        if self.button != Button.DIGIT and self.digit is not None:
            raise ValueError(
                f"digit must not be set for button {self.button.value!r}"
            )
        return self

    def apply(self, calc: Calculator) -> None:
        op = self.button.operator
        if op is not None:
            calc.apply_operator(op)
        elif self.button == Button.DIGIT:
            calc.digit(self.digit)
        else:
            getattr(calc, self.button.value)()


class PressSequence(BaseModel):
    presses: list[ButtonPress] = Field(..., min_length=1, max_length=256)


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

class LogVisibilityUpdate(BaseModel):
    """Partial visibility update. Only supplied channels are changed."""

    debug: bool | None = None
    info: bool | None = None
    warning: bool | None = None
    error: bool | None = None

    def apply(self, log: CalcLogger) -> None:
        for name, shown in self.model_dump(exclude_none=True).items():
            log.visibility.set(Severity(name), shown)


class LogVisibilityState(BaseModel):
    debug: bool
    info: bool
    warning: bool
    error: bool

    @classmethod
    def from_logger(cls, log: CalcLogger) -> LogVisibilityState:
        return cls(**{s.value: log.is_visible(s) for s in Severity})


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------

class CalculatorState(BaseModel):
    """Snapshot of a calculator's state.

    The pending operand is rendered like the display so that Infinity and
    NaN survive JSON encoding.
    """

    display: str
    pending_operand: str | None = None
    pending_operator: Op | None = None
    overwrite: bool
    repeat: bool

    @classmethod
    def from_calculator(cls, calc: Calculator) -> CalculatorState:
        return cls(
            display=calc.display,
            pending_operand=(
                None if calc.pending_operand is None
                else format_number(calc.pending_operand)
            ),
            pending_operator=calc.pending_operator,
            overwrite=calc.overwrite,
            repeat=calc.repeat,
        )


class SessionCreate(BaseModel):
    """Payload for opening a calculator session."""

    log_visibility: LogVisibilityUpdate = Field(default_factory=LogVisibilityUpdate)


class Session(BaseModel):
    """A calculator session as returned by the API."""

    id: str = Field(default_factory=_new_id)
    state: CalculatorState
    log_visibility: LogVisibilityState
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)
