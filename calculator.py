"""Four-function calculator state machine.

The machine owns a display buffer, a pending operand/operator pair and two
mode flags.  Each public method corresponds to one button.  No button
press ever raises for valid input: anomalies (range overflow, division
with a zero pending operand) are reported through the injected logger and
the computed value is displayed as-is.

Decision branches are annotated with their branch-IDs (see
contract.py ``BRANCHES``) so white-box tests can trace coverage.
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from calclog import CalcLogger, LogVisibility, Severity

MAX_SAFE_INTEGER = 2**53 - 1
MIN_SAFE_INTEGER = -MAX_SAFE_INTEGER

OVERWRITE_ENABLED = "Overwrite is now enabled."
DIVISION_BY_ZERO = "Division by zero is not supported."


class Op(str, Enum):
    """The binary operations supported by the calculator."""

    ADD = "add"
    SUB = "sub"
    MUL = "mul"
    DIV = "div"


# ---------------------------------------------------------------------------
# Display helpers
# ---------------------------------------------------------------------------

_NUMERIC_PREFIX = re.compile(
    r"[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)"
)


def parse_display(text: str) -> float:
    """Read the longest numeric prefix of ``text``; NaN if there is none."""
    m = _NUMERIC_PREFIX.match(text)
    if m is None:
        return math.nan
    return float(m.group())


def format_number(x: float) -> str:
    """Render a float for the display.

    Integral values print without a fractional part, non-finite values
    print as ``Infinity``/``-Infinity``/``NaN``, and magnitudes outside
    [1e-6, 1e21) use exponent form (``1e+21``, ``1.5e-7``).
    """
    if math.isnan(x):
        return "NaN"
    if math.isinf(x):
        return "Infinity" if x > 0 else "-Infinity"
    if x == 0:
        return "0"

    # repr gives the shortest digits that round-trip; 2**64 shows as
    # 18446744073709552000, not its exact binary value.
    mag = abs(x)
    if 1e-6 <= mag < 1e21:
        shortest = Decimal(repr(x))
        if x.is_integer():
            shortest = shortest.quantize(Decimal(1))
        return format(shortest, "f")

    mantissa, _, exp = repr(x).partition("e")
    e = int(exp)
    return f"{mantissa}e{'+' if e >= 0 else '-'}{abs(e)}"


def _ieee_div(a: float, b: float) -> float:
    # Python raises on x / 0.0; a calculator display wants IEEE-754 instead.
    if b == 0:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


# ---------------------------------------------------------------------------
# State machine
# ---------------------------------------------------------------------------

@dataclass
class Calculator:
    """A basic four-function calculator.

    ``pending_operand`` holds the result of the last operation while
    ``repeat`` is false, and the second argument of the last operation
    while ``repeat`` is true.
    """

    display: str = "0"
    pending_operand: float | None = None
    pending_operator: Op | None = None
    overwrite: bool = True
    repeat: bool = False
    log: CalcLogger = field(default_factory=CalcLogger, repr=False, compare=False)

    @property
    def value(self) -> float:
        return parse_display(self.display)

    # -- internal helpers ---------------------------------------------------

    def _pressed(self, button: str) -> None:
        self.log.debug("Button pressed: %s", button)

    def _check_range(self) -> None:
        """Warn when the display value leaves the safe-integer range.

        Branches: RANGE-HIGH, RANGE-LOW
        """
        v = self.value
        if v >= MAX_SAFE_INTEGER:                                 # RANGE-HIGH
            self.log.warning(
                "Number is greater than the maximum safe integer: %s",
                self.display,
            )
        elif v <= MIN_SAFE_INTEGER:                               # RANGE-LOW
            self.log.warning(
                "Number is less than the minimum safe integer: %s",
                self.display,
            )

    def _show(self, result: float) -> None:
        self.display = format_number(result)
        self._check_range()

    def _combine(self, a: float, b: float, op: Op) -> float:
        """Apply ``op`` to ``a`` and ``b``.

        The zero check looks at the pending operand, whichever side of
        the division it sits on.

        Branches: DIV-ZERO-LOGGED
        """
        if op == Op.ADD:
            return a + b
        if op == Op.SUB:
            return a - b
        if op == Op.MUL:
            return a * b
        if self.pending_operand == 0:                             # DIV-ZERO-LOGGED
            self.log.error(DIVISION_BY_ZERO)
        return _ieee_div(a, b)

    # -- buttons ------------------------------------------------------------

    def digit(self, d: int) -> None:
        """Input a single digit, 0-9.

        Branches: DIGIT-OVERWRITE, DIGIT-APPEND
        """
        if isinstance(d, bool) or not isinstance(d, int) or not 0 <= d <= 9:
            raise ValueError(f"digit must be an integer 0-9, got {d!r}")
        self._pressed(f"digit {d}")
        if self.overwrite:                                        # DIGIT-OVERWRITE
            self.display = str(d)
            self.overwrite = False
        else:                                                     # DIGIT-APPEND
            self.display += str(d)
        self._check_range()

    def decimal_point(self) -> None:
        """Input a decimal point.

        Branches: DEC-OVERWRITE, DEC-APPEND, DEC-IGNORED
        """
        self._pressed("decimal point")
        if self.overwrite:                                        # DEC-OVERWRITE
            self.display = "0."
            self.overwrite = False
        elif "." not in self.display:                             # DEC-APPEND
            self.display += "."
        # (falls through) DEC-IGNORED

    def negate(self) -> None:
        """Toggle the sign of the display.

        Branches: NEG-OVERWRITE, NEG-STRIP, NEG-PREPEND, NEG-ZERO
        """
        self._pressed("negate")
        if self.overwrite:                                        # NEG-OVERWRITE
            self.display = "0"
            self.overwrite = False
        elif self.display != "0":
            if self.display.startswith("-"):                      # NEG-STRIP
                self.display = self.display[1:]
            else:                                                 # NEG-PREPEND
                self.display = "-" + self.display
            self._check_range()
        # (falls through) NEG-ZERO

    def apply_operator(self, op: Op) -> None:
        """Input a binary operator.

        If an operation is pending whose result has not been shown yet,
        show it first: entering 2 + 4 + 8 displays 6 on the second +.

        Branches: OP-FIRST, OP-CHAIN
        """
        op = Op(op)
        self._pressed(f"operator {op.value}")
        if self.pending_operand is None or self.repeat:           # OP-FIRST
            self.pending_operand = self.value
        else:                                                     # OP-CHAIN
            self._show(self._combine(self.pending_operand, self.value,
                                     self.pending_operator))
            self.pending_operand = self.value
        self.pending_operator = op
        self.overwrite = True
        self.repeat = False

    def equals(self) -> None:
        """Compute the pending operation, or repeat the previous one.

        Branches: EQ-NO-OPERATOR, EQ-FORWARD, EQ-REPEAT-SWAPPED,
                  EQ-CAPTURE-OPERAND
        """
        self._pressed("equals")
        second = self.value
        op = self.pending_operator

        if op is None:                                            # EQ-NO-OPERATOR
            self.overwrite = True
            self.log.info(OVERWRITE_ENABLED)
            return

        if self.repeat and op in (Op.SUB, Op.DIV):                # EQ-REPEAT-SWAPPED
            result = self._combine(second, self.pending_operand, op)
        else:                                                     # EQ-FORWARD
            result = self._combine(self.pending_operand, second, op)
        self._show(result)

        # The value on screen before this press is the second argument
        # reused by later repeats.
        if not self.repeat:                                       # EQ-CAPTURE-OPERAND
            self.pending_operand = second

        self.repeat = True
        self.overwrite = True
        self.log.info(OVERWRITE_ENABLED)

    def clear(self) -> None:
        """Reset the display to 0; in overwrite mode, reset everything.

        Branches: CLEAR-DISPLAY, CLEAR-ALL
        """
        self._pressed("clear")
        if self.overwrite:                                        # CLEAR-ALL
            self.pending_operand = None
            self.pending_operator = None
            self.repeat = False
        # (falls through) CLEAR-DISPLAY
        self.display = "0"
        self.overwrite = True
        self.log.info(OVERWRITE_ENABLED)

    def square(self) -> None:
        """Replace the display with its square."""
        self._pressed("square")
        v = self.value
        self._show(v * v)

    def percent(self) -> None:
        """Divide the display by 100."""
        self._pressed("percent")
        self._show(self.value / 100)

    # -- log visibility -----------------------------------------------------

    @property
    def debug_log_visibility(self) -> LogVisibility:
        return self.log.get_visibility(Severity.DEBUG)

    @debug_log_visibility.setter
    def debug_log_visibility(self, visibility: LogVisibility) -> None:
        self.log.set_visibility(Severity.DEBUG, visibility)

    @property
    def info_log_visibility(self) -> LogVisibility:
        return self.log.get_visibility(Severity.INFO)

    @info_log_visibility.setter
    def info_log_visibility(self, visibility: LogVisibility) -> None:
        self.log.set_visibility(Severity.INFO, visibility)

    @property
    def warning_log_visibility(self) -> LogVisibility:
        return self.log.get_visibility(Severity.WARNING)

    @warning_log_visibility.setter
    def warning_log_visibility(self, visibility: LogVisibility) -> None:
        self.log.set_visibility(Severity.WARNING, visibility)

    @property
    def error_log_visibility(self) -> LogVisibility:
        return self.log.get_visibility(Severity.ERROR)

    @error_log_visibility.setter
    def error_log_visibility(self, visibility: LogVisibility) -> None:
        self.log.set_visibility(Severity.ERROR, visibility)
