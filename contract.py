"""Machine-readable contract for the calculator state machine.

The contract is data, not code paths.  Validation tools and the
conformance tests iterate over it instead of hard-coding expectations.

Layers
------
Invariant           a predicate over a Calculator that must hold after
                    every button press
Branch              every decision point that white-box tests must cover
Scenario            a scripted button sequence and the display it must
                    produce
CalculatorContract  the three lists above, bundled
build_contract()    constructs the CalculatorContract
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from calculator import Calculator, Op


# ---------------------------------------------------------------------------
# Building blocks
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Invariant:
    name: str
    description: str
    check: Callable[[Calculator], bool]


@dataclass(frozen=True)
class Branch:
    """A decision point in the implementation that must be exercised."""

    id: str
    description: str
    condition: str      # human-readable boolean expression
    operation: str      # which button / helper this belongs to


# A press is a button name plus its argument, if any:
#   ("digit", 7), ("operator", Op.ADD), ("equals", None)
Press = tuple[str, object]

BUTTONS_WITHOUT_ARG = (
    "decimal_point", "negate", "equals", "clear", "square", "percent",
)


def press(calc: Calculator, button: str, arg: object = None) -> None:
    """Dispatch one named button press to ``calc``."""
    if button == "digit":
        calc.digit(arg)
    elif button == "operator":
        calc.apply_operator(arg)
    elif button in BUTTONS_WITHOUT_ARG:
        getattr(calc, button)()
    else:
        raise ValueError(f"unknown button: {button!r}")


@dataclass(frozen=True)
class Scenario:
    name: str
    description: str
    presses: tuple[Press, ...]
    expected_display: str

    def run(self, calc: Calculator | None = None) -> Calculator:
        calc = calc if calc is not None else Calculator()
        for button, arg in self.presses:
            press(calc, button, arg)
        return calc


@dataclass(frozen=True)
class CalculatorContract:
    invariants: list[Invariant]
    branches: list[Branch]
    scenarios: list[Scenario] = field(default_factory=list)

    def violated_invariants(self, calc: Calculator) -> list[Invariant]:
        return [inv for inv in self.invariants if not inv.check(calc)]

    @property
    def branch_ids(self) -> set[str]:
        return {b.id for b in self.branches}


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------

def _paired(calc: Calculator) -> bool:
    return (calc.pending_operand is None) == (calc.pending_operator is None)


def _repeat_has_operation(calc: Calculator) -> bool:
    if not calc.repeat:
        return True
    return calc.pending_operand is not None and calc.pending_operator is not None


def _display_parses(calc: Calculator) -> bool:
    # NaN only ever comes from arithmetic and is rendered as such.
    v = calc.value
    return v == v or "NaN" in calc.display


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------

def build_contract() -> CalculatorContract:
    """Construct the full calculator contract."""

    invariants = [
        Invariant(
            "display_not_empty",
            "The display is never empty",
            lambda c: c.display != "",
        ),
        Invariant(
            "single_decimal_point",
            "At most one decimal point appears on the display",
            lambda c: c.display.count(".") <= 1,
        ),
        Invariant(
            "operand_operator_paired",
            "Pending operand and operator are both present or both absent",
            _paired,
        ),
        Invariant(
            "repeat_has_operation",
            "Repeat mode implies a pending operand and operator",
            _repeat_has_operation,
        ),
        Invariant(
            "display_parses",
            "The display reads as a number",
            _display_parses,
        ),
    ]

    branches = [
        # digit
        Branch("DIGIT-OVERWRITE", "Digit replaces the display",
               "overwrite", "digit"),
        Branch("DIGIT-APPEND", "Digit appended to the display",
               "not overwrite", "digit"),
        # decimal point
        Branch("DEC-OVERWRITE", "Display becomes '0.'",
               "overwrite", "decimal_point"),
        Branch("DEC-APPEND", "Decimal point appended",
               "not overwrite and '.' not in display", "decimal_point"),
        Branch("DEC-IGNORED", "Second decimal point ignored",
               "not overwrite and '.' in display", "decimal_point"),
        # negate
        Branch("NEG-OVERWRITE", "Display reset to '0'",
               "overwrite", "negate"),
        Branch("NEG-STRIP", "Leading minus removed",
               "not overwrite and display starts with '-'", "negate"),
        Branch("NEG-PREPEND", "Leading minus added",
               "not overwrite and display != '0' and no leading '-'",
               "negate"),
        Branch("NEG-ZERO", "Negating '0' is ignored",
               "not overwrite and display == '0'", "negate"),
        # operators
        Branch("OP-FIRST", "Display becomes the pending operand",
               "pending_operand is None or repeat", "apply_operator"),
        Branch("OP-CHAIN", "Pending operation computed and shown",
               "pending_operand is not None and not repeat",
               "apply_operator"),
        # equals
        Branch("EQ-NO-OPERATOR", "Nothing pending, display unchanged",
               "pending_operator is None", "equals"),
        Branch("EQ-FORWARD", "pending_operand OP display",
               "not repeat or operator in (ADD, MUL)", "equals"),
        Branch("EQ-REPEAT-SWAPPED", "display OP pending_operand",
               "repeat and operator in (SUB, DIV)", "equals"),
        Branch("EQ-CAPTURE-OPERAND", "Second operand stored for repeats",
               "not repeat", "equals"),
        # clear
        Branch("CLEAR-DISPLAY", "Only the display is reset",
               "not overwrite", "clear"),
        Branch("CLEAR-ALL", "Operand, operator and repeat reset",
               "overwrite", "clear"),
        # shared helpers
        Branch("DIV-ZERO-LOGGED", "Error logged, division still performed",
               "operator == DIV and pending_operand == 0", "combine"),
        Branch("RANGE-HIGH", "Warning for values >= MAX_SAFE_INTEGER",
               "value >= MAX_SAFE_INTEGER", "range"),
        Branch("RANGE-LOW", "Warning for values <= MIN_SAFE_INTEGER",
               "value <= MIN_SAFE_INTEGER", "range"),
    ]

    scenarios = [
        Scenario(
            "chained_collapse",
            "2 + 4 + shows 6 before the third operand is entered",
            (("digit", 2), ("operator", Op.ADD), ("digit", 4),
             ("operator", Op.ADD)),
            "6",
        ),
        Scenario(
            "chained_collapse_third",
            "2 + 4 + 8 + shows 14",
            (("digit", 2), ("operator", Op.ADD), ("digit", 4),
             ("operator", Op.ADD), ("digit", 8), ("operator", Op.ADD)),
            "14",
        ),
        Scenario(
            "equals",
            "3 + 5 = shows 8",
            (("digit", 3), ("operator", Op.ADD), ("digit", 5),
             ("equals", None)),
            "8",
        ),
        Scenario(
            "repeat_equals",
            "3 + 5 = = re-adds 5",
            (("digit", 3), ("operator", Op.ADD), ("digit", 5),
             ("equals", None), ("equals", None)),
            "13",
        ),
        Scenario(
            "repeat_subtract",
            "9 - 2 = = subtracts 2 again",
            (("digit", 9), ("operator", Op.SUB), ("digit", 2),
             ("equals", None), ("equals", None)),
            "5",
        ),
        Scenario(
            "two_digits",
            "7 0 shows 70",
            (("digit", 7), ("digit", 0)),
            "70",
        ),
        Scenario(
            "zero_dividend",
            "0 / 5 + shows 0",
            (("digit", 0), ("operator", Op.DIV), ("digit", 5),
             ("operator", Op.ADD)),
            "0",
        ),
        Scenario(
            "divide_by_zero",
            "8 / 0 = shows Infinity",
            (("digit", 8), ("operator", Op.DIV), ("digit", 0),
             ("equals", None)),
            "Infinity",
        ),
        Scenario(
            "square",
            "1 2 square shows 144",
            (("digit", 1), ("digit", 2), ("square", None)),
            "144",
        ),
        Scenario(
            "percent",
            "5 0 percent shows 0.5",
            (("digit", 5), ("digit", 0), ("percent", None)),
            "0.5",
        ),
        Scenario(
            "fraction",
            ". 5 x 4 = shows 2",
            (("decimal_point", None), ("digit", 5), ("operator", Op.MUL),
             ("digit", 4), ("equals", None)),
            "2",
        ),
    ]

    return CalculatorContract(
        invariants=invariants,
        branches=branches,
        scenarios=scenarios,
    )
