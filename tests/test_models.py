"""Tests for the pydantic wire models."""
from __future__ import annotations

import pytest
from pydantic import ValidationError

from calculator import Calculator, Op
from calclog import CalcLogger, Severity
from models import (
    Button,
    ButtonPress,
    CalculatorState,
    LogVisibilityState,
    LogVisibilityUpdate,
    PressSequence,
)


class TestButtonPress:

    def test_digit_press(self):
        p = ButtonPress(button="digit", digit=7)
        assert p.button == Button.DIGIT
        assert p.digit == 7

    def test_digit_required_for_digit_button(self):
        with pytest.raises(ValidationError):
            ButtonPress(button="digit")

    def test_digit_rejected_for_other_buttons(self):
        with pytest.raises(ValidationError):
            ButtonPress(button="equals", digit=3)

    @pytest.mark.parametrize("bad", [-1, 10])
    def test_digit_range(self, bad):
        with pytest.raises(ValidationError):
            ButtonPress(button="digit", digit=bad)

    def test_unknown_button(self):
        with pytest.raises(ValidationError):
            ButtonPress(button="sqrt")

    @pytest.mark.parametrize("button, op", [
        (Button.ADD, Op.ADD), (Button.SUB, Op.SUB),
        (Button.MUL, Op.MUL), (Button.DIV, Op.DIV),
        (Button.EQUALS, None), (Button.DIGIT, None),
    ])
    def test_operator_mapping(self, button, op):
        assert button.operator == op

    def test_apply_drives_calculator(self):
        calc = Calculator()
        for p in [
            ButtonPress(button="digit", digit=3),
            ButtonPress(button="add"),
            ButtonPress(button="digit", digit=5),
            ButtonPress(button="equals"),
            ButtonPress(button="equals"),
        ]:
            p.apply(calc)
        assert calc.display == "13"

    @pytest.mark.parametrize("button, expected", [
        ("decimal_point", "4."),
        ("negate", "-4"),
        ("square", "16"),
        ("percent", "0.04"),
        ("clear", "0"),
    ])
    def test_apply_unary_buttons(self, button, expected):
        calc = Calculator()
        calc.digit(4)
        ButtonPress(button=button).apply(calc)
        assert calc.display == expected


class TestPressSequence:

    def test_empty_sequence_rejected(self):
        with pytest.raises(ValidationError):
            PressSequence(presses=[])

    def test_parses_nested_presses(self):
        seq = PressSequence.model_validate(
            {"presses": [{"button": "digit", "digit": 1}, {"button": "clear"}]}
        )
        assert [p.button for p in seq.presses] == [Button.DIGIT, Button.CLEAR]


class TestLogVisibility:

    def test_partial_update_only_touches_supplied(self):
        log = CalcLogger()
        LogVisibilityUpdate(debug=False).apply(log)
        assert not log.is_visible(Severity.DEBUG)
        assert log.is_visible(Severity.INFO)
        assert log.is_visible(Severity.WARNING)
        assert log.is_visible(Severity.ERROR)

    def test_update_can_reenable(self):
        log = CalcLogger()
        log.ignore(Severity.ERROR)
        LogVisibilityUpdate(error=True).apply(log)
        assert log.is_visible(Severity.ERROR)

    def test_state_from_logger(self):
        log = CalcLogger()
        log.ignore(Severity.WARNING)
        state = LogVisibilityState.from_logger(log)
        assert state.model_dump() == {
            "debug": True, "info": True, "warning": False, "error": True,
        }


class TestCalculatorState:

    def test_initial_snapshot(self):
        state = CalculatorState.from_calculator(Calculator())
        assert state.display == "0"
        assert state.pending_operand is None
        assert state.pending_operator is None
        assert state.overwrite is True
        assert state.repeat is False

    def test_snapshot_serializes_operator(self):
        calc = Calculator()
        calc.digit(2)
        calc.apply_operator(Op.MUL)
        data = CalculatorState.from_calculator(calc).model_dump(mode="json")
        assert data["pending_operator"] == "mul"
        assert data["pending_operand"] == "2"

    def test_snapshot_keeps_non_finite_operand(self):
        calc = Calculator()
        calc.digit(8)
        calc.negate()
        calc.apply_operator(Op.DIV)
        calc.digit(0)
        calc.apply_operator(Op.MUL)
        data = CalculatorState.from_calculator(calc).model_dump(mode="json")
        assert data["pending_operand"] == "-Infinity"
        assert data["pending_operator"] == "mul"
