"""Tests for display formatting and parsing."""
from __future__ import annotations

import math

import pytest

from calculator import format_number, parse_display


class TestFormatNumber:

    @pytest.mark.parametrize("value, expected", [
        (8.0, "8"),
        (-3.0, "-3"),
        (0.0, "0"),
        (-0.0, "0"),
        (0.5, "0.5"),
        (-0.25, "-0.25"),
        (0.1 + 0.2, "0.30000000000000004"),
        (1e-6, "0.000001"),
        (1.5e-5, "0.000015"),
        (1e20, "100000000000000000000"),
        (2.0**53, "9007199254740992"),
        (2.0**60, "1152921504606847000"),
        (2.0**64, "18446744073709552000"),
        (-(2.0**64), "-18446744073709552000"),
        (1e21, "1e+21"),
        (1.5e22, "1.5e+22"),
        (1e-7, "1e-7"),
        (2.5e-10, "2.5e-10"),
    ])
    def test_finite(self, value, expected):
        assert format_number(value) == expected

    def test_non_finite(self):
        assert format_number(math.inf) == "Infinity"
        assert format_number(-math.inf) == "-Infinity"
        assert format_number(math.nan) == "NaN"


class TestParseDisplay:

    @pytest.mark.parametrize("text, expected", [
        ("0", 0.0),
        ("70", 70.0),
        ("-5", -5.0),
        ("0.", 0.0),
        ("3.25", 3.25),
        ("1e+21", 1e21),
        ("1e+21.", 1e21),
        ("1e-7", 1e-7),
        ("Infinity", math.inf),
        ("-Infinity", -math.inf),
        ("Infinity5", math.inf),
    ])
    def test_numeric_prefix(self, text, expected):
        assert parse_display(text) == expected

    @pytest.mark.parametrize("text", ["NaN", "-NaN", ""])
    def test_no_numeric_prefix_is_nan(self, text):
        assert math.isnan(parse_display(text))

    @pytest.mark.parametrize("value", [0.5, 123.75, 1e21, -2.5e-10, 42.0, 2.0**64])
    def test_format_then_parse(self, value):
        assert parse_display(format_number(value)) == value
