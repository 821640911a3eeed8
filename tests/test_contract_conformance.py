"""Contract conformance tests.

These tests are *driven by* ``contract.build_contract``: they replay every
scenario, check every invariant on the states those scenarios pass
through, and cross-check the white-box coverage matrix against the list
of branches.

If the contract changes (e.g. a scenario is added), these tests cover it
automatically.
"""
from __future__ import annotations

import re
from pathlib import Path

import pytest

from calculator import Calculator
from contract import build_contract, press
from test_whitebox import BRANCH_COVERAGE

CONTRACT = build_contract()


# ===================================================================
# SCENARIOS
# ===================================================================

class TestScenarios:

    @pytest.mark.parametrize(
        "scenario", CONTRACT.scenarios, ids=[s.name for s in CONTRACT.scenarios]
    )
    def test_scenario_display(self, scenario, quiet_calc):
        calc = scenario.run(quiet_calc)
        assert calc.display == scenario.expected_display, scenario.description

    @pytest.mark.parametrize(
        "scenario", CONTRACT.scenarios, ids=[s.name for s in CONTRACT.scenarios]
    )
    def test_scenario_invariants(self, scenario, quiet_calc):
        for button, arg in scenario.presses:
            press(quiet_calc, button, arg)
            assert CONTRACT.violated_invariants(quiet_calc) == []

    def test_run_defaults_to_fresh_calculator(self):
        calc = CONTRACT.scenarios[0].run()
        assert isinstance(calc, Calculator)
        assert calc.display == CONTRACT.scenarios[0].expected_display


# ===================================================================
# INVARIANTS
# ===================================================================

class TestInvariants:

    def test_initial_state_satisfies_all(self):
        assert CONTRACT.violated_invariants(Calculator()) == []

    @pytest.mark.parametrize("broken, name", [
        (Calculator(display=""), "display_not_empty"),
        (Calculator(display="1.2.3"), "single_decimal_point"),
        (Calculator(pending_operand=1.0), "operand_operator_paired"),
        (Calculator(repeat=True), "repeat_has_operation"),
        (Calculator(display="abc"), "display_parses"),
    ])
    def test_each_invariant_detects_violation(self, broken, name):
        assert name in {inv.name for inv in CONTRACT.violated_invariants(broken)}


# ===================================================================
# BRANCHES
# ===================================================================

class TestBranches:

    def test_branch_ids_unique(self):
        ids = [b.id for b in CONTRACT.branches]
        assert len(ids) == len(set(ids))

    def test_coverage_matrix_matches_branches(self):
        assert set(BRANCH_COVERAGE) == CONTRACT.branch_ids

    def test_every_branch_annotated_in_source(self):
        source = (Path(__file__).parent.parent / "calculator.py").read_text()
        annotated: set[str] = set()
        for line in source.splitlines():
            _, sep, comment = line.partition("#")
            if sep:
                annotated.update(re.findall(r"[A-Z]+(?:-[A-Z]+)+", comment))
        assert CONTRACT.branch_ids <= annotated
