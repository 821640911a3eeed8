"""Counterexample search: random walks over the button pad.

This module runs independently of the test suite.  It searches for:

1. Invariant violations: a button sequence after which some contract
   invariant no longer holds.
2. Unexpected errors: a valid button press that raised.
3. Scenario failures: a scripted contract scenario whose display
   differs from the expected one.

Run directly::

    python -m validation.counterexample_search
"""
from __future__ import annotations

import random
import sys
from dataclasses import dataclass, field

from calculator import Calculator, Op
from calclog import CalcLogger, ChannelVisibility
from contract import BUTTONS_WITHOUT_ARG, CalculatorContract, Press, build_contract, press


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

@dataclass
class Counterexample:
    category: str
    presses: tuple
    expected: str
    actual: str
    description: str


@dataclass
class SearchReport:
    counterexamples: list[Counterexample] = field(default_factory=list)
    checks_run: int = 0

    @property
    def passed(self) -> bool:
        return len(self.counterexamples) == 0

    def summary(self) -> str:
        lines = [
            "Counterexample Search Report",
            "=" * 40,
            f"Total checks: {self.checks_run}",
            f"Counterexamples found: {len(self.counterexamples)}",
        ]
        if self.counterexamples:
            lines.append("")
            for i, cx in enumerate(self.counterexamples, 1):
                lines.append(f"  [{i}] {cx.category}")
                lines.append(f"      Presses:  {cx.presses}")
                lines.append(f"      Expected: {cx.expected}")
                lines.append(f"      Actual:   {cx.actual}")
                lines.append(f"      {cx.description}")
        else:
            lines.append("\nNo counterexamples found.")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _quiet_calculator() -> Calculator:
    silent = ChannelVisibility(debug=False, info=False, warning=False, error=False)
    return Calculator(log=CalcLogger(visibility=silent))


def random_press(rng: random.Random) -> Press:
    """Pick a button, weighted towards digits so numbers get built up."""
    kind = rng.random()
    if kind < 0.5:
        return ("digit", rng.randint(0, 9))
    if kind < 0.7:
        return ("operator", rng.choice(list(Op)))
    return (rng.choice(BUTTONS_WITHOUT_ARG), None)


# ---------------------------------------------------------------------------
# Search functions
# ---------------------------------------------------------------------------

def search_invariant_violations(
    contract: CalculatorContract,
    trials: int,
    length: int,
    rng: random.Random,
) -> tuple[list[Counterexample], int]:
    """Walk random button sequences, checking invariants after every press."""
    cxs: list[Counterexample] = []
    checks = 0

    for _ in range(trials):
        calc = _quiet_calculator()
        history: list[Press] = []
        for _ in range(length):
            button, arg = random_press(rng)
            history.append((button, arg))
            checks += 1
            try:
                press(calc, button, arg)
            except Exception as e:
                cxs.append(Counterexample(
                    category="unexpected_error",
                    presses=tuple(history),
                    expected="no error",
                    actual=f"{type(e).__name__}: {e}",
                    description="Button press raised an exception",
                ))
                break

            broken = contract.violated_invariants(calc)
            if broken:
                cxs.extend(
                    Counterexample(
                        category="invariant_violation",
                        presses=tuple(history),
                        expected=inv.description,
                        actual=repr(calc),
                        description=f"Invariant '{inv.name}' violated",
                    )
                    for inv in broken
                )
                break

    return cxs, checks


def search_scenario_failures(
    contract: CalculatorContract,
) -> tuple[list[Counterexample], int]:
    """Replay every contract scenario on a fresh calculator."""
    cxs: list[Counterexample] = []
    checks = 0

    for scenario in contract.scenarios:
        checks += 1
        calc = scenario.run(_quiet_calculator())
        if calc.display != scenario.expected_display:
            cxs.append(Counterexample(
                category="scenario_failure",
                presses=scenario.presses,
                expected=scenario.expected_display,
                actual=calc.display,
                description=f"Scenario '{scenario.name}': {scenario.description}",
            ))

    return cxs, checks


# ---------------------------------------------------------------------------
# Top-level runner
# ---------------------------------------------------------------------------

def run_search(trials: int = 500, length: int = 40, seed: int = 0) -> SearchReport:
    """Run the complete counterexample search."""
    contract = build_contract()
    rng = random.Random(seed)
    report = SearchReport()

    for cxs, checks in (
        search_invariant_violations(contract, trials, length, rng),
        search_scenario_failures(contract),
    ):
        report.counterexamples.extend(cxs)
        report.checks_run += checks

    return report


def main() -> None:
    all_passed = True
    for seed in (0, 1, 2):
        print(f"\n--- Seed {seed} ---")
        report = run_search(seed=seed)
        print(report.summary())
        if not report.passed:
            all_passed = False

    print("\n" + "=" * 40)
    if all_passed:
        print("ALL SEEDS PASSED")
    else:
        print("SOME SEEDS HAD COUNTEREXAMPLES")
        sys.exit(1)


if __name__ == "__main__":
    main()
