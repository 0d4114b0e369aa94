#!/usr/bin/env python3
"""
Core tests for capbudget.finance.irr

We verify:
- npv_at() / npv_derivative_at() match hand-computed values.
- solve_irr() converges on conventional series and agrees with numpy-financial.
- The soft-failure paths (iteration cap, zero derivative, domain exit)
  return an estimate flagged as unverified instead of raising.
"""

import math

import numpy_financial as npf
import pytest

from capbudget.analytics.contracts import make_series
from capbudget.finance.irr import irr, npv_at, npv_derivative_at, solve_irr

FLOWS = [300_000.0, 350_000.0, 400_000.0, 450_000.0, 500_000.0]


def _reference_series():
    return make_series(1_000_000.0, FLOWS, 10.0, 8.0, 200_000.0)


def test_npv_at_and_derivative_at_hand_computed_values():
    """f(0.25) and f'(0.25) for I=100, flows [125, 156.25] (exact in binary)."""
    series = make_series(100.0, [125.0, 156.25], 10.0)

    assert npv_at(series, 0.25) == pytest.approx(100.0)
    # f'(r) = -(1*125/1.25^2 + 2*156.25/1.25^3) = -(80 + 160)
    assert npv_derivative_at(series, 0.25) == pytest.approx(-240.0)


def test_solve_irr_reference_series_converges():
    solution = solve_irr(_reference_series())

    assert solution.converged
    assert 1 <= solution.iterations < 100
    assert solution.rate == pytest.approx(npf.irr([-1_000_000.0] + FLOWS) * 100, abs=1e-4)


def test_irr_returns_percentage_of_solution():
    series = _reference_series()
    assert irr(series) == solve_irr(series).rate


def test_irr_ignores_series_discount_rate():
    """The discount rate only matters for decisions, not for the root itself."""
    series = _reference_series()
    assert irr(series) == irr(series.with_discount_rate(35.0))


def test_forced_non_convergence_returns_last_estimate():
    """With a single iteration the solver stops early and flags the result."""
    series = _reference_series()
    expected = 0.10 - npv_at(series, 0.10) / npv_derivative_at(series, 0.10)

    solution = solve_irr(series, max_iterations=1)

    assert not solution.converged
    assert solution.iterations == 1
    assert solution.rate == pytest.approx(expected * 100)
    assert math.isfinite(solution.rate)


def test_iteration_cap_logs_warning(caplog):
    with caplog.at_level("WARNING", logger="capbudget.finance.irr"):
        solve_irr(_reference_series(), max_iterations=2)
    assert any("no convergence" in rec.getMessage() for rec in caplog.records)


def test_zero_derivative_short_circuits_to_current_estimate():
    """All-zero flows make f'(r) == 0: return the initial guess, never NaN."""
    series = make_series(1_000.0, [0.0, 0.0, 0.0], 10.0)

    solution = solve_irr(series)

    assert not solution.converged
    assert solution.iterations == 0
    assert solution.rate == pytest.approx(10.0)


def test_empty_series_has_zero_derivative():
    solution = solve_irr(make_series(1_000.0, [], 10.0), initial_guess=0.05)
    assert not solution.converged
    assert solution.rate == pytest.approx(5.0)


def test_update_below_minus_one_returns_current_estimate():
    """A tiny inflow against a large outlay throws Newton past r = -1."""
    series = make_series(100.0, [1.0], 10.0)

    solution = solve_irr(series)

    assert not solution.converged
    assert solution.rate == pytest.approx(10.0)
    assert math.isfinite(solution.rate)


def test_custom_tolerance_and_initial_guess():
    series = _reference_series()
    loose = solve_irr(series, tolerance=1e-2, initial_guess=0.30)
    tight = solve_irr(series, tolerance=1e-10, initial_guess=0.30)

    assert loose.converged and tight.converged
    assert loose.iterations <= tight.iterations
    assert loose.rate == pytest.approx(tight.rate, abs=1.0)


def test_non_conventional_series_reports_a_single_root():
    """Sign-changing flows: whatever root is reached must actually zero NPV."""
    series = make_series(500_000.0, [250_000.0, 250_000.0, -150_000.0, 300_000.0, 300_000.0], 12.0)

    solution = solve_irr(series)

    assert math.isfinite(solution.rate)
    if solution.converged:
        assert abs(npv_at(series, solution.rate / 100.0)) < 1e-3 * series.initial_investment


@pytest.mark.parametrize(
    "kwargs",
    [
        {"initial_guess": -1.0},
        {"tolerance": 0.0},
        {"max_iterations": 0},
    ],
)
def test_invalid_solver_parameters_raise(kwargs):
    with pytest.raises(ValueError):
        solve_irr(_reference_series(), **kwargs)
