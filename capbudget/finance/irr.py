"""Internal Rate of Return via Newton-Raphson root finding.

The solver iterates on the NPV function of the discount rate

    f(r)  = -I + sum_{t=1..N} CF[t] / (1+r)^t
    f'(r) =     -sum_{t=1..N} t * CF[t] / (1+r)^(t+1)

starting from a 10% guess and stopping when successive estimates differ by
less than the tolerance (an absolute tolerance on the rate, not on NPV).

Failure policy
--------------
The solver never raises for numerical trouble. When the iteration cap is
hit, the derivative vanishes, or an update leaves the domain r > -1, it
returns the best estimate so far with ``converged=False``. Callers that
need a verified root must check ``IrrSolution.converged``.

Known limitation
----------------
Cash-flow series with more than one sign change can have zero, one or
several IRRs. Newton-Raphson converges to whichever root the initial guess
leads to; alternate roots are neither detected nor enumerated.
"""

from __future__ import annotations

import logging
import math

from capbudget.analytics.contracts import CashFlowSeries, IrrSolution
from capbudget.constants import IRR_INITIAL_GUESS, IRR_MAX_ITERATIONS, IRR_TOLERANCE
from capbudget.finance.present_value import present_value
from capbudget.finance.utils import fraction_to_pct

logger = logging.getLogger(__name__)


def npv_at(series: CashFlowSeries, rate: float) -> float:
    """f(r): NPV of the series at a decimal rate."""
    return present_value(series.cash_flows, rate) - series.initial_investment


def npv_derivative_at(series: CashFlowSeries, rate: float) -> float:
    """f'(r): derivative of NPV with respect to the decimal rate."""
    base = 1.0 + rate
    derivative = 0.0
    for i, cf in enumerate(series.cash_flows):
        t = i + 1
        derivative -= t * cf / (base ** (t + 1))
    return derivative


def solve_irr(
    series: CashFlowSeries,
    initial_guess: float = IRR_INITIAL_GUESS,
    tolerance: float = IRR_TOLERANCE,
    max_iterations: int = IRR_MAX_ITERATIONS,
) -> IrrSolution:
    """Find the rate at which NPV is zero.

    Parameters
    ----------
    series : CashFlowSeries
        Project cash flows; the discount rate of the series is not used.
    initial_guess : float, default 0.10
        Starting rate (decimal).
    tolerance : float, default 1e-4
        Convergence threshold on |r_{k+1} - r_k|.
    max_iterations : int, default 100
        Iteration cap.

    Returns
    -------
    IrrSolution
        Rate as a percentage, convergence flag and iterations used.

    Examples
    --------
    >>> from capbudget.analytics.contracts import make_series
    >>> sol = solve_irr(make_series(100.0, [125.0], 10.0))
    >>> round(sol.rate, 4), sol.converged
    (25.0, True)
    """
    if initial_guess <= -1.0:
        raise ValueError(f"initial_guess must exceed -1.0, got {initial_guess}")
    if tolerance <= 0.0:
        raise ValueError(f"tolerance must be positive, got {tolerance}")
    if max_iterations < 1:
        raise ValueError(f"max_iterations must be at least 1, got {max_iterations}")

    rate = float(initial_guess)

    for iteration in range(1, max_iterations + 1):
        try:
            value = npv_at(series, rate)
            derivative = npv_derivative_at(series, rate)
        except (OverflowError, ZeroDivisionError):
            logger.warning(
                "IRR: NPV not representable at r=%.6f; returning unverified estimate",
                rate,
            )
            return IrrSolution(rate=fraction_to_pct(rate), converged=False, iterations=iteration - 1)

        if derivative == 0.0 or not math.isfinite(derivative) or not math.isfinite(value):
            logger.warning(
                "IRR: zero or non-finite derivative at r=%.6f (iteration %d); "
                "returning unverified estimate",
                rate,
                iteration,
            )
            return IrrSolution(rate=fraction_to_pct(rate), converged=False, iterations=iteration - 1)

        new_rate = rate - value / derivative
        logger.debug("IRR iteration %d: r=%.8f npv=%.6f -> r=%.8f", iteration, rate, value, new_rate)

        if not math.isfinite(new_rate) or new_rate <= -1.0:
            logger.warning(
                "IRR: update left the rate domain (r=%.6f -> %s); returning unverified estimate",
                rate,
                new_rate,
            )
            return IrrSolution(rate=fraction_to_pct(rate), converged=False, iterations=iteration)

        if abs(new_rate - rate) < tolerance:
            return IrrSolution(rate=fraction_to_pct(new_rate), converged=True, iterations=iteration)

        rate = new_rate

    logger.warning(
        "IRR: no convergence within %d iterations (tolerance %g); last estimate %.4f%%",
        max_iterations,
        tolerance,
        fraction_to_pct(rate),
    )
    return IrrSolution(rate=fraction_to_pct(rate), converged=False, iterations=max_iterations)


def irr(series: CashFlowSeries, **solver_kwargs) -> float:
    """IRR as a percentage (best effort; see ``solve_irr`` for the flag)."""
    return solve_irr(series, **solver_kwargs).rate


__all__ = [
    "npv_at",
    "npv_derivative_at",
    "solve_irr",
    "irr",
]
