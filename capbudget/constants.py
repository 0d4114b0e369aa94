"""Shared defaults for the capital budgeting engine."""

from __future__ import annotations

# Newton-Raphson IRR solver
IRR_INITIAL_GUESS = 0.10
IRR_TOLERANCE = 1e-4
IRR_MAX_ITERATIONS = 100

# Rates are entered as percentages (10 == 10%)
PERCENT = 100.0

# Reference project used by the CLI when no inputs are given
DEFAULT_INITIAL_INVESTMENT = 1_000_000.0
DEFAULT_DISCOUNT_RATE = 10.0
DEFAULT_REINVESTMENT_RATE = 8.0
DEFAULT_CASH_FLOWS = (300_000.0, 350_000.0, 400_000.0, 450_000.0, 500_000.0)
DEFAULT_AVERAGE_ANNUAL_PROFIT = 200_000.0

# Number of points in the default NPV profile grid
NPV_PROFILE_POINTS = 21
