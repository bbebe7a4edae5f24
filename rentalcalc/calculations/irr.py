"""
IRR and NPV Calculations

Implements IRR using Newton-Raphson with a bisection fallback, matching
Excel's IRR() function for periodic cash flows. The solver never hides a
failed search: a result that did not reach tolerance is returned as a
best-effort rate flagged as non-convergent.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Sequence

import numpy as np

logger = logging.getLogger(__name__)

MAX_ITERATIONS = 100
TOLERANCE = 1e-4
DEFAULT_GUESS = 0.1

# Lower edge of the bisection search; NPV is undefined at -100%
_BRACKET_LOW = -0.99
_BRACKET_HIGHS = (1.0, 10.0, 100.0)


@dataclass(frozen=True)
class IRRResult:
    """Outcome of an IRR search."""

    rate: float  # decimal, e.g. 0.12 for 12%
    converged: bool
    iterations: int
    npv: float  # NPV at `rate`

    @property
    def percent(self) -> float:
        return self.rate * 100


def calculate_npv(cash_flows: Sequence[float], discount_rate: float) -> float:
    """
    Calculate NPV (Net Present Value) of cash flows.

    Args:
        cash_flows: Array of cash flows (negative = outflow, positive = inflow)
        discount_rate: Periodic discount rate (e.g., 0.10 for 10%)

    Returns:
        NPV value
    """
    flows = np.asarray(cash_flows, dtype=float)
    periods = np.arange(flows.size)
    return float(np.sum(flows / (1 + discount_rate) ** periods))


def _npv_derivative(cash_flows: Sequence[float], rate: float) -> float:
    """Calculate derivative of NPV with respect to rate (for Newton-Raphson)."""
    flows = np.asarray(cash_flows, dtype=float)
    periods = np.arange(flows.size)
    return float(-np.sum(periods * flows / (1 + rate) ** (periods + 1)))


def _find_bracket(cash_flows: Sequence[float]):
    low_npv = calculate_npv(cash_flows, _BRACKET_LOW)
    for high in _BRACKET_HIGHS:
        high_npv = calculate_npv(cash_flows, high)
        if (low_npv < 0) != (high_npv < 0):
            return _BRACKET_LOW, high, low_npv
    return None


def solve_irr(
    cash_flows: Sequence[float],
    guess: float = DEFAULT_GUESS,
    max_iterations: int = MAX_ITERATIONS,
    tolerance: float = TOLERANCE,
) -> IRRResult:
    """
    Solve for the rate at which NPV of the cash flows is zero.

    Newton-Raphson runs first from `guess`. If it stalls (flat derivative,
    rate leaving the (-1, inf) domain) the remaining iteration budget goes
    to bisection over a bracketed sign change. Convergence means
    |NPV| < tolerance.

    Args:
        cash_flows: Periodic cash flows, period 0 first
        guess: Initial guess for rate (default 0.1 = 10%)
        max_iterations: Total iteration budget shared by both methods
        tolerance: Absolute NPV tolerance

    Returns:
        IRRResult; when not converged, the rate with the smallest |NPV| seen

    Raises:
        ValueError: If fewer than 2 cash flows are given
    """
    if len(cash_flows) < 2:
        raise ValueError("At least 2 cash flows required")

    npv = calculate_npv(cash_flows, guess)
    best = IRRResult(rate=guess, converged=False, iterations=0, npv=npv)

    has_positive = any(cf > 0 for cf in cash_flows)
    has_negative = any(cf < 0 for cf in cash_flows)
    if not has_positive or not has_negative:
        logger.warning("IRR undefined: cash flows do not change sign")
        return best

    rate = guess
    iterations = 0

    # === NEWTON-RAPHSON ===
    while iterations < max_iterations:
        npv = calculate_npv(cash_flows, rate)
        if abs(npv) < abs(best.npv):
            best = IRRResult(rate=rate, converged=False, iterations=iterations, npv=npv)
        if abs(npv) < tolerance:
            return IRRResult(rate=rate, converged=True, iterations=iterations, npv=npv)

        iterations += 1
        dnpv = _npv_derivative(cash_flows, rate)
        if dnpv == 0 or not math.isfinite(dnpv):
            break

        new_rate = rate - npv / dnpv
        if not math.isfinite(new_rate) or new_rate <= -1:
            break
        rate = new_rate

    # === BISECTION ===
    bracket = _find_bracket(cash_flows)
    if bracket is not None:
        low, high, low_npv = bracket
        while iterations < max_iterations:
            iterations += 1
            mid = (low + high) / 2
            npv = calculate_npv(cash_flows, mid)
            if abs(npv) < abs(best.npv):
                best = IRRResult(rate=mid, converged=False, iterations=iterations, npv=npv)
            if abs(npv) < tolerance:
                return IRRResult(rate=mid, converged=True, iterations=iterations, npv=npv)
            if (npv < 0) == (low_npv < 0):
                low, low_npv = mid, npv
            else:
                high = mid

    logger.warning(
        "IRR did not converge after %d iterations (best rate %.6f, NPV %.6f)",
        iterations,
        best.rate,
        best.npv,
    )
    return IRRResult(rate=best.rate, converged=False, iterations=iterations, npv=best.npv)


def calculate_irr(cash_flows: List[float], guess: float = DEFAULT_GUESS) -> float:
    """
    Calculate IRR (Internal Rate of Return).

    Strict variant of solve_irr() for callers that need an exact rate.

    Returns:
        IRR as decimal (e.g., 0.15 for 15%)

    Raises:
        ValueError: If IRR cannot be calculated
    """
    if len(cash_flows) >= 2:
        has_positive = any(cf > 0 for cf in cash_flows)
        has_negative = any(cf < 0 for cf in cash_flows)
        if not has_positive or not has_negative:
            raise ValueError("Cash flows must contain both positive and negative values")

    result = solve_irr(cash_flows, guess=guess)
    if not result.converged:
        raise ValueError("IRR calculation did not converge")
    return result.rate

def calculate_multiple(cash_flows: Sequence[float]) -> float:
    """
    Calculate equity multiple.

    Args:
        cash_flows: Periodic cash flows (investments are negative)

    Returns:
        Multiple (e.g., 2.0 = 2.0x return)

    Raises:
        ValueError: If there is no outflow
    """
    total_inflows = sum(cf for cf in cash_flows if cf > 0)
    total_outflows = abs(sum(cf for cf in cash_flows if cf < 0))

    if total_outflows == 0:
        raise ValueError("No investment (outflows) found")

    return total_inflows / total_outflows


def calculate_profit(cash_flows: Sequence[float]) -> float:
    """Total inflows minus total outflows."""
    return float(sum(cash_flows))
