"""
Return Metrics

Derives cap rate, cash-on-cash return, gross rent multiplier, loan
constant, horizon IRRs, the 15-year equity multiple and lifetime totals
from a projection.
"""

from typing import List, Sequence, Tuple
from dataclasses import dataclass

from rentalcalc.calculations.cashflow import Projection, PurchaseMetrics, YearProjection
from rentalcalc.calculations.amortization import calculate_loan_constant
from rentalcalc.calculations.irr import IRRResult, calculate_multiple, calculate_profit, solve_irr
from rentalcalc.config import get_settings

IRR_HORIZONS = (5, 10, 15)
DEFAULT_SALE_COST_PERCENT = 6.0


@dataclass(frozen=True)
class ReturnMetrics:
    """First-year return ratios and horizon IRRs. Percent values unless noted."""

    net_operating_income: float  # annual, from month one
    annual_cash_flow: float
    cap_rate: float
    cash_on_cash_return: float
    gross_rent_multiplier: float  # ratio
    irr_5_year: IRRResult
    irr_10_year: IRRResult
    irr_15_year: IRRResult
    loan_constant: float  # ratio, annual debt service / loan
    equity_multiple: float  # ratio, 15-year hold
    profit: float  # 15-year hold


@dataclass(frozen=True)
class LifetimeTotals:
    """Totals over the whole projection."""

    total_equity_buildup: float
    total_appreciation: float
    total_cash_flow: float
    total_return: float
    return_on_investment: float  # percent


def net_sale_proceeds(year: YearProjection, sale_cost_percent: float) -> float:
    """Sale price less selling costs and the loan payoff."""
    return year.property_value * (1 - sale_cost_percent / 100) - year.loan_balance


def build_irr_cash_flows(
    total_cash_invested: float,
    years: Sequence[YearProjection],
    horizon: int,
    sale_cost_percent: float = DEFAULT_SALE_COST_PERCENT,
) -> List[float]:
    """
    Build the cash flow series for an IRR over `horizon` years.

    Period 0 is the cash invested; the property is assumed sold at the end
    of the final year.
    """
    if horizon < 1 or horizon > len(years):
        raise ValueError(f"horizon must be between 1 and {len(years)}")

    cash_flows = [-total_cash_invested]
    cash_flows.extend(year.cash_flow for year in years[:horizon])
    cash_flows[horizon] += net_sale_proceeds(years[horizon - 1], sale_cost_percent)
    return cash_flows


def calculate_horizon_irr(
    total_cash_invested: float,
    years: Sequence[YearProjection],
    horizon: int,
    sale_cost_percent: float = DEFAULT_SALE_COST_PERCENT,
) -> IRRResult:
    """IRR of buying, holding for `horizon` years, then selling."""
    settings = get_settings()
    cash_flows = build_irr_cash_flows(total_cash_invested, years, horizon, sale_cost_percent)
    return solve_irr(
        cash_flows,
        max_iterations=settings.irr_max_iterations,
        tolerance=settings.irr_tolerance,
    )


def calculate_lifetime_totals(
    purchase: PurchaseMetrics, years: Sequence[YearProjection]
) -> LifetimeTotals:
    """Equity buildup, appreciation and cash flow over the full projection."""
    final_year = years[-1]
    invested = purchase.total_cash_invested

    equity_buildup = final_year.equity - invested
    total_cash_flow = sum(year.cash_flow for year in years)
    total_return = equity_buildup + total_cash_flow

    return LifetimeTotals(
        total_equity_buildup=equity_buildup,
        total_appreciation=final_year.property_value - purchase.purchase_price,
        total_cash_flow=total_cash_flow,
        total_return=total_return,
        return_on_investment=total_return / invested * 100 if invested > 0 else 0.0,
    )


def aggregate(
    projection: Projection, sale_cost_percent: float = DEFAULT_SALE_COST_PERCENT
) -> Tuple[ReturnMetrics, LifetimeTotals]:
    """
    Compute return metrics and lifetime totals for a projection.

    First-year ratios come from the month-one figures. Ratios whose
    denominator is zero (no cash invested, no rent) are reported as 0.

    Args:
        projection: Output of project()
        sale_cost_percent: Selling costs at exit, percent of sale price

    Returns:
        (ReturnMetrics, LifetimeTotals)
    """
    if not 0 <= sale_cost_percent < 100:
        raise ValueError("sale_cost_percent must be in [0, 100)")

    purchase = projection.purchase
    price = purchase.purchase_price
    invested = purchase.total_cash_invested
    annual_rent = projection.monthly_rent * 12

    noi = (projection.effective_gross_income - projection.month_one.operating_total) * 12
    annual_cash_flow = projection.annual_cash_flow

    irr_5, irr_10, irr_15 = (
        calculate_horizon_irr(invested, projection.years, horizon, sale_cost_percent)
        for horizon in IRR_HORIZONS
    )
    hold_flows = build_irr_cash_flows(
        invested, projection.years, IRR_HORIZONS[-1], sale_cost_percent
    )

    metrics = ReturnMetrics(
        net_operating_income=noi,
        annual_cash_flow=annual_cash_flow,
        cap_rate=noi / price * 100,
        cash_on_cash_return=annual_cash_flow / invested * 100 if invested > 0 else 0.0,
        gross_rent_multiplier=price / annual_rent if annual_rent > 0 else 0.0,
        irr_5_year=irr_5,
        irr_10_year=irr_10,
        irr_15_year=irr_15,
        loan_constant=calculate_loan_constant(
            purchase.loan_amount, purchase.interest_rate / 100, purchase.amortization_months
        ),
        equity_multiple=calculate_multiple(hold_flows) if invested > 0 else 0.0,
        profit=calculate_profit(hold_flows),
    )
    return metrics, calculate_lifetime_totals(purchase, projection.years)
