"""
Investment Forecast

Single entry point that runs the projection and the return aggregation
for one property. Every call computes from scratch; nothing is cached.
"""

import logging
from datetime import date
from typing import Dict, List, Optional, Tuple
from dataclasses import dataclass

from rentalcalc.calculations.amortization import (
    calculate_remaining_balance,
    calculate_total_interest,
    generate_amortization_schedule,
)
from rentalcalc.calculations.cashflow import (
    MonthOneBreakdown,
    PurchaseMetrics,
    YearProjection,
    project,
)
from rentalcalc.calculations.returns import LifetimeTotals, ReturnMetrics, aggregate
from rentalcalc.config import get_settings
from rentalcalc.schemas import (
    AcquisitionInputs,
    ExpenseAssumptions,
    FinancingAssumptions,
    IncomeAssumptions,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ForecastResult:
    """Full forecast for one property."""

    purchase: PurchaseMetrics
    monthly_rent: float
    effective_gross_income: float
    monthly_expenses: MonthOneBreakdown
    monthly_cash_flow: float
    annual_cash_flow: float
    returns: ReturnMetrics
    yearly_projections: Tuple[YearProjection, ...]
    totals: LifetimeTotals

    @property
    def five_year_irr(self) -> float:
        return self.returns.irr_5_year.percent

    @property
    def ten_year_irr(self) -> float:
        return self.returns.irr_10_year.percent

    @property
    def fifteen_year_irr(self) -> float:
        return self.returns.irr_15_year.percent

    @property
    def irr_converged(self) -> bool:
        """True when all three horizon IRRs reached tolerance."""
        return all(
            irr.converged
            for irr in (self.returns.irr_5_year, self.returns.irr_10_year, self.returns.irr_15_year)
        )

    def amortization_schedule(self, start_date: Optional[date] = None) -> List[Dict]:
        """Monthly loan schedule, first payment on `start_date` (default today)."""
        purchase = self.purchase
        return generate_amortization_schedule(
            purchase.loan_amount,
            purchase.interest_rate / 100,
            purchase.amortization_months,
            start_date=start_date,
        )

    def remaining_balance(self, payments_completed: int) -> float:
        purchase = self.purchase
        return calculate_remaining_balance(
            purchase.loan_amount,
            purchase.interest_rate / 100,
            purchase.amortization_months,
            payments_completed,
        )

    @property
    def total_interest(self) -> float:
        """Interest paid over the full loan term."""
        return calculate_total_interest(self.amortization_schedule())


def forecast(
    acquisition: AcquisitionInputs,
    financing: Optional[FinancingAssumptions] = None,
    income: Optional[IncomeAssumptions] = None,
    expense: Optional[ExpenseAssumptions] = None,
    appreciation_percent: Optional[float] = None,
    sale_cost_percent: Optional[float] = None,
) -> ForecastResult:
    """
    Forecast cash flows and returns for a rental property.

    Omitted assumptions fall back to their model defaults; appreciation and
    sale costs fall back to the configured defaults.

    Args:
        acquisition: Purchase inputs
        financing: Loan terms
        income: Rent and growth
        expense: Operating expenses and growth
        appreciation_percent: Annual appreciation (e.g., 3.0)
        sale_cost_percent: Selling costs at exit (e.g., 6.0)

    Returns:
        ForecastResult
    """
    settings = get_settings()
    financing = financing or FinancingAssumptions()
    income = income or IncomeAssumptions()
    expense = expense or ExpenseAssumptions()
    if appreciation_percent is None:
        appreciation_percent = settings.default_appreciation_percent
    if sale_cost_percent is None:
        sale_cost_percent = settings.sale_cost_percent

    projection = project(acquisition, financing, income, expense, appreciation_percent)
    returns, totals = aggregate(projection, sale_cost_percent)

    result = ForecastResult(
        purchase=projection.purchase,
        monthly_rent=projection.monthly_rent,
        effective_gross_income=projection.effective_gross_income,
        monthly_expenses=projection.month_one,
        monthly_cash_flow=projection.monthly_cash_flow,
        annual_cash_flow=projection.annual_cash_flow,
        returns=returns,
        yearly_projections=projection.years,
        totals=totals,
    )
    if not result.irr_converged:
        logger.warning("Forecast for price %.2f has non-convergent IRR", acquisition.price)
    return result
