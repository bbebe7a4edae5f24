"""
Cash Flow Calculations

Generates the month-one breakdown and the 30-year annual projection for a
rental property. Growth compounds once per year; each year is derived from
the previous one.
"""

from typing import Dict, Optional, Tuple
from dataclasses import dataclass

from rentalcalc.calculations.amortization import (
    calculate_loan_to_value,
    calculate_monthly_pmi,
    calculate_payment,
    summarize_by_year,
)
from rentalcalc.schemas import (
    AcquisitionInputs,
    ExpenseAssumptions,
    FinancingAssumptions,
    IncomeAssumptions,
)

PROJECTION_YEARS = 30


@dataclass(frozen=True)
class PurchaseMetrics:
    """Acquisition and loan figures."""

    purchase_price: float
    down_payment: float
    loan_amount: float
    closing_costs: float
    renovation_costs: float
    total_cash_invested: float
    loan_to_value: float  # percent
    has_pmi: bool
    points_cost: float
    interest_rate: float  # annual, percent
    amortization_months: int
    after_repair_value: Optional[float] = None


@dataclass(frozen=True)
class MonthOneBreakdown:
    """Monthly expenses in the first month of ownership."""

    mortgage: float
    property_tax: float
    insurance: float
    maintenance: float
    capex: float
    management: float
    utilities: float
    hoa: float
    other: float
    pmi: float
    operating_total: float  # everything except the mortgage
    total: float


@dataclass(frozen=True)
class YearProjection:
    """One projected year. Income and expense figures are annual totals."""

    year: int
    gross_income: float
    operating_expenses: float
    net_operating_income: float
    mortgage_payment: float
    cash_flow: float
    property_value: float
    loan_balance: float
    equity: float
    return_on_equity: float  # percent
    interest_paid: float
    principal_paid: float


@dataclass(frozen=True)
class Projection:
    """Output of project()."""

    purchase: PurchaseMetrics
    monthly_rent: float
    effective_gross_income: float  # month one
    month_one: MonthOneBreakdown
    years: Tuple[YearProjection, ...]

    @property
    def monthly_cash_flow(self) -> float:
        return self.effective_gross_income - self.month_one.total

    @property
    def annual_cash_flow(self) -> float:
        return self.monthly_cash_flow * 12


def _grow(value: float, percent: float) -> float:
    return value * (1 + percent / 100)


def calculate_purchase_metrics(
    acquisition: AcquisitionInputs, financing: FinancingAssumptions
) -> PurchaseMetrics:
    """Down payment, loan amount and total cash invested."""
    price = acquisition.price
    down_payment = price * financing.down_payment_percent / 100
    loan_amount = price - down_payment
    ltv = calculate_loan_to_value(loan_amount, price)

    return PurchaseMetrics(
        purchase_price=price,
        down_payment=down_payment,
        loan_amount=loan_amount,
        closing_costs=acquisition.closing_costs,
        renovation_costs=acquisition.renovation_costs,
        total_cash_invested=down_payment + acquisition.closing_costs + acquisition.renovation_costs,
        loan_to_value=ltv,
        has_pmi=calculate_monthly_pmi(loan_amount, price, financing.pmi_percent) > 0,
        points_cost=loan_amount * financing.loan_points / 100,
        interest_rate=financing.interest_rate,
        amortization_months=financing.loan_term_years * 12,
        after_repair_value=acquisition.after_repair_value,
    )


def calculate_effective_gross_income(income: IncomeAssumptions) -> float:
    """Monthly rent plus other income, less vacancy."""
    gross = income.monthly_rent + income.other_income
    return gross * (1 - income.vacancy_rate_percent / 100)


def calculate_month_one(
    acquisition: AcquisitionInputs,
    financing: FinancingAssumptions,
    income: IncomeAssumptions,
    expense: ExpenseAssumptions,
) -> MonthOneBreakdown:
    """
    Break down the first month's expenses.

    Maintenance, capex and management are charged on rent only, not on
    other income. PMI counts as an operating expense.
    """
    price = acquisition.price
    loan_amount = price - price * financing.down_payment_percent / 100
    rent = income.monthly_rent

    mortgage = calculate_payment(
        loan_amount, financing.interest_rate / 100, financing.loan_term_years * 12
    )
    items: Dict[str, float] = {
        "property_tax": price * expense.property_tax_rate_percent / 100 / 12,
        "insurance": expense.insurance_annual / 12,
        "maintenance": rent * expense.maintenance_percent / 100,
        "capex": rent * expense.capex_percent / 100,
        "management": rent * expense.management_percent / 100,
        "utilities": expense.utilities_monthly,
        "hoa": expense.hoa_monthly,
        "other": expense.other_expenses_monthly,
        "pmi": calculate_monthly_pmi(loan_amount, price, financing.pmi_percent),
    }
    operating_total = sum(items.values())

    return MonthOneBreakdown(
        mortgage=mortgage,
        operating_total=operating_total,
        total=operating_total + mortgage,
        **items,
    )


def project(
    acquisition: AcquisitionInputs,
    financing: FinancingAssumptions,
    income: IncomeAssumptions,
    expense: ExpenseAssumptions,
    appreciation_percent: float,
) -> Projection:
    """
    Project the property year by year.

    Year 1 uses purchase-day values. From year 2 on, property value grows by
    the appreciation rate, rent and other income by the rent growth rate,
    and property tax and insurance by their own increase rates. Utilities,
    HOA and other flat monthly expenses stay at their month-one amounts.

    The loan is amortized monthly within each year; once it is paid off the
    balance stays at zero and no further mortgage payments are made.

    Args:
        acquisition: Purchase inputs
        financing: Loan terms
        income: Rent and growth
        expense: Operating expenses and growth
        appreciation_percent: Annual property appreciation (e.g., 3.0)

    Returns:
        Projection with the month-one breakdown and PROJECTION_YEARS years

    Raises:
        ValueError: If appreciation is -100% or below
    """
    if appreciation_percent <= -100:
        raise ValueError("appreciation_percent must be greater than -100")

    purchase = calculate_purchase_metrics(acquisition, financing)
    month_one = calculate_month_one(acquisition, financing, income, expense)

    loan_years = summarize_by_year(
        purchase.loan_amount,
        financing.interest_rate / 100,
        financing.loan_term_years * 12,
        PROJECTION_YEARS,
    )

    property_value = acquisition.price
    rent = income.monthly_rent
    other_income = income.other_income
    property_tax = month_one.property_tax
    insurance = month_one.insurance
    flat_expenses = month_one.utilities + month_one.hoa + month_one.other
    rent_based_percent = (
        expense.maintenance_percent + expense.capex_percent + expense.management_percent
    )

    years = []
    for year in range(1, PROJECTION_YEARS + 1):
        if year > 1:
            property_value = _grow(property_value, appreciation_percent)
            rent = _grow(rent, income.annual_rent_growth_percent)
            other_income = _grow(other_income, income.annual_rent_growth_percent)
            property_tax = _grow(property_tax, expense.property_tax_annual_increase_percent)
            insurance = _grow(insurance, expense.insurance_annual_increase_percent)

        # === INCOME ===
        gross_income = (rent + other_income) * 12
        effective_income = gross_income * (1 - income.vacancy_rate_percent / 100)

        # === EXPENSES ===
        operating_expenses = (
            (property_tax + insurance + flat_expenses) * 12
            + rent * 12 * rent_based_percent / 100
        )
        noi = effective_income - operating_expenses

        # === DEBT ===
        loan = loan_years[year - 1]
        mortgage_payment = loan["payment"]
        loan_balance = loan["ending_balance"]

        cash_flow = noi - mortgage_payment
        equity = property_value - loan_balance
        roe = cash_flow / equity * 100 if equity != 0 else 0.0

        years.append(
            YearProjection(
                year=year,
                gross_income=gross_income,
                operating_expenses=operating_expenses,
                net_operating_income=noi,
                mortgage_payment=mortgage_payment,
                cash_flow=cash_flow,
                property_value=property_value,
                loan_balance=loan_balance,
                equity=equity,
                return_on_equity=roe,
                interest_paid=loan["interest"],
                principal_paid=loan["principal"],
            )
        )

    return Projection(
        purchase=purchase,
        monthly_rent=income.monthly_rent,
        effective_gross_income=calculate_effective_gross_income(income),
        month_one=month_one,
        years=tuple(years),
    )
