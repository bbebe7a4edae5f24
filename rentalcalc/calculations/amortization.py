"""
Loan Amortization Calculations

Implements fixed-rate mortgage payment and amortization schedule
calculations, matching Excel's PMT, IPMT, and PPMT functions.
"""

from typing import Dict, Iterator, List, Optional
from datetime import date
from dateutil.relativedelta import relativedelta

# Conventional loans require PMI above this loan-to-value (percent)
PMI_LTV_THRESHOLD = 80.0


def calculate_payment(
    principal: float, annual_rate: float, amortization_months: int
) -> float:
    """
    Calculate monthly loan payment.

    Matches Excel's PMT() function.

    Args:
        principal: Loan principal amount
        annual_rate: Annual interest rate as decimal (e.g., 0.065 for 6.5%)
        amortization_months: Total amortization period in months

    Returns:
        Monthly payment amount (positive number)
    """
    if principal <= 0:
        return 0.0
    if amortization_months <= 0:
        return 0.0

    monthly_rate = annual_rate / 12

    if monthly_rate == 0:
        return principal / amortization_months

    payment = (
        principal
        * monthly_rate
        * ((1 + monthly_rate) ** amortization_months)
        / (((1 + monthly_rate) ** amortization_months) - 1)
    )

    return payment


def calculate_remaining_balance(
    principal: float,
    annual_rate: float,
    amortization_months: int,
    payments_completed: int,
) -> float:
    """Calculate remaining loan balance after N payments."""
    if payments_completed >= amortization_months:
        return 0.0

    monthly_rate = annual_rate / 12
    payment = calculate_payment(principal, annual_rate, amortization_months)

    if monthly_rate == 0:
        return max(0.0, principal - payment * payments_completed)

    balance = principal * ((1 + monthly_rate) ** payments_completed) - payment * (
        ((1 + monthly_rate) ** payments_completed - 1) / monthly_rate
    )

    return max(0.0, balance)


def calculate_loan_to_value(loan_amount: float, property_value: float) -> float:
    """Loan-to-value in percent."""
    if property_value <= 0:
        return 0.0
    return loan_amount / property_value * 100


def calculate_monthly_pmi(
    loan_amount: float, property_value: float, pmi_percent: float
) -> float:
    """
    Calculate monthly private mortgage insurance.

    PMI applies only when loan-to-value exceeds 80%.

    Args:
        loan_amount: Loan principal
        property_value: Purchase price
        pmi_percent: Annual PMI rate in percent of the loan (e.g., 0.5)
    """
    ltv = calculate_loan_to_value(loan_amount, property_value)
    if ltv <= PMI_LTV_THRESHOLD:
        return 0.0
    return loan_amount * pmi_percent / 100 / 12


def iter_amortization(
    principal: float, annual_rate: float, amortization_months: int
) -> Iterator[Dict]:
    """
    Yield unrounded amortization rows, one per monthly payment.

    The final scheduled payment retires whatever balance remains, so the
    ending balance of the last row is exactly zero.
    """
    balance = max(0.0, principal)
    monthly_rate = annual_rate / 12
    payment = calculate_payment(principal, annual_rate, amortization_months)

    for period in range(1, amortization_months + 1):
        if balance <= 0:
            return

        interest = balance * monthly_rate
        if period == amortization_months:
            principal_pmt = balance
        else:
            principal_pmt = min(payment - interest, balance)

        ending_balance = max(0.0, balance - principal_pmt)

        yield {
            "period": period,
            "beginning_balance": balance,
            "payment": principal_pmt + interest,
            "interest": interest,
            "principal": principal_pmt,
            "ending_balance": ending_balance,
        }

        balance = ending_balance


def generate_amortization_schedule(
    principal: float,
    annual_rate: float,
    amortization_months: int,
    start_date: Optional[date] = None,
) -> List[Dict]:
    """
    Generate a full amortization schedule.

    Args:
        principal: Loan principal amount
        annual_rate: Annual interest rate as decimal
        amortization_months: Amortization period in months
        start_date: Date of first payment

    Returns:
        List of amortization rows
    """
    if start_date is None:
        start_date = date.today()

    schedule = []
    for row in iter_amortization(principal, annual_rate, amortization_months):
        period_date = start_date + relativedelta(months=row["period"] - 1)
        schedule.append(
            {
                "period": row["period"],
                "date": period_date.isoformat(),
                "beginning_balance": round(row["beginning_balance"], 2),
                "payment": round(row["payment"], 2),
                "interest": round(row["interest"], 2),
                "principal": round(row["principal"], 2),
                "ending_balance": round(row["ending_balance"], 2),
            }
        )

    return schedule


def summarize_by_year(
    principal: float, annual_rate: float, amortization_months: int, years: int
) -> List[Dict]:
    """
    Roll the monthly amortization up into loan years.

    Each year continues from the previous year's closing balance. Years
    after the loan is paid off report no payments and a zero balance.
    """
    rows = iter_amortization(principal, annual_rate, amortization_months)
    balance = max(0.0, principal)
    summary = []

    for year in range(1, years + 1):
        totals = {"year": year, "payment": 0.0, "interest": 0.0, "principal": 0.0}
        for row in rows:
            totals["payment"] += row["payment"]
            totals["interest"] += row["interest"]
            totals["principal"] += row["principal"]
            balance = row["ending_balance"]
            if row["period"] % 12 == 0:
                break
        totals["ending_balance"] = balance
        summary.append(totals)

    return summary


def calculate_total_interest(schedule: List[Dict]) -> float:
    """Calculate total interest paid over loan term."""
    return sum(row["interest"] for row in schedule)


def calculate_loan_constant(
    principal: float, annual_rate: float, amortization_months: int
) -> float:
    """Calculate loan constant (annual debt service / loan amount)."""
    if principal <= 0:
        return 0.0
    annual_debt_service = calculate_payment(principal, annual_rate, amortization_months) * 12
    return annual_debt_service / principal
