from __future__ import annotations

from typing import List

from budgetkollen.calculators import calculate_total_net_income
from budgetkollen.models import CalculatorState, ForecastYear, as_state
from budgetkollen.presets import FORECAST_DEFAULTS
from budgetkollen.utils import nz


def _first_rate(rates) -> float:
    """First selected rate as a fraction, falling back to the default."""
    rate = nz(rates[0]) if rates else 0.0
    if rate <= 0:
        rate = FORECAST_DEFAULTS["fallback_rate_pct"]
    return rate / 100


def validate_forecast_inputs(state) -> bool:
    """True when the state has a loan with positive rates to project."""
    state = as_state(state)
    loan = state.loan_parameters
    return bool(
        loan.has_loan
        and loan.amount > 0
        and loan.interest_rates
        and loan.amortization_rates
        and nz(loan.interest_rates[0]) > 0
        and nz(loan.amortization_rates[0]) > 0
    )


def calculate_forecast(
    state,
    salary_increase_rate: float = FORECAST_DEFAULTS["salary_increase_rate"],
    max_years: int = FORECAST_DEFAULTS["max_years"],
) -> List[ForecastYear]:
    """Project loan balance, cost and savings year by year.

    Amortization is a fixed share of the original principal each year while
    interest follows the shrinking balance.  Net income grows by
    ``salary_increase_rate`` per year.  The projection ends when the loan is
    paid off or after ``max_years``.
    """

    state: CalculatorState = as_state(state)
    loan = state.loan_parameters
    if not loan.has_loan or loan.amount <= 0:
        return []

    initial = loan.amount
    amortization = _first_rate(loan.amortization_rates)
    interest = _first_rate(loan.interest_rates)
    yearly_income0 = calculate_total_net_income(state) * 12

    rows: List[ForecastYear] = []
    remaining = initial
    for year in range(int(max_years)):
        if remaining <= 0:
            break
        yearly_amortization = initial * amortization
        yearly_cost = yearly_amortization + remaining * interest
        monthly_cost = yearly_cost / 12
        monthly_income = yearly_income0 * (1 + salary_increase_rate) ** year / 12
        rows.append(
            ForecastYear(
                year=year,
                remaining_loan=remaining,
                yearly_cost=yearly_cost,
                monthly_cost=monthly_cost,
                monthly_income=monthly_income,
                monthly_savings=monthly_income - monthly_cost,
            )
        )
        remaining -= yearly_amortization
    return rows


def calculate_loan_payoff_years(state, max_years: int = FORECAST_DEFAULTS["max_years"]) -> int:
    return len(calculate_forecast(state, max_years=max_years))


def calculate_total_interest(state, max_years: int = FORECAST_DEFAULTS["max_years"]) -> float:
    """Total interest paid over the projected years."""
    state = as_state(state)
    forecast = calculate_forecast(state, max_years=max_years)
    if not forecast:
        return 0.0
    yearly_amortization = state.loan_parameters.amount * _first_rate(
        state.loan_parameters.amortization_rates
    )
    return sum(y.yearly_cost - yearly_amortization for y in forecast)


def calculate_average_monthly_savings(state) -> float:
    forecast = calculate_forecast(state)
    if not forecast:
        return 0.0
    return sum(y.monthly_savings for y in forecast) / len(forecast)
