from __future__ import annotations

import math
from typing import List, Optional

from budgetkollen.calculators import (
    calculate_selected_housing_expenses,
    calculate_total_expenses,
    calculate_total_income,
)
from budgetkollen.models import (
    CalculationResult,
    FinancialHealthMetrics,
    FinancialHealthScore,
    as_state,
)
from budgetkollen.presets import HEALTH_LIMITS, HEALTH_WEIGHTS
from budgetkollen.utils import nz, safe_div


def _component_scores(m: FinancialHealthMetrics) -> dict:
    scores = {
        # 0x = 100 points, 1x = 50, 2x or more = 0
        "debt_to_income_ratio": max(0.0, 100 * (1 - min(m.debt_to_income_ratio, 2) / 2)),
        "emergency_fund_coverage": min(100.0, m.emergency_fund_coverage * 100),
        # a 50% savings rate earns full points
        "savings_rate": min(100.0, m.savings_rate * 200),
        "housing_cost_ratio": max(0.0, 100 * (1 - m.housing_cost_ratio / HEALTH_LIMITS["max_housing_ratio"])),
        "discretionary_income_ratio": min(100.0, m.discretionary_income_ratio * 200),
    }
    return {k: (v if math.isfinite(v) else 0.0) for k, v in scores.items()}


def overall_score(m: FinancialHealthMetrics) -> int:
    scores = _component_scores(m)
    total = sum(scores[k] * w for k, w in HEALTH_WEIGHTS.items())
    return max(0, min(100, int(round(total))))


def recommendations(m: FinancialHealthMetrics) -> List[str]:
    res: List[str] = []
    if m.debt_to_income_ratio > HEALTH_LIMITS["max_dti"]:
        res.append("recommendation_reduce_dti")
    if m.emergency_fund_coverage < HEALTH_LIMITS["min_emergency_months"]:
        res.append("recommendation_emergency_fund")
    if m.savings_rate < HEALTH_LIMITS["min_savings_rate"]:
        res.append("recommendation_savings_rate")
    if m.housing_cost_ratio > HEALTH_LIMITS["max_housing_ratio"]:
        res.append("recommendation_housing_cost")
    if m.discretionary_income_ratio < HEALTH_LIMITS["min_discretionary_ratio"]:
        res.append("recommendation_discretionary_income")
    return res


def _score(m: FinancialHealthMetrics) -> FinancialHealthScore:
    return FinancialHealthScore(overall_score=overall_score(m), metrics=m, recommendations=recommendations(m))


def _metrics(loan_amount, gross, net, expenses, housing, buffer) -> FinancialHealthMetrics:
    left = net - expenses
    return FinancialHealthMetrics(
        debt_to_income_ratio=safe_div(loan_amount, gross * 12),
        emergency_fund_coverage=safe_div(buffer, expenses),
        savings_rate=safe_div(left, net),
        housing_cost_ratio=safe_div(housing, net),
        discretionary_income_ratio=safe_div(left, net),
    )


def calculate_financial_health_score(state) -> FinancialHealthScore:
    """Score the household on a 0-100 scale using the first selected rates.

    Housing cost is the loan cost plus the running housing expenses entered
    under ``home``; total expenses are all category expenses plus the loan
    cost.
    """

    state = as_state(state)
    loan = state.loan_parameters
    totals = calculate_total_income(state)
    loan_amount = loan.amount if loan.has_loan else 0.0
    interest = loan.interest_rates[0] if loan.interest_rates else 0.0
    amortization = loan.amortization_rates[0] if loan.amortization_rates else 0.0
    loan_cost = loan_amount * (interest / 100) / 12 + loan_amount * (amortization / 100) / 12
    expenses = calculate_total_expenses(state.expenses) + loan_cost
    housing = calculate_selected_housing_expenses(state.expenses) + loan_cost
    m = _metrics(loan_amount, totals.gross, totals.net, expenses, housing, state.income.current_buffer)
    return _score(m)


def calculate_financial_health_score_for_result(
    result: CalculationResult, loan_amount: Optional[float] = None
) -> FinancialHealthScore:
    """Score a single scenario row.

    Without an explicit ``loan_amount`` the principal is recovered from the
    scenario's yearly payments and rates.
    """

    if loan_amount is None:
        rate_sum = (result.interest_rate + result.amortization_rate) / 100
        yearly = (result.monthly_interest + result.monthly_amortization) * 12
        loan_amount = safe_div(yearly, rate_sum)
    m = _metrics(
        nz(loan_amount),
        result.total_income_gross,
        result.total_income_net,
        result.total_expenses,
        result.total_housing_cost,
        result.current_buffer,
    )
    return _score(m)
