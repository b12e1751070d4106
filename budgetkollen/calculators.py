from __future__ import annotations

import logging
from typing import Dict, List, Optional

import pandas as pd

from budgetkollen.models import (
    CalculationResult,
    CalculatorState,
    IncomeTotals,
    as_state,
)
from budgetkollen.presets import EXPENSE_CATEGORIES, HOUSING_EXPENSE_KEYS
from budgetkollen.tax import (
    calculate_net_income,
    calculate_net_income_second,
    primary_tax_config,
)
from budgetkollen.utils import nz

logger = logging.getLogger(__name__)

RESULT_COLUMNS = list(CalculationResult.model_fields)


def monthly_loan_cost(amount, interest_rate, amortization_rate):
    """Monthly interest plus amortization for a straight (Swedish) loan.

    Interest is charged on the full principal and amortization is a fixed
    yearly share of it, both spread evenly over twelve months.
    """

    principal = nz(amount)
    if principal <= 0:
        return 0.0
    return principal * nz(interest_rate) / 100 / 12 + principal * nz(amortization_rate) / 100 / 12


def calculate_total_expenses(expenses) -> float:
    """Sum every subcategory amount in every category.

    Categories outside the fixed catalog are summed too; the catalog only
    decides rendering order.
    """

    total = 0.0
    for subs in (expenses or {}).values():
        if isinstance(subs, dict):
            total += sum(nz(v) for v in subs.values())
        else:
            total += nz(subs)
    return total


def calculate_category_total(expenses, category_id: str) -> float:
    subs = (expenses or {}).get(category_id)
    if subs is None:
        return 0.0
    if isinstance(subs, dict):
        return sum(nz(v) for v in subs.values())
    return nz(subs)


def calculate_category_totals(expenses) -> Dict[str, float]:
    """Per-category totals, catalog order first, unknown categories after."""

    expenses = expenses or {}
    ordered = [c for c in EXPENSE_CATEGORIES if c in expenses]
    ordered += [c for c in expenses if c not in EXPENSE_CATEGORIES]
    return {c: calculate_category_total(expenses, c) for c in ordered}


def calculate_selected_housing_expenses(expenses) -> float:
    """Running housing costs (rent, heating, water...) entered as expenses."""

    expenses = expenses or {}
    total = 0.0
    for cat, sub in HOUSING_EXPENSE_KEYS:
        subs = expenses.get(cat)
        if isinstance(subs, dict):
            total += nz(subs.get(sub))
    return total


def _net_incomes(state: CalculatorState) -> List[float]:
    inc = state.income
    cfg = primary_tax_config(inc.municipal_tax_rate)
    return [
        calculate_net_income(inc.income1, cfg),
        calculate_net_income(inc.income2, cfg),
        calculate_net_income_second(inc.secondary_income1),
        calculate_net_income_second(inc.secondary_income2),
    ]


def calculate_total_income(state) -> IncomeTotals:
    """Gross and net monthly household income including benefits."""

    state = as_state(state)
    inc = state.income
    benefits = inc.child_benefits + inc.other_benefits + inc.other_incomes
    gross = inc.income1 + inc.income2 + inc.secondary_income1 + inc.secondary_income2 + benefits
    net = sum(_net_incomes(state)) + benefits
    return IncomeTotals(gross=gross, net=net)


def calculate_total_net_income(state) -> float:
    return calculate_total_income(state).net


def calculate_loan_scenarios(state) -> List[CalculationResult]:
    """Build one result per (interest rate, amortization rate) pair.

    Interest rates form the outer loop and amortization rates the inner one,
    both in input order, so ``[3.5, 4] x [2, 3]`` yields
    ``(3.5, 2), (3.5, 3), (4, 2), (4, 3)``.  Income is taken net of tax.

    When the household has no loan (``has_loan`` false) or a rate list is
    empty, a single scenario with zero loan cost is returned instead of the
    cross-product.  A loan of amount ``0`` with ``has_loan`` set still yields
    the full cross-product, every row with zero loan cost.
    """

    state = as_state(state)
    loan = state.loan_parameters
    inc = state.income
    totals = calculate_total_income(state)
    net1, net2, net3, net4 = _net_incomes(state)
    category_expenses = calculate_total_expenses(state.expenses)

    def build(interest_rate: float, amortization_rate: float, amount: float) -> CalculationResult:
        monthly_interest = amount * (interest_rate / 100) / 12
        monthly_amortization = amount * (amortization_rate / 100) / 12
        housing = monthly_interest + monthly_amortization
        total_expenses = housing + category_expenses
        return CalculationResult(
            interest_rate=interest_rate,
            amortization_rate=amortization_rate,
            monthly_interest=monthly_interest,
            monthly_amortization=monthly_amortization,
            total_housing_cost=housing,
            total_expenses=total_expenses,
            remaining_savings=totals.net - total_expenses,
            income1=net1,
            income2=net2,
            income3=net3,
            income4=net4,
            child_benefits=inc.child_benefits,
            other_benefits=inc.other_benefits,
            other_incomes=inc.other_incomes,
            current_buffer=inc.current_buffer,
            total_income_gross=totals.gross,
            total_income_net=totals.net,
        )

    if not loan.has_loan or not loan.interest_rates or not loan.amortization_rates:
        logger.debug("no loan, returning single scenario")
        return [build(0.0, 0.0, 0.0)]

    scenarios = [
        build(i, a, loan.amount)
        for i in loan.interest_rates
        for a in loan.amortization_rates
    ]
    logger.debug("generated %d loan scenarios", len(scenarios))
    return scenarios


def best_scenario(results: List[CalculationResult]) -> Optional[CalculationResult]:
    """Scenario with the lowest monthly housing cost."""
    if not results:
        return None
    return min(results, key=lambda r: r.total_housing_cost)


def worst_scenario(results: List[CalculationResult]) -> Optional[CalculationResult]:
    """Scenario with the highest monthly housing cost, for stress testing."""
    if not results:
        return None
    return max(results, key=lambda r: r.total_housing_cost)


def scenarios_frame(results: List[CalculationResult]) -> pd.DataFrame:
    """Scenario list as a table, one row per rate pair in generation order."""

    if not results:
        return pd.DataFrame(columns=RESULT_COLUMNS)
    return pd.DataFrame([r.model_dump() for r in results], columns=RESULT_COLUMNS)
