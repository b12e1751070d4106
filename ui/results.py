import pandas as pd
import streamlit as st

from budgetkollen.calculators import (
    best_scenario,
    calculate_category_totals,
    calculate_loan_scenarios,
    scenarios_frame,
    worst_scenario,
)
from budgetkollen.config import get_settings
from budgetkollen.formatting import (
    display_currency,
    format_compact_currency,
    format_dti_ratio,
    format_percent,
    format_percentage,
)
from budgetkollen.forecast import (
    calculate_forecast,
    calculate_loan_payoff_years,
    calculate_total_interest,
)
from budgetkollen.health import calculate_financial_health_score
from budgetkollen.presets import EXPENSE_CATEGORIES

TABLE_COLUMNS = {
    "interest_rate": "Interest",
    "amortization_rate": "Amortization",
    "monthly_interest": "Monthly interest",
    "monthly_amortization": "Monthly amortization",
    "total_housing_cost": "Housing cost",
    "total_expenses": "Total expenses",
    "remaining_savings": "Left to save",
}


def results_table(results) -> pd.DataFrame:
    """Scenario table with display strings, one row per rate pair."""
    df = scenarios_frame(results)[list(TABLE_COLUMNS)].copy()
    for col in ("interest_rate", "amortization_rate"):
        df[col] = df[col].map(format_percentage)
    for col in list(TABLE_COLUMNS)[2:]:
        df[col] = df[col].map(display_currency)
    return df.rename(columns=TABLE_COLUMNS)


def render_results(state):
    st.subheader("Results")
    results = calculate_loan_scenarios(state)
    best, worst = best_scenario(results), worst_scenario(results)
    cols = st.columns(3)
    cols[0].metric("Net income", display_currency(results[0].total_income_net))
    cols[1].metric("Left to save (best)", display_currency(best.remaining_savings))
    cols[2].metric("Left to save (worst)", display_currency(worst.remaining_savings))
    st.dataframe(results_table(results), hide_index=True)

    health = calculate_financial_health_score(state)
    st.markdown(f"**Financial health score:** {health.overall_score}/100")
    m = health.metrics
    st.caption(
        f"Debt-to-income {format_dti_ratio(m.debt_to_income_ratio)} · "
        f"savings rate {format_percent(m.savings_rate)} · "
        f"housing {format_percent(m.housing_cost_ratio)} of net income"
    )
    for code in health.recommendations:
        st.info(code)

    totals = {EXPENSE_CATEGORIES.get(k, (k,))[0]: v for k, v in calculate_category_totals(state.expenses).items() if v}
    if totals:
        st.bar_chart(pd.Series(totals, name="kr"))
    return results


def render_forecast(state):
    settings = get_settings()
    forecast = calculate_forecast(
        state,
        salary_increase_rate=settings.salary_increase_rate,
        max_years=settings.max_forecast_years,
    )
    if not forecast:
        return []
    st.subheader("Forecast")
    df = pd.DataFrame([y.model_dump() for y in forecast]).set_index("year")
    st.line_chart(df[["monthly_cost", "monthly_income", "monthly_savings"]])
    st.caption(
        f"Paid off after {calculate_loan_payoff_years(state, settings.max_forecast_years)} years, "
        f"total interest {format_compact_currency(calculate_total_interest(state, settings.max_forecast_years))} kr"
    )
    return forecast
