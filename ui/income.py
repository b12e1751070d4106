import streamlit as st

from budgetkollen.formatting import format_currency_no_decimals
from budgetkollen.models import IncomeState
from budgetkollen.tax import calculate_net_income, calculate_net_income_second, primary_tax_config

PRIMARY_FIELDS = [("income1", "Salary, adult 1"), ("income2", "Salary, adult 2")]
SECONDARY_FIELDS = [("secondary_income1", "Secondary job, adult 1"), ("secondary_income2", "Secondary job, adult 2")]
BENEFIT_FIELDS = [
    ("child_benefits", "Child benefits"),
    ("other_benefits", "Other benefits"),
    ("other_incomes", "Other incomes"),
    ("current_buffer", "Current savings buffer"),
]


def _amount_input(income: dict, field: str, label: str, key: str) -> float:
    desc = IncomeState.model_fields[field].description or ""
    return st.number_input(
        label, min_value=0.0, value=float(income.get(field, 0.0)), step=500.0, help=desc, key=key
    )


def render_income():
    """Gross incomes with a net preview per earner."""
    income = st.session_state.setdefault("income", {})
    st.subheader("Income")
    income["number_of_adults"] = st.radio(
        "Adults in household",
        ["1", "2"],
        index=0 if str(income.get("number_of_adults", "1")) == "1" else 1,
        horizontal=True,
    )
    adults = int(income["number_of_adults"])
    cfg = primary_tax_config(income.get("municipal_tax_rate"))

    cols = st.columns(2)
    for idx, (field, label) in enumerate(PRIMARY_FIELDS[:adults]):
        with cols[idx]:
            income[field] = _amount_input(income, field, label, f"inc_{field}")
            st.caption(f"Net: {format_currency_no_decimals(calculate_net_income(income[field], cfg))}")
    cols = st.columns(2)
    for idx, (field, label) in enumerate(SECONDARY_FIELDS[:adults]):
        with cols[idx]:
            income[field] = _amount_input(income, field, label, f"inc_{field}")
            st.caption(f"Net: {format_currency_no_decimals(calculate_net_income_second(income[field]))}")
    # a single-adult household has no second earner
    for field, _ in PRIMARY_FIELDS[adults:] + SECONDARY_FIELDS[adults:]:
        income[field] = 0.0

    cols = st.columns(len(BENEFIT_FIELDS))
    for idx, (field, label) in enumerate(BENEFIT_FIELDS):
        with cols[idx]:
            income[field] = _amount_input(income, field, label, f"inc_{field}")
    return income
