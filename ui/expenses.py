import streamlit as st

from budgetkollen.calculators import calculate_category_total, calculate_total_expenses
from budgetkollen.formatting import format_currency_no_decimals
from budgetkollen.presets import EXPENSE_CATEGORIES


def render_expenses():
    """One expander per catalog category with an input per subcategory.

    Categories and subcategories outside the catalog (e.g. from an imported
    file) are kept in state and counted in totals but not shown as inputs.
    """
    expenses = st.session_state.setdefault("expenses", {})
    st.subheader("Expenses")
    for cat_id, (label, subs) in EXPENSE_CATEGORIES.items():
        values = expenses.setdefault(cat_id, {})
        with st.expander(f"{label} · {format_currency_no_decimals(calculate_category_total(expenses, cat_id))}"):
            cols = st.columns(2)
            for idx, (sub_id, sub_label) in enumerate(subs.items()):
                with cols[idx % 2]:
                    values[sub_id] = st.number_input(
                        sub_label,
                        min_value=0.0,
                        value=float(values.get(sub_id, 0.0)),
                        step=100.0,
                        key=f"exp_{cat_id}_{sub_id}",
                    )
    total = calculate_total_expenses(expenses)
    st.markdown(f"**Total Monthly Expenses:** {format_currency_no_decimals(total)}")
    return total
