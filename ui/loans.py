import streamlit as st

from budgetkollen.calculators import monthly_loan_cost
from budgetkollen.formatting import format_currency_no_decimals, format_percentage
from budgetkollen.presets import AMORTIZATION_RATE_OPTIONS, INTEREST_RATE_OPTIONS


def _options(base, selected):
    return sorted(set(base) | set(selected))


def render_loans():
    """Loan amount and the interest / amortization rates to compare."""
    loan = st.session_state.setdefault("loan_parameters", {})
    st.subheader("Loans")
    loan["has_loan"] = st.checkbox("I have or plan to take a mortgage", value=bool(loan.get("has_loan", True)))
    if not loan["has_loan"]:
        st.caption("No loan: results show a single scenario without loan costs.")
        return loan

    loan["amount"] = st.number_input(
        "Loan amount (kr)", min_value=0.0, value=float(loan.get("amount", 0.0)), step=50000.0
    )
    selected_i = [float(r) for r in loan.get("interest_rates", [])]
    selected_a = [float(r) for r in loan.get("amortization_rates", [])]
    c1, c2 = st.columns(2)
    loan["interest_rates"] = c1.multiselect(
        "Interest rates (%)",
        _options(INTEREST_RATE_OPTIONS, selected_i),
        default=selected_i,
        format_func=format_percentage,
    )
    loan["amortization_rates"] = c2.multiselect(
        "Amortization rates (%)",
        _options(AMORTIZATION_RATE_OPTIONS, selected_a),
        default=selected_a,
        format_func=format_percentage,
    )
    if loan["interest_rates"] and loan["amortization_rates"]:
        cost = monthly_loan_cost(loan["amount"], loan["interest_rates"][0], loan["amortization_rates"][0])
        st.caption(f"Monthly payment at first selected rates: {format_currency_no_decimals(cost)}")
    else:
        st.warning("Select at least one interest rate and one amortization rate.")
    return loan
