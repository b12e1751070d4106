import streamlit as st

from budgetkollen import __version__
from budgetkollen.config import get_settings
from budgetkollen.logging_config import setup_logging
from budgetkollen.presets import DISCLAIMER
from ui.expenses import render_expenses
from ui.export_import import render_export_import
from ui.income import render_income
from ui.loans import render_loans
from ui.results import render_forecast, render_results
from ui.state import current_state, init_state, load_state, save_state


def main():
    setup_logging(get_settings().log_level)
    st.set_page_config(page_title="BudgetKollen", layout="wide")
    load_state()
    init_state()

    st.title(f"BudgetKollen v{__version__}")
    render_export_import()

    left, right = st.columns([1, 1])
    with left:
        render_loans()
        render_income()
        render_expenses()
    with right:
        state = current_state()
        render_results(state)
        render_forecast(state)

    st.caption(DISCLAIMER)
    save_state()


if __name__ == "__main__":
    main()
