from streamlit.testing.v1 import AppTest

from budgetkollen.calculators import monthly_loan_cost
from budgetkollen.formatting import format_currency_no_decimals


def loans_app():
    import streamlit as st
    from ui.loans import render_loans

    render_loans()


def income_app():
    import streamlit as st
    from ui.income import render_income

    render_income()


def expenses_app():
    import streamlit as st
    from ui.expenses import render_expenses

    render_expenses()


def test_loan_payment_caption():
    at = AppTest.from_function(loans_app)
    at.session_state["loan_parameters"] = {
        "amount": 1000000.0,
        "interest_rates": [3.5],
        "amortization_rates": [2.0],
        "has_loan": True,
    }
    at.run()
    caption = next(c.value for c in at.caption if c.value.startswith("Monthly payment"))
    assert caption.endswith(format_currency_no_decimals(monthly_loan_cost(1000000, 3.5, 2)))


def test_loan_checkbox_hides_inputs():
    at = AppTest.from_function(loans_app)
    at.session_state["loan_parameters"] = {"amount": 1000000.0, "has_loan": False}
    at.run()
    assert len(at.number_input) == 0
    assert any(c.value.startswith("No loan") for c in at.caption)


def test_second_adult_inputs():
    at = AppTest.from_function(income_app)
    at.session_state["income"] = {"income1": 30000.0, "income2": 20000.0, "number_of_adults": "1"}
    at.run()
    labels = [w.label for w in at.number_input]
    assert "Salary, adult 2" not in labels
    assert at.session_state["income"]["income2"] == 0.0

    at.radio[0].set_value("2").run()
    labels = [w.label for w in at.number_input]
    assert "Salary, adult 2" in labels


def test_net_preview():
    at = AppTest.from_function(income_app)
    at.session_state["income"] = {"income1": 30000.0}
    at.run()
    assert f"Net: {format_currency_no_decimals(24730)}" in [c.value for c in at.caption]


def test_expense_total_updates():
    at = AppTest.from_function(expenses_app)
    at.session_state["expenses"] = {
        "home": {"rent-monthly-fee": 5000.0},
        "food": {"groceries": 3000.0},
        "pets": {"vet": 500.0},
    }
    at.run()
    md = next(m.value for m in at.markdown if "Total Monthly Expenses" in m.value)
    assert format_currency_no_decimals(8500) in md

    at.number_input(key="exp_food_restaurants-cafes").set_value(1000.0).run()
    md = next(m.value for m in at.markdown if "Total Monthly Expenses" in m.value)
    assert format_currency_no_decimals(9500) in md
