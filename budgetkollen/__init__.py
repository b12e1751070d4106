"""Household budget and loan affordability calculations.

This module also exposes the package version for runtime display."""

from budgetkollen.calculators import (
    calculate_category_total,
    calculate_loan_scenarios,
    calculate_total_expenses,
)
from budgetkollen.csv_codec import export_to_csv, import_from_csv
from budgetkollen.models import CalculationResult, CalculatorState
from budgetkollen.tax import calculate_net_income, calculate_net_income_second

__all__ = [
    "__version__",
    "CalculationResult",
    "CalculatorState",
    "calculate_category_total",
    "calculate_loan_scenarios",
    "calculate_net_income",
    "calculate_net_income_second",
    "calculate_total_expenses",
    "export_to_csv",
    "import_from_csv",
]

# Keep in sync with the version declared in ``pyproject.toml``
__version__ = "0.1.0"
