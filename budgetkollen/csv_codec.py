"""CSV export and import of the full calculator state.

The file is one header row and one data row.  Rate lists are ``|``-joined
inside their cell and every expense becomes its own ``category.subcategory``
column::

    loanAmount,interestRates,amortizationRates,income1,...,home.rent-monthly-fee
    1000000,3.5|4,2|3,30000,...,5000

There is no quoting or escaping, so ids containing the delimiters are
rejected on export rather than written into a file that cannot be read back.
"""
from __future__ import annotations

import asyncio
import logging
import math
import os
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Union

import pandas as pd

from budgetkollen.exceptions import (
    CsvExportError,
    FileReadError,
    ImportInProgressError,
    ValidationError,
)
from budgetkollen.models import CalculatorState, as_state
from budgetkollen.presets import EXPENSE_CATEGORIES

logger = logging.getLogger(__name__)

FIELD_SEP = ","
RATE_SEP = "|"
KEY_SEP = "."

REQUIRED_COLUMNS = ["loanAmount", "interestRates", "amortizationRates"]
# Older exports wrote a single rate per column.
LEGACY_ALIASES = {"interestRates": "interestRate", "amortizationRates": "amortizationRate"}

# CSV column -> IncomeState field
INCOME_COLUMNS = {
    "income1": "income1",
    "income2": "income2",
    "secondaryIncome1": "secondary_income1",
    "secondaryIncome2": "secondary_income2",
    "childBenefits": "child_benefits",
    "otherBenefits": "other_benefits",
    "otherIncomes": "other_incomes",
    "currentBuffer": "current_buffer",
}

BASE_COLUMNS = (
    REQUIRED_COLUMNS
    + list(INCOME_COLUMNS)
    + ["numberOfAdults", "hasLoan", "municipalTaxRate"]
)

_FORBIDDEN_CATEGORY = (FIELD_SEP, RATE_SEP, KEY_SEP, '"', "\n", "\r")
_FORBIDDEN_SUBCATEGORY = (FIELD_SEP, RATE_SEP, '"', "\n", "\r")


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------


def format_csv_number(value: float) -> str:
    """Shortest text that parses back to the same float."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def _ordered_categories(expenses: Dict[str, Dict[str, float]]) -> List[str]:
    known = [c for c in EXPENSE_CATEGORIES if c in expenses]
    return known + [c for c in expenses if c not in EXPENSE_CATEGORIES]


def _check_ids(category: str, subcategory: str) -> None:
    if any(ch in category for ch in _FORBIDDEN_CATEGORY):
        raise CsvExportError(f"category id {category!r} cannot be written to CSV")
    if any(ch in subcategory for ch in _FORBIDDEN_SUBCATEGORY):
        raise CsvExportError(f"subcategory id {subcategory!r} in {category!r} cannot be written to CSV")


def flatten_expenses(expenses: Dict[str, Dict[str, float]]) -> Dict[str, float]:
    """``{"home": {"rent": 5000}}`` -> ``{"home.rent": 5000}``"""
    flat: Dict[str, float] = {}
    for cat in _ordered_categories(expenses):
        for sub, amount in expenses[cat].items():
            _check_ids(cat, sub)
            flat[f"{cat}{KEY_SEP}{sub}"] = amount
    return flat


def export_to_csv(state) -> str:
    """Serialize the calculator state to the two-row CSV format."""

    state: CalculatorState = as_state(state)
    loan = state.loan_parameters
    inc = state.income
    flat = flatten_expenses(state.expenses)

    columns = BASE_COLUMNS + list(flat)
    values = [
        format_csv_number(loan.amount),
        RATE_SEP.join(format_csv_number(r) for r in loan.interest_rates),
        RATE_SEP.join(format_csv_number(r) for r in loan.amortization_rates),
    ]
    values += [format_csv_number(getattr(inc, field)) for field in INCOME_COLUMNS.values()]
    values += [
        inc.number_of_adults,
        "1" if loan.has_loan else "0",
        "" if inc.municipal_tax_rate is None else format_csv_number(inc.municipal_tax_rate),
    ]
    values += [format_csv_number(v) for v in flat.values()]

    frame = pd.DataFrame([values], columns=columns)
    logger.info("CSV exported", extra={"columns": len(columns), "expense_columns": len(flat)})
    return frame.to_csv(index=False, sep=FIELD_SEP, lineterminator="\n")


def export_to_csv_bytes(state) -> bytes:
    return export_to_csv(state).encode("utf-8")


# ---------------------------------------------------------------------------
# Import
# ---------------------------------------------------------------------------


def _number(column: str, raw: str) -> float:
    try:
        value = float(raw)
    except ValueError:
        raise ValidationError(f"invalid CSV format: column {column!r} is not a number: {raw!r}") from None
    if not math.isfinite(value):
        raise ValidationError(f"invalid CSV format: column {column!r} is not a finite number: {raw!r}")
    return value


def _rates(column: str, raw: str) -> List[float]:
    parts = [p.strip() for p in raw.split(RATE_SEP)]
    if not raw.strip() or not all(parts):
        raise ValidationError(f"invalid CSV format: column {column!r} needs at least one rate")
    return [_number(column, p) for p in parts]


def _flag(column: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in ("1", "true", "yes"):
        return True
    if value in ("0", "false", "no"):
        return False
    raise ValidationError(f"invalid CSV format: column {column!r} must be 1 or 0: {raw!r}")


def _split_rows(text: str) -> List[List[str]]:
    text = text.lstrip("\ufeff").replace("\r\n", "\n").replace("\r", "\n")
    lines = [line for line in text.split("\n") if line.strip()]
    if len(lines) < 2:
        raise ValidationError("invalid CSV format: expected a header row and a data row")
    if len(lines) > 2:
        raise ValidationError(f"invalid CSV format: expected one data row, found {len(lines) - 1}")
    return [[cell.strip() for cell in line.split(FIELD_SEP)] for line in lines]


def parse_csv_text(text: str) -> CalculatorState:
    """Rebuild a calculator state from CSV text, raising ``ValidationError``."""

    keys, values = _split_rows(text)
    if len(keys) != len(values):
        raise ValidationError(
            f"invalid CSV format: header has {len(keys)} columns but data row has {len(values)}"
        )
    if len(set(keys)) != len(keys):
        raise ValidationError("invalid CSV format: duplicate column names")
    row = dict(zip(keys, values))

    for column in REQUIRED_COLUMNS:
        if column not in row and LEGACY_ALIASES.get(column) not in row:
            raise ValidationError(f"invalid CSV format: missing required column {column!r}")

    def rate_column(column: str) -> List[float]:
        name = column if column in row else LEGACY_ALIASES[column]
        return _rates(name, row[name])

    loan = {
        "amount": _number("loanAmount", row["loanAmount"]),
        "interest_rates": rate_column("interestRates"),
        "amortization_rates": rate_column("amortizationRates"),
    }
    if "hasLoan" in row:
        loan["has_loan"] = _flag("hasLoan", row["hasLoan"])

    income: Dict[str, object] = {}
    for column, field in INCOME_COLUMNS.items():
        if column in row:
            income[field] = _number(column, row[column]) if row[column] else 0.0
    if row.get("numberOfAdults"):
        if row["numberOfAdults"] not in ("1", "2"):
            raise ValidationError(
                f"invalid CSV format: numberOfAdults must be 1 or 2: {row['numberOfAdults']!r}"
            )
        income["number_of_adults"] = row["numberOfAdults"]
    if row.get("municipalTaxRate"):
        income["municipal_tax_rate"] = _number("municipalTaxRate", row["municipalTaxRate"])

    expenses: Dict[str, Dict[str, float]] = {}
    for column, raw in row.items():
        if KEY_SEP not in column:
            continue
        category, subcategory = column.split(KEY_SEP, 1)
        expenses.setdefault(category, {})[subcategory] = _number(column, raw)

    return CalculatorState(loan_parameters=loan, income=income, expenses=expenses)


def _read_text(source) -> str:
    """Read a path, bytes or file-like object as UTF-8 text."""
    if isinstance(source, (bytes, bytearray)):
        data = bytes(source)
    elif isinstance(source, (str, os.PathLike)):
        data = Path(source).read_bytes()
    elif hasattr(source, "getvalue"):
        data = source.getvalue()
    elif hasattr(source, "read"):
        data = source.read()
    else:
        raise TypeError(f"cannot read CSV from {type(source).__name__}")
    if isinstance(data, str):
        return data
    return data.decode("utf-8-sig")


@dataclass(frozen=True)
class ImportSuccess:
    state: CalculatorState
    ok: bool = True


@dataclass(frozen=True)
class ImportFailure:
    error: Exception
    ok: bool = False


ImportResult = Union[ImportSuccess, ImportFailure]


class CsvImporter:
    """Runs CSV imports, one at a time.

    A call made while another import on the same importer is still reading
    fails with ``ImportInProgressError`` and leaves the running import alone.
    There is no cancellation: once a read starts it completes.  The in-flight
    check holds a lock, so an importer may be shared between threads.  Every
    failure is returned as an ``ImportFailure``; nothing raises to the caller.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    async def parse(self, source) -> ImportResult:
        if not self._lock.acquire(blocking=False):
            logger.warning("CSV import rejected, another import is in progress")
            return ImportFailure(ImportInProgressError("an import is already in progress"))
        try:
            try:
                text = await asyncio.to_thread(_read_text, source)
            except Exception as exc:
                error = FileReadError(f"File read error: {exc}")
                error.__cause__ = exc
                logger.warning(
                    "CSV import failed",
                    extra={"error_type": "FileReadError", "cause": type(exc).__name__, "error": str(exc)},
                )
                return ImportFailure(error)
            try:
                state = parse_csv_text(text)
            except ValidationError as exc:
                logger.warning("CSV import failed", extra={"error_type": "ValidationError", "error": str(exc)})
                return ImportFailure(exc)
            except Exception as exc:
                error = ValidationError(f"invalid CSV format: {exc}")
                error.__cause__ = exc
                logger.exception("CSV import failed unexpectedly", extra={"error_type": type(exc).__name__})
                return ImportFailure(error)
            logger.info(
                "CSV imported",
                extra={
                    "expense_categories": len(state.expenses),
                    "scenarios": len(state.loan_parameters.interest_rates)
                    * len(state.loan_parameters.amortization_rates),
                },
            )
            return ImportSuccess(state)
        finally:
            self._lock.release()

    async def import_from_csv(
        self,
        source,
        on_success: Callable[[CalculatorState], None],
        on_error: Callable[[Exception], None],
    ) -> None:
        """Callback form of ``parse``: exactly one callback fires, once."""
        result = await self.parse(source)
        if isinstance(result, ImportSuccess):
            on_success(result.state)
        else:
            on_error(result.error)


_default_importer = CsvImporter()


async def parse_csv_file(source) -> ImportResult:
    return await _default_importer.parse(source)


async def import_from_csv(source, on_success, on_error) -> None:
    await _default_importer.import_from_csv(source, on_success, on_error)
