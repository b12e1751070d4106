from __future__ import annotations

from typing import Annotated, Dict, List, Literal, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from budgetkollen.utils import non_negative, nz


def _rates(value) -> list:
    if value is None:
        return []
    if isinstance(value, (int, float, str)):
        value = [value]
    return [non_negative(v) for v in value]


def _adults(value) -> str:
    value = str(value).strip() if value is not None else "1"
    return value if value in ("1", "2") else "1"


def _optional_rate(value):
    if value is None or value == "":
        return None
    rate = nz(value, default=None)
    if rate is None or rate < 0:
        return None
    return rate


def _expenses(value) -> dict:
    if not isinstance(value, dict):
        return {}
    out: Dict[str, Dict[str, float]] = {}
    for cat, subs in value.items():
        if isinstance(subs, dict):
            out[str(cat)] = {str(sub): non_negative(amt) for sub, amt in subs.items()}
        else:
            # a flat category total from the simple view
            out[str(cat)] = {"total": non_negative(subs)}
    return out


Amount = Annotated[float, BeforeValidator(non_negative)]
RateList = Annotated[List[float], BeforeValidator(_rates)]
ExpensesByCategory = Annotated[Dict[str, Dict[str, float]], BeforeValidator(_expenses)]


class LoanParameters(BaseModel):
    amount: Amount = 0.0
    interest_rates: RateList = Field(default_factory=lambda: [3.5])
    amortization_rates: RateList = Field(default_factory=lambda: [2.0])
    has_loan: bool = True


class IncomeState(BaseModel):
    income1: Amount = Field(0.0, description="Gross monthly salary, adult 1")
    income2: Amount = Field(0.0, description="Gross monthly salary, adult 2")
    secondary_income1: Amount = Field(0.0, description="Gross monthly secondary job, adult 1")
    secondary_income2: Amount = Field(0.0, description="Gross monthly secondary job, adult 2")
    child_benefits: Amount = Field(0.0, description="Barnbidrag per month (tax free)")
    other_benefits: Amount = Field(0.0, description="Other tax-free benefits per month")
    other_incomes: Amount = Field(0.0, description="Other net incomes per month")
    current_buffer: Amount = Field(0.0, description="Existing savings")
    number_of_adults: Annotated[Literal["1", "2"], BeforeValidator(_adults)] = "1"
    municipal_tax_rate: Annotated[Optional[float], BeforeValidator(_optional_rate)] = Field(
        None, description="Override of the municipal tax rate as a fraction, e.g. 0.3238"
    )


class CalculatorState(BaseModel):
    loan_parameters: LoanParameters = Field(default_factory=LoanParameters)
    income: IncomeState = Field(default_factory=IncomeState)
    expenses: ExpensesByCategory = Field(default_factory=dict)


class CalculationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    interest_rate: float
    amortization_rate: float
    monthly_interest: float
    monthly_amortization: float
    total_housing_cost: float
    total_expenses: float
    remaining_savings: float
    income1: float
    income2: float
    income3: float
    income4: float
    child_benefits: float
    other_benefits: float
    other_incomes: float
    current_buffer: float = 0.0
    total_income_gross: float = 0.0
    total_income_net: float = 0.0


class IncomeTotals(BaseModel):
    model_config = ConfigDict(frozen=True)

    gross: float = 0.0
    net: float = 0.0


class TaxConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    municipal_rate: float
    state_tax_rate: float
    state_tax_threshold: float
    basic_allowance: float
    job_tax_credit: float


class TaxBreakdown(BaseModel):
    model_config = ConfigDict(frozen=True)

    gross: float = 0.0
    net: float = 0.0
    tax: float = 0.0
    municipal_tax: float = 0.0
    state_tax: float = 0.0


class ForecastYear(BaseModel):
    model_config = ConfigDict(frozen=True)

    year: int
    remaining_loan: float
    yearly_cost: float
    monthly_cost: float
    monthly_income: float
    monthly_savings: float


class FinancialHealthMetrics(BaseModel):
    model_config = ConfigDict(frozen=True)

    debt_to_income_ratio: float = 0.0
    emergency_fund_coverage: float = 0.0
    savings_rate: float = 0.0
    housing_cost_ratio: float = 0.0
    discretionary_income_ratio: float = 0.0


class FinancialHealthScore(BaseModel):
    model_config = ConfigDict(frozen=True)

    overall_score: int = Field(0, ge=0, le=100)
    metrics: FinancialHealthMetrics = Field(default_factory=FinancialHealthMetrics)
    recommendations: List[str] = Field(default_factory=list)


def as_state(state) -> CalculatorState:
    """Accept a ``CalculatorState`` or a plain mapping from the UI."""
    if isinstance(state, CalculatorState):
        return state
    if state is None:
        return CalculatorState()
    return CalculatorState.model_validate(state)
