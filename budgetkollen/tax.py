from __future__ import annotations

from budgetkollen.models import TaxBreakdown, TaxConfig
from budgetkollen.presets import (
    BASIC_ALLOWANCE,
    JOB_TAX_CREDIT,
    MUNICIPAL_TAX_RATE,
    SECONDARY_TAX_RATE,
    STATE_TAX_RATE,
    STATE_TAX_THRESHOLD,
)
from budgetkollen.utils import nz

PRIMARY_TAX = TaxConfig(
    municipal_rate=MUNICIPAL_TAX_RATE,
    state_tax_rate=STATE_TAX_RATE,
    state_tax_threshold=STATE_TAX_THRESHOLD,
    basic_allowance=BASIC_ALLOWANCE,
    job_tax_credit=JOB_TAX_CREDIT,
)


def primary_tax_config(municipal_rate=None) -> TaxConfig:
    """Default primary-earner config, optionally with the municipality's own rate."""

    if municipal_rate is None:
        return PRIMARY_TAX
    return PRIMARY_TAX.model_copy(update={"municipal_rate": nz(municipal_rate, MUNICIPAL_TAX_RATE)})


def tax_breakdown(gross, config: TaxConfig = PRIMARY_TAX) -> TaxBreakdown:
    """Approximate monthly income tax for a primary earner.

    The basic allowance (grundavdrag) is deducted from gross and the
    municipal rate applies to the rest.  State tax is added on taxable income
    above the threshold, then the in-work credit (jobbskatteavdrag) is
    subtracted.  Net stays within ``[0, gross]``.
    """

    g = nz(gross)
    if g <= 0:
        return TaxBreakdown()
    taxable = max(0.0, g - config.basic_allowance)
    municipal = taxable * config.municipal_rate
    state = 0.0
    if taxable > config.state_tax_threshold:
        state = (taxable - config.state_tax_threshold) * config.state_tax_rate
    tax = max(0.0, municipal + state - config.job_tax_credit)
    tax = min(tax, g)
    return TaxBreakdown(gross=g, net=g - tax, tax=tax, municipal_tax=municipal, state_tax=state)


def calculate_net_income(gross, config: TaxConfig = PRIMARY_TAX) -> float:
    """Net monthly income for a primary earner."""

    return tax_breakdown(gross, config).net


def calculate_net_income_second(gross, rate: float = SECONDARY_TAX_RATE) -> float:
    """Net monthly income from a secondary job, flat rate on gross."""

    g = nz(gross)
    if g <= 0:
        return 0.0
    return g * (1 - rate)
