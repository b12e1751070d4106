import json
import logging
import os
from typing import Any

import streamlit as st
from pydantic import ValidationError as PydanticValidationError

from budgetkollen.config import get_settings
from budgetkollen.models import CalculatorState

logger = logging.getLogger(__name__)

# Only persist the calculator's own keys.  Streamlit widgets inject their own
# keys (e.g. ``import_csv``) into ``session_state``; restoring those makes the
# next run raise ``StreamlitAPIException`` because widget values cannot be
# assigned manually.
PERSISTED_KEYS = {
    "loan_parameters",
    "income",
    "expenses",
}
WIDGET_PREFIXES = ("inc_", "exp_")


def _session_file() -> str:
    return get_settings().session_file


def _serializable(value: Any) -> bool:
    return isinstance(value, (int, float, str, bool, list, dict))


def init_state() -> None:
    """Fill missing calculator keys with a fresh default state."""
    settings = get_settings()
    fresh = CalculatorState(
        loan_parameters={
            "interest_rates": settings.default_interest_rates,
            "amortization_rates": settings.default_amortization_rates,
        }
    ).model_dump()
    for key in PERSISTED_KEYS:
        st.session_state.setdefault(key, fresh[key])


def load_state() -> None:
    """Restore calculator keys from the session file if it exists."""
    path = _session_file()
    if not os.path.exists(path):
        return
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as exc:
        logger.warning("could not restore session state", extra={"error": str(exc)})
        return
    if not isinstance(data, dict):
        logger.warning("could not restore session state", extra={"error": "not a JSON object"})
        return
    restored = {k: v for k, v in data.items() if k in PERSISTED_KEYS}
    try:
        clean = CalculatorState.model_validate(restored).model_dump()
    except PydanticValidationError as exc:
        logger.warning("could not restore session state", extra={"error": str(exc)})
        return
    for key in restored:
        st.session_state.setdefault(key, clean[key])


def save_state() -> None:
    """Persist serializable calculator keys to the session file."""
    data = {
        k: v
        for k, v in st.session_state.items()
        if k in PERSISTED_KEYS and _serializable(v)
    }
    try:
        with open(_session_file(), "w", encoding="utf-8") as f:
            json.dump(data, f)
    except OSError as exc:
        logger.warning("could not save session state", extra={"error": str(exc)})


def current_state() -> CalculatorState:
    """Snapshot of the session as a validated calculator state."""
    return CalculatorState.model_validate(
        {k: st.session_state.get(k, {}) for k in PERSISTED_KEYS}
    )


def apply_imported_state(state: CalculatorState) -> None:
    data = state.model_dump()
    # keyed inputs hold their own values; drop them so they pick up the import
    for key in [k for k in st.session_state.keys() if str(k).startswith(WIDGET_PREFIXES)]:
        del st.session_state[key]
    for key in PERSISTED_KEYS:
        st.session_state[key] = data[key]
