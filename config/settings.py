from __future__ import annotations
import os
from pathlib import Path

__all__ = [
    "get_data_path",
    "get_default_dollar_rate",
    "get_return_loss_includes_cod",
    "get_entry_defaults",
]

_DEFAULTS: dict[str, str] = {
    "PAGE_LEDGER_DATA_PATH":    "data/daily_records.json",
    "DEFAULT_DOLLAR_RATE":      "126",
    "RETURN_LOSS_INCLUDES_COD": "true",
    "DEFAULT_DELIVERY_CHARGE":  "90",
    "DEFAULT_PACKAGING_COST":   "6",
    "DEFAULT_COD_PERCENT":      "1",
    "DEFAULT_RETURN_PERCENT":   "20",
}

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY  = {"0", "false", "no", "off"}


def _load_dotenv(dotenv_path: Path | str = ".env") -> None:
    path = Path(dotenv_path)
    if not path.is_file():
        return
    for line in path.read_text().splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or "=" not in stripped:
            continue
        key, _, value = stripped.partition("=")
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key and value and key not in os.environ:
            os.environ[key] = value


def _get_streamlit_secret(key: str) -> str:
    """
    Try to read a value from st.secrets (Streamlit Community Cloud).
    Returns empty string if streamlit is not available or key not set.
    Safe to call outside a Streamlit context.
    """
    try:
        import streamlit as st
        if key in st.secrets:
            return str(st.secrets[key]).strip()
        return ""
    except Exception:
        return ""


def _get_setting(key: str) -> str:
    """
    Resolve one setting.
    Priority: st.secrets → environment variable → .env file → default
    """
    secret = _get_streamlit_secret(key)
    if secret:
        return secret
    _load_dotenv()
    value = os.environ.get(key, "").strip()
    return value or _DEFAULTS[key]


def _get_float(key: str) -> float:
    try:
        return float(_get_setting(key))
    except ValueError:
        return float(_DEFAULTS[key])


def get_data_path() -> Path:
    """Return the JSON file backing the day store."""
    return Path(_get_setting("PAGE_LEDGER_DATA_PATH"))


def get_default_dollar_rate() -> float:
    """Rate used when a new day is created without one (local units per dollar)."""
    return _get_float("DEFAULT_DOLLAR_RATE")


def get_return_loss_includes_cod() -> bool:
    """
    Whether the nominal COD fee on returned units counts toward return loss.
    Unrecognised values fall back to the default (true).
    """
    raw = _get_setting("RETURN_LOSS_INCLUDES_COD").lower()
    if raw in _TRUTHY:
        return True
    if raw in _FALSY:
        return False
    return _DEFAULTS["RETURN_LOSS_INCLUDES_COD"] in _TRUTHY


def get_entry_defaults() -> dict[str, float]:
    """Pre-filled values for a fresh entry form."""
    return {
        "dollar_rate":     get_default_dollar_rate(),
        "delivery_charge": _get_float("DEFAULT_DELIVERY_CHARGE"),
        "packaging_cost":  _get_float("DEFAULT_PACKAGING_COST"),
        "cod_percent":     _get_float("DEFAULT_COD_PERCENT"),
        "return_percent":  _get_float("DEFAULT_RETURN_PERCENT"),
    }
