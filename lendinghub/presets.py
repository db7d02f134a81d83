"""Program constants and loaders for tailored tables."""
from __future__ import annotations

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

TABLES_ENV_VAR = "LRH_CALC_TABLES"

DISCLAIMER = (
    "Calculations are estimates for illustration only and do not constitute a loan offer or "
    "commitment to lend. Actual rates, payments, mortgage insurance, funding fees and closing costs "
    "depend on credit, property, program guidelines and lender approval."
)

CALCULATOR_TYPES = ("conventional", "va", "fha", "refinance", "affordability")

# Private mortgage insurance on conventional loans with less than 20% down.
PMI_TABLE = {"annual_pct": 0.5, "down_pct_threshold": 20.0}
FHA_TABLES = {"ufmip_pct": 1.75, "annual_mip_pct": 0.85}
VA_TABLE = {"funding_fee_pct": 2.3}
# Housing (front-end) and total debt (back-end) caps as a share of gross income.
DTI_TARGETS = {"front_end_pct": 28.0, "back_end_pct": 36.0}
AFFORDABILITY_DEFAULTS = {"property_tax": 2400.0, "insurance": 1200.0, "hoa": 0.0}

DEFAULT_TABLES: Dict[str, Dict[str, float]] = {
    "pmi": PMI_TABLE,
    "fha": FHA_TABLES,
    "va": VA_TABLE,
    "dti": DTI_TARGETS,
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    out = copy.deepcopy(base)
    for key, val in override.items():
        if isinstance(val, dict) and isinstance(out.get(key), dict):
            out[key] = _merge(out[key], val)
        else:
            out[key] = val
    return out


def resolve_tables(tables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Overlay caller supplied ``tables`` on :data:`DEFAULT_TABLES`."""
    if not tables:
        return copy.deepcopy(DEFAULT_TABLES)
    return _merge(DEFAULT_TABLES, tables)


def load_tables(path: Optional[str] = None) -> Dict[str, Any]:
    """Load program tables from a JSON file merged over the defaults.

    ``path`` falls back to the ``LRH_CALC_TABLES`` environment variable. With
    neither set the built-in defaults are returned. A configured file that is
    missing or malformed raises so a bad deployment is noticed immediately.
    """
    path = path or os.environ.get(TABLES_ENV_VAR)
    if not path:
        return copy.deepcopy(DEFAULT_TABLES)
    file = Path(path)
    with file.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Program tables in {file} must be a JSON object")
    logger.info("Loaded program tables from %s (%s)", file, ", ".join(sorted(data)))
    return _merge(DEFAULT_TABLES, data)
