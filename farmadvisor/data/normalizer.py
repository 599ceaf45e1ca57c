"""
Map raw CSV rows with free-form headers onto canonical SoilSample records.

This is the only place column aliases are resolved; every metric, anomaly
and recommendation goes through ``normalize``.
"""

import math
import re
from typing import Mapping, Optional

from farmadvisor.data.schema import (
    COLUMN_ALIASES, DEFAULT_TEMPERATURE_C, SOIL_FIELDS, SoilSample,
)

_NON_NUMERIC = re.compile(r"[^0-9.+\-eE]")


def safe_number(value) -> float:
    """
    Coerce a cell to float, keeping only digits, '.', '+', '-', 'e' and 'E'.

    Empty, unparsable and non-finite values become 0.
    """
    if value is None:
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
        return number if math.isfinite(number) else 0.0

    cleaned = _NON_NUMERIC.sub("", str(value))
    if not cleaned:
        return 0.0
    try:
        number = float(cleaned)
    except ValueError:
        return 0.0
    return number if math.isfinite(number) else 0.0


def resolve_column(row: Mapping[str, str], field_name: str) -> Optional[str]:
    """Return the first alias header of ``field_name`` holding a non-empty value."""
    for alias in COLUMN_ALIASES[field_name]:
        value = row.get(alias)
        if value is not None and value != "":
            return alias
    return None


def normalize(row: Mapping[str, str]) -> SoilSample:
    """Convert one raw row to a SoilSample."""
    values = {}
    for field_name in SOIL_FIELDS:
        alias = resolve_column(row, field_name)
        if alias is None:
            values[field_name] = DEFAULT_TEMPERATURE_C if field_name == "temperature" else 0.0
        else:
            values[field_name] = safe_number(row[alias])
    return SoilSample(**values)
