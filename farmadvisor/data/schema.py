"""
Canonical soil-sample schema, column alias tables and agronomic thresholds
for the farm advisor.
"""

from dataclasses import dataclass, asdict
from typing import Dict, List, Tuple


# ---------- Canonical fields ----------
SOIL_FIELDS: List[str] = [
    "ph", "nitrogen", "phosphorus", "potassium", "moisture", "temperature",
]

# Fields whose exact-zero value is treated as a missing reading
CORE_NUTRIENT_FIELDS: List[str] = ["ph", "nitrogen", "phosphorus", "potassium"]

FIELD_LABELS: Dict[str, str] = {
    "ph": "pH",
    "nitrogen": "Nitrogen",
    "phosphorus": "Phosphorus",
    "potassium": "Potassium",
    "moisture": "Moisture",
    "temperature": "Temperature",
}

# Used when no temperature column carries a value; every other field falls back to 0
DEFAULT_TEMPERATURE_C = 25.0


# ---------- Column aliases (case-sensitive, first match wins) ----------
COLUMN_ALIASES: Dict[str, Tuple[str, ...]] = {
    "ph": (
        "ph", "pH", "Ph", "PH", "soil_ph", "pH_Value", "pH_value", "ph_value",
    ),
    "nitrogen": (
        "nitrogen", "Nitrogen", "n", "N", "nitro", "nitrogen_ppm",
    ),
    "phosphorus": (
        "phosphorus", "Phosphorus", "p", "P", "phosphorus_ppm",
    ),
    "potassium": (
        "potassium", "Potassium", "k", "K", "potash", "potassium_ppm",
    ),
    "moisture": (
        "moisture", "moist", "Moisture", "water", "Humidity", "humidity",
    ),
    "temperature": (
        "temperature", "Temperature", "temp", "Temp", "soil_temp",
        "soil_temperature", "TEMPERATURE",
    ),
}

# Substrings searched in lower-cased headers by the dataset validation gate
COLUMN_FAMILY_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "ph": ("ph",),
    "nitrogen": ("nitrogen", "n"),
    "phosphorus": ("phosphorus", "p"),
    "potassium": ("potassium", "k"),
    "moisture": ("moisture", "humidity", "water"),
}

MIN_COLUMN_FAMILIES = 3


# ---------- Per-row issue thresholds ----------
ACIDIC_PH_BELOW = 5.5
ALKALINE_PH_ABOVE = 7.5
LOW_NITROGEN_BELOW = 40.0
LOW_PHOSPHORUS_BELOW = 20.0
LOW_POTASSIUM_BELOW = 50.0
LOW_MOISTURE_BELOW = 20.0

ISSUE_KEYS: List[str] = ["acidic", "alkaline", "lowN", "lowP", "lowK", "lowMoist"]


# ---------- Healthy ranges for dataset averages (health score) ----------
HEALTHY_AVERAGE_RANGES: Dict[str, Tuple[float, float]] = {
    "nitrogen":   (40.0, 150.0),
    "phosphorus": (20.0, 100.0),
    "potassium":  (50.0, 150.0),
    "moisture":   (20.0, 80.0),
}


@dataclass(frozen=True)
class SoilSample:
    """One canonical soil reading."""
    ph: float = 0.0
    nitrogen: float = 0.0
    phosphorus: float = 0.0
    potassium: float = 0.0
    moisture: float = 0.0
    temperature: float = DEFAULT_TEMPERATURE_C

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)

    def get(self, field_name: str) -> float:
        return getattr(self, field_name)
