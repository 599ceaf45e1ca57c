"""
Dataset validation gate: rejects CSV files that do not look like soil data
before any metric or anomaly computation runs.
"""

import logging
from typing import Dict, List, Sequence

from farmadvisor.data.csv_parser import parse_csv
from farmadvisor.data.dataset import Dataset
from farmadvisor.data.schema import COLUMN_FAMILY_KEYWORDS, MIN_COLUMN_FAMILIES
from farmadvisor.errors import DatasetValidationError, ParseEmptyError

logger = logging.getLogger(__name__)

EMPTY_DATASET_MESSAGE = "Dataset is empty."
MISSING_COLUMNS_MESSAGE = (
    "This CSV file does not contain enough required soil data columns "
    "(pH, Nitrogen, Phosphorus, Potassium, Moisture). Please choose a "
    "different CSV file with proper soil data."
)


class ValidationResult:
    """Outcome of the soil-column check."""

    def __init__(self, valid: bool, message: str = "",
                 found: List[str] = None, missing: List[str] = None):
        self.valid = valid
        self.message = message
        self.found = found or []
        self.missing = missing or []

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "message": self.message,
            "found_families": self.found,
            "missing_families": self.missing,
        }


def detect_column_families(headers: Sequence[str]) -> Dict[str, bool]:
    """Report which soil column families appear among ``headers`` (substring match)."""
    lowered = [h.lower() for h in headers]
    return {
        family: any(kw in h for h in lowered for kw in keywords)
        for family, keywords in COLUMN_FAMILY_KEYWORDS.items()
    }


def validate_dataset(rows: Sequence[Dict[str, str]]) -> ValidationResult:
    """
    Check that parsed rows carry at least three of the five soil column
    families (pH, nitrogen, phosphorus, potassium, moisture).

    Only the headers of the first row are inspected.
    """
    if not rows:
        return ValidationResult(valid=False, message=EMPTY_DATASET_MESSAGE,
                                missing=list(COLUMN_FAMILY_KEYWORDS))

    families = detect_column_families(list(rows[0].keys()))
    found = [f for f, present in families.items() if present]
    missing = [f for f, present in families.items() if not present]

    if len(found) < MIN_COLUMN_FAMILIES:
        return ValidationResult(valid=False, message=MISSING_COLUMNS_MESSAGE,
                                found=found, missing=missing)
    return ValidationResult(valid=True, found=found, missing=missing)


def load_dataset(text: str) -> Dataset:
    """
    Parse, validate and normalize CSV text.

    Raises:
        ParseEmptyError: no header + data line in ``text``.
        DatasetValidationError: fewer than three soil column families.
    """
    rows = parse_csv(text)
    if not rows:
        logger.warning("CSV parsed to zero rows (%d chars)", len(text or ""))
        raise ParseEmptyError()

    result = validate_dataset(rows)
    if not result.valid:
        logger.warning("Dataset rejected, soil families found: %s", result.found)
        raise DatasetValidationError(result)

    dataset = Dataset(rows)
    logger.info("Loaded %d rows (families: %s)", len(dataset), ", ".join(result.found))
    return dataset
