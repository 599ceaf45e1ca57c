"""
Anomaly detection over a soil dataset.

Three independent checks run on every row:
    extreme  fixed physical/agronomic bounds (severity fixed per rule)
    outlier  |z| > 3 against the dataset mean and population std
    missing  an exact zero in pH, N, P or K

A row may produce several entries; nothing is de-duplicated. The result is
sorted by severity (high first), keeping scan order within a severity.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Tuple

import numpy as np

from farmadvisor.data.dataset import Dataset
from farmadvisor.data.schema import CORE_NUTRIENT_FIELDS, FIELD_LABELS, SoilSample

SEVERITY_ORDER = {"high": 1, "medium": 2, "low": 3}

Z_SCORE_LIMIT = 3.0
OUTLIER_FIELDS = ["ph", "nitrogen", "phosphorus", "potassium", "temperature", "moisture"]


@dataclass
class Anomaly:
    row_index: int
    kind: str
    severity: str
    field: str
    value: float
    message: str

    @property
    def row_number(self) -> int:
        """1-based row number as shown to users."""
        return self.row_index + 1

    def to_dict(self) -> dict:
        return {
            "row_index": self.row_index,
            "row_number": self.row_number,
            "kind": self.kind,
            "severity": self.severity,
            "field": self.field,
            "value": self.value,
            "message": self.message,
        }


@dataclass(frozen=True)
class BoundRule:
    field: str
    severity: str
    predicate: Callable[[float], bool]
    message: Callable[[float], str]


BOUND_RULES: List[BoundRule] = [
    BoundRule(
        "ph", "high", lambda v: v < 3,
        lambda v: f"Extremely acidic pH ({v:.2f}) - May be sensor error or contamination",
    ),
    BoundRule(
        "ph", "high", lambda v: v > 10,
        lambda v: f"Extremely alkaline pH ({v:.2f}) - Check sensor calibration",
    ),
    BoundRule(
        "nitrogen", "high", lambda v: v > 200,
        lambda v: f"Unusually high nitrogen ({v:.1f}) - Verify measurement",
    ),
    BoundRule(
        "phosphorus", "medium", lambda v: v > 150,
        lambda v: f"High phosphorus ({v:.1f}) - May indicate over-fertilization",
    ),
    BoundRule(
        "potassium", "medium", lambda v: v > 250,
        lambda v: f"High potassium ({v:.1f}) - Check fertilizer application",
    ),
    BoundRule(
        "temperature", "high", lambda v: v > 60 or v < -20,
        lambda v: f"Impossible temperature ({v:.1f}°C) - Sensor malfunction likely",
    ),
]


def field_statistics(dataset: Dataset) -> Dict[str, Tuple[float, float]]:
    """Mean and population standard deviation per outlier field."""
    frame = dataset.to_frame()
    stats = {}
    for field_name in OUTLIER_FIELDS:
        values = frame[field_name].to_numpy(dtype=float)
        stats[field_name] = (float(values.mean()), float(values.std(ddof=0)))
    return stats


def _bound_anomalies(index: int, sample: SoilSample) -> List[Anomaly]:
    found = []
    for rule in BOUND_RULES:
        value = sample.get(rule.field)
        if rule.predicate(value):
            found.append(Anomaly(
                row_index=index, kind="extreme", severity=rule.severity,
                field=FIELD_LABELS[rule.field], value=value,
                message=rule.message(value),
            ))
    return found


def _outlier_anomalies(index: int, sample: SoilSample,
                       stats: Dict[str, Tuple[float, float]]) -> List[Anomaly]:
    found = []
    for field_name in OUTLIER_FIELDS:
        value = sample.get(field_name)
        mean, std = stats[field_name]
        # zero spread means every value equals the mean
        if std == 0 or value <= 0:
            continue
        z_score = abs((value - mean) / std)
        if z_score > Z_SCORE_LIMIT:
            found.append(Anomaly(
                row_index=index, kind="outlier", severity="low",
                field=field_name.capitalize(), value=value,
                message=f"Statistical outlier ({value:.1f}) - {z_score:.1f}σ from mean",
            ))
    return found


def _missing_anomaly(index: int, sample: SoilSample) -> List[Anomaly]:
    if any(sample.get(f) == 0 for f in CORE_NUTRIENT_FIELDS):
        return [Anomaly(
            row_index=index, kind="missing", severity="medium",
            field="Multiple", value=0.0,
            message="Missing or zero values detected - Data may be incomplete",
        )]
    return []


def detect_anomalies(dataset: Dataset) -> List[Anomaly]:
    """Scan every row of ``dataset``; returns severity-sorted anomalies."""
    if not len(dataset):
        return []

    stats = field_statistics(dataset)
    anomalies: List[Anomaly] = []
    for index, sample in enumerate(dataset.samples):
        anomalies.extend(_bound_anomalies(index, sample))
        anomalies.extend(_outlier_anomalies(index, sample, stats))
        anomalies.extend(_missing_anomaly(index, sample))

    anomalies.sort(key=lambda a: SEVERITY_ORDER[a.severity])
    return anomalies


def summarize_anomalies(anomalies: List[Anomaly]) -> Dict[str, int]:
    """Count anomalies per severity."""
    summary = {severity: 0 for severity in SEVERITY_ORDER}
    for anomaly in anomalies:
        summary[anomaly.severity] += 1
    return summary
