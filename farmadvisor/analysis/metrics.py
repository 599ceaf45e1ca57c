"""
Soil metrics engine: per-row issue classification, dataset averages,
crop frequency and the composite dataset health score.
"""

import math
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import numpy as np

from farmadvisor.analysis.recommender import recommend
from farmadvisor.data.dataset import Dataset
from farmadvisor.data.schema import (
    ACIDIC_PH_BELOW, ALKALINE_PH_ABOVE, CORE_NUTRIENT_FIELDS,
    HEALTHY_AVERAGE_RANGES, ISSUE_KEYS, LOW_MOISTURE_BELOW,
    LOW_NITROGEN_BELOW, LOW_PHOSPHORUS_BELOW, LOW_POTASSIUM_BELOW,
    SOIL_FIELDS, SoilSample,
)

TOP_CROPS_LIMIT = 5

# Health score weights and penalties
NUTRIENT_WEIGHT = 0.4
PH_WEIGHT = 0.4
COMPLETENESS_WEIGHT = 0.2
RANGE_PENALTY = 20
PH_VARIANCE_PENALTY_STEPS = (1.0, 2.0)
MISSING_PENALTY_PER_PCT = 2


@dataclass
class AggregateReport:
    count: int
    avg: SoilSample
    issues: Dict[str, int]
    top_crops: List[str]
    crop_counts: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "count": self.count,
            "avg": self.avg.to_dict(),
            "issues": dict(self.issues),
            "top_crops": list(self.top_crops),
            "crop_counts": dict(self.crop_counts),
        }


@dataclass
class HealthScore:
    overall: int
    nutrient: int
    ph: int
    completeness: int

    def to_dict(self) -> dict:
        return {
            "overall": self.overall,
            "nutrient": self.nutrient,
            "ph": self.ph,
            "completeness": self.completeness,
        }


def round_half_up(value: float) -> int:
    """Round .5 upwards (Python's round() is banker's rounding)."""
    return int(math.floor(value + 0.5))


def _clamp_score(value: float) -> int:
    return max(0, min(100, round_half_up(value)))


def classify_issues(sample: SoilSample) -> List[str]:
    """Issue keys raised by one sample; acidic and alkaline are exclusive."""
    issues = []
    if sample.ph < ACIDIC_PH_BELOW:
        issues.append("acidic")
    elif sample.ph > ALKALINE_PH_ABOVE:
        issues.append("alkaline")
    if sample.nitrogen < LOW_NITROGEN_BELOW:
        issues.append("lowN")
    if sample.phosphorus < LOW_PHOSPHORUS_BELOW:
        issues.append("lowP")
    if sample.potassium < LOW_POTASSIUM_BELOW:
        issues.append("lowK")
    if sample.moisture < LOW_MOISTURE_BELOW:
        issues.append("lowMoist")
    return issues


def dataset_report(dataset: Dataset) -> Optional[AggregateReport]:
    """
    Aggregate a dataset: unweighted averages over every row (zeros count),
    issue counts and crop recommendation frequencies.

    Returns None for an empty dataset.
    """
    if not len(dataset):
        return None

    means = dataset.to_frame().mean()
    avg = SoilSample(**{f: float(means[f]) for f in SOIL_FIELDS})

    issues = OrderedDict((key, 0) for key in ISSUE_KEYS)
    crop_counts: Dict[str, int] = {}
    for sample in dataset.samples:
        for issue in classify_issues(sample):
            issues[issue] += 1
        for crop in recommend(sample):
            crop_counts[crop] = crop_counts.get(crop, 0) + 1

    ranked = sorted(crop_counts.items(), key=lambda item: item[1], reverse=True)
    top_crops = [crop for crop, _ in ranked[:TOP_CROPS_LIMIT]]

    return AggregateReport(
        count=len(dataset),
        avg=avg,
        issues=dict(issues),
        top_crops=top_crops,
        crop_counts=crop_counts,
    )


def health_score(dataset: Dataset, report: Optional[AggregateReport]) -> Optional[HealthScore]:
    """
    Composite 0-100 dataset health score.

    nutrient: 100 minus 20 for each of N, P, K, moisture whose average sits
        outside its healthy range.
    ph: 100 minus the percentage of acidic/alkaline rows, minus 20 when the
        population pH variance exceeds 1 and another 20 when it exceeds 2.
    completeness: 100 minus 2 points per percent of zero pH/N/P/K cells.
    overall: 0.4 nutrient + 0.4 ph + 0.2 completeness.
    """
    if not len(dataset) or report is None:
        return None

    avg = report.avg
    nutrient = 100.0
    for field_name, (low, high) in HEALTHY_AVERAGE_RANGES.items():
        value = avg.get(field_name)
        if value < low or value > high:
            nutrient -= RANGE_PENALTY

    frame = dataset.to_frame()

    ph_issue_pct = (report.issues["acidic"] + report.issues["alkaline"]) / report.count * 100
    ph = max(0.0, 100.0 - ph_issue_pct)
    ph_variance = float(np.mean((frame["ph"].to_numpy() - avg.ph) ** 2))
    for step in PH_VARIANCE_PENALTY_STEPS:
        if ph_variance > step:
            ph -= RANGE_PENALTY

    missing = int((frame[CORE_NUTRIENT_FIELDS] == 0).to_numpy().sum())
    missing_pct = missing / (len(frame) * len(CORE_NUTRIENT_FIELDS)) * 100
    completeness = max(0.0, 100.0 - missing_pct * MISSING_PENALTY_PER_PCT)

    overall = round_half_up(
        nutrient * NUTRIENT_WEIGHT + ph * PH_WEIGHT + completeness * COMPLETENESS_WEIGHT
    )

    return HealthScore(
        overall=max(0, min(100, overall)),
        nutrient=_clamp_score(nutrient),
        ph=_clamp_score(ph),
        completeness=_clamp_score(completeness),
    )
