"""
Rule-based crop recommender.

Rules are a declarative table evaluated in order; every satisfied rule
contributes its crop. Output order is rule order, not a confidence ranking.
"""

from dataclasses import dataclass
from typing import Callable, List

from farmadvisor.data.schema import SoilSample

FALLBACK_CROP = "Millet"
NO_MATCH_MESSAGE = "No matches found"


@dataclass(frozen=True)
class CropRule:
    crop: str
    description: str
    predicate: Callable[[SoilSample], bool]

    def matches(self, sample: SoilSample) -> bool:
        return self.predicate(sample)


CROP_RULES: List[CropRule] = [
    CropRule(
        "Tomato", "pH 6.0-7.5 and moisture > 30",
        lambda s: 6 <= s.ph <= 7.5 and s.moisture > 30,
    ),
    CropRule(
        "Maize", "pH 5.5-7.0 and nitrogen > 50",
        lambda s: 5.5 <= s.ph <= 7 and s.nitrogen > 50,
    ),
    CropRule(
        "Wheat", "pH 6.0-7.0 and phosphorus > 30",
        lambda s: 6 <= s.ph <= 7 and s.phosphorus > 30,
    ),
]


def matching_crops(sample: SoilSample) -> List[str]:
    """Crops of every satisfied rule, possibly empty."""
    return [rule.crop for rule in CROP_RULES if rule.matches(sample)]


def recommend(sample: SoilSample) -> List[str]:
    """Recommend crops for one sample; falls back to Millet, never empty."""
    return matching_crops(sample) or [FALLBACK_CROP]
