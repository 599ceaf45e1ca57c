"""
Inclusive range filters over soil samples, used by dataset views.
"""

from dataclasses import dataclass
from typing import List

from farmadvisor.data.dataset import Dataset
from farmadvisor.data.schema import SoilSample


@dataclass
class SampleFilter:
    """Inclusive [min, max] bounds for pH, N, P and K."""
    ph_min: float = 0.0
    ph_max: float = 14.0
    n_min: float = 0.0
    n_max: float = 200.0
    p_min: float = 0.0
    p_max: float = 200.0
    k_min: float = 0.0
    k_max: float = 200.0

    def __post_init__(self):
        for name in ("ph", "n", "p", "k"):
            low, high = getattr(self, f"{name}_min"), getattr(self, f"{name}_max")
            if low > high:
                raise ValueError(f"{name}_min ({low}) is greater than {name}_max ({high})")

    def accepts(self, sample: SoilSample) -> bool:
        return (
            self.ph_min <= sample.ph <= self.ph_max
            and self.n_min <= sample.nitrogen <= self.n_max
            and self.p_min <= sample.phosphorus <= self.p_max
            and self.k_min <= sample.potassium <= self.k_max
        )


def filter_rows(dataset: Dataset, sample_filter: SampleFilter) -> List[int]:
    """Indices of rows accepted by ``sample_filter``, in dataset order."""
    return [i for i, sample in enumerate(dataset.samples) if sample_filter.accepts(sample)]
