"""
Immutable, index-aligned container for one loaded soil dataset.
"""

import hashlib
import json
from typing import Dict, Iterator, List, Sequence, Tuple

import pandas as pd

from farmadvisor.data.normalizer import normalize
from farmadvisor.data.schema import SOIL_FIELDS, SoilSample


class Dataset:
    """
    Raw rows plus their normalized SoilSample records.

    ``rows[i]`` and ``samples[i]`` always describe the same CSV data line;
    the index is the identity used by anomalies and filters.
    """

    def __init__(self, rows: Sequence[Dict[str, str]]):
        self._rows: Tuple[Dict[str, str], ...] = tuple(dict(r) for r in rows)
        self._samples: Tuple[SoilSample, ...] = tuple(normalize(r) for r in self._rows)
        self._fingerprint = None
        self._frame = None

    @property
    def rows(self) -> Tuple[Dict[str, str], ...]:
        return self._rows

    @property
    def samples(self) -> Tuple[SoilSample, ...]:
        return self._samples

    @property
    def headers(self) -> List[str]:
        return list(self._rows[0].keys()) if self._rows else []

    @property
    def fingerprint(self) -> str:
        """SHA-256 over the raw rows; equal content gives equal fingerprints."""
        if self._fingerprint is None:
            payload = json.dumps(self._rows, ensure_ascii=False, separators=(",", ":"))
            self._fingerprint = hashlib.sha256(payload.encode("utf-8")).hexdigest()
        return self._fingerprint

    def to_frame(self) -> pd.DataFrame:
        """Numeric view with one column per canonical soil field."""
        if self._frame is None:
            self._frame = pd.DataFrame(
                [s.to_dict() for s in self._samples], columns=SOIL_FIELDS, dtype=float,
            )
        return self._frame.copy()

    def subset(self, indices: Sequence[int]) -> "Dataset":
        return Dataset([self._rows[i] for i in indices])

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[SoilSample]:
        return iter(self._samples)

    def __getitem__(self, index: int) -> SoilSample:
        return self._samples[index]

    def __bool__(self) -> bool:
        return bool(self._rows)

    def __repr__(self) -> str:
        return f"Dataset(rows={len(self)}, fingerprint={self.fingerprint[:12]})"
