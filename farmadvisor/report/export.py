"""
CSV and JSON exports of a loaded dataset and its analysis.
"""

import json
from typing import Optional

from farmadvisor.analysis.pipeline import DatasetAnalysis
from farmadvisor.data.dataset import Dataset


def export_rows_csv(dataset: Dataset) -> Optional[str]:
    """
    Re-serialise the raw rows, using the first row's headers as columns.

    Values are written as-is (no quoting), matching what was parsed.
    Returns None for an empty dataset.
    """
    if not len(dataset):
        return None
    keys = dataset.headers
    lines = [",".join(keys)]
    for row in dataset.rows:
        lines.append(",".join(row.get(k) or "" for k in keys))
    return "\n".join(lines)


def export_analysis_json(analysis: DatasetAnalysis, indent: int = 2) -> str:
    """Machine-readable report, health score, insights and anomalies."""
    return json.dumps(analysis.to_dict(), indent=indent, ensure_ascii=False)
