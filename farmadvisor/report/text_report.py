"""
Plain-text dataset report, the "dataset-report.txt" download.
"""

from typing import List, Optional

from farmadvisor.analysis.metrics import AggregateReport, dataset_report
from farmadvisor.data.dataset import Dataset

REPORT_FILENAME = "dataset-report.txt"


def format_report(report: AggregateReport) -> str:
    """Render an AggregateReport in the fixed report line layout."""
    avg = report.avg
    issues = report.issues
    lines: List[str] = [
        f"Dataset rows: {report.count}",
        "Average values:",
        f"  pH: {avg.ph:.2f}",
        f"  Nitrogen: {avg.nitrogen:.1f}",
        f"  Phosphorus: {avg.phosphorus:.1f}",
        f"  Potassium: {avg.potassium:.1f}",
        f"  Moisture: {avg.moisture:.1f}",
        f"  Temperature: {avg.temperature:.1f}°C",
        "Issues counts:",
        f"  Acidic soils (pH<5.5): {issues['acidic']}",
        f"  Alkaline soils (pH>7.5): {issues['alkaline']}",
        f"  Low N: {issues['lowN']}",
        f"  Low P: {issues['lowP']}",
        f"  Low K: {issues['lowK']}",
        f"  Low moisture: {issues['lowMoist']}",
        f"Top recommended crops: {', '.join(report.top_crops)}",
        "Crop recommendation counts:",
    ]
    lines.extend(f"  {crop}: {n}" for crop, n in report.crop_counts.items())
    return "\n".join(lines)


def build_report(dataset: Dataset) -> Optional[str]:
    """Text report for ``dataset``; None when there is no data to report."""
    report = dataset_report(dataset)
    if report is None:
        return None
    return format_report(report)
