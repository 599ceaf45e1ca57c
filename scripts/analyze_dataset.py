"""
Analyse a soil CSV dataset: print the report, insights and anomalies, and
optionally save the text report, a CSV row export and JSON and PDF reports.

Usage:
    python scripts/analyze_dataset.py --file data/samples/soil.csv
    python scripts/analyze_dataset.py --dataset 1700000000000-soil.csv
    python scripts/analyze_dataset.py --file soil.csv --output-dir reports/
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from farmadvisor.analysis.filters import SampleFilter, filter_rows
from farmadvisor.analysis.insights import analyze_sample
from farmadvisor.analysis.pipeline import analyze_dataset
from farmadvisor.clients.dataset_store import DatasetStoreClient
from farmadvisor.config import get_settings
from farmadvisor.data.validation import load_dataset
from farmadvisor.errors import FarmAdvisorError
from farmadvisor.report.export import export_analysis_json, export_rows_csv
from farmadvisor.report.pdf_report import build_pdf_report
from farmadvisor.report.text_report import REPORT_FILENAME, format_report

logger = logging.getLogger("analyze_dataset")

EXPORT_FILENAME = "export.csv"


def print_banner():
    print("=" * 60)
    print("   SOIL DATASET ANALYSIS")
    print("=" * 60)
    print()


def load_text(args) -> str:
    if args.file:
        return Path(args.file).read_text(encoding="utf-8-sig", errors="replace")
    client = DatasetStoreClient(api_base=args.api_base)
    return client.fetch_dataset_text(args.dataset)


def print_analysis(analysis, dataset, show_rows: int):
    print(format_report(analysis.report))
    print()

    h = analysis.health
    print(f"Health score: {h.overall}/100 "
          f"(nutrient {h.nutrient}, pH {h.ph}, completeness {h.completeness})")
    print()

    print(f"Insights ({len(analysis.insights)}):")
    for insight in analysis.insights:
        print(f"  [{insight.priority.upper():6s}] {insight.title}: {insight.message}")
    print()

    print(f"Anomalies ({len(analysis.anomalies)}):")
    for anomaly in analysis.anomalies[:20]:
        print(f"  row {anomaly.row_number:4d} [{anomaly.severity:6s}] "
              f"{anomaly.field}: {anomaly.message}")
    if len(analysis.anomalies) > 20:
        print(f"  ... {len(analysis.anomalies) - 20} more")

    if show_rows:
        print()
        print("Row advice:")
        for i, sample in enumerate(dataset.samples[:show_rows]):
            print(f"  row {i + 1}: {analyze_sample(sample)}")


def save_outputs(analysis, dataset, out: Path) -> List[Path]:
    """Write the text report, row export, JSON and PDF into ``out``."""
    out.mkdir(parents=True, exist_ok=True)
    text_path = out / REPORT_FILENAME
    text_path.write_text(format_report(analysis.report), encoding="utf-8")
    csv_path = out / EXPORT_FILENAME
    csv_path.write_text(export_rows_csv(dataset) or "", encoding="utf-8")
    json_path = out / "analysis.json"
    json_path.write_text(export_analysis_json(analysis), encoding="utf-8")
    pdf_path = build_pdf_report(analysis, out / "report.pdf")
    return [text_path, csv_path, json_path, pdf_path]


def main():
    parser = argparse.ArgumentParser(description="Analyse a soil CSV dataset")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--file", help="Local CSV file")
    source.add_argument("--dataset", help="Stored dataset name on the dataset store")
    parser.add_argument("--api-base", default=None, help="Dataset store API base URL")
    parser.add_argument("--ph-range", nargs=2, type=float, metavar=("MIN", "MAX"),
                        help="Only analyse rows with pH in this range")
    parser.add_argument("--rows", type=int, default=0, help="Print advice for the first N rows")
    parser.add_argument("--output-dir", default=None,
                        help="Write dataset-report.txt, export.csv, analysis.json and report.pdf here")
    args = parser.parse_args()

    logging.basicConfig(level=get_settings().log_level)
    print_banner()

    try:
        dataset = load_dataset(load_text(args))
    except FarmAdvisorError as e:
        print(f"[!] {e}")
        sys.exit(1)

    if args.ph_range:
        indices = filter_rows(dataset, SampleFilter(ph_min=args.ph_range[0], ph_max=args.ph_range[1],
                                                    n_max=float("inf"), p_max=float("inf"),
                                                    k_max=float("inf")))
        print(f"Showing {len(indices)} of {len(dataset)} rows")
        if not indices:
            print("[!] No rows match the filter")
            sys.exit(1)
        dataset = dataset.subset(indices)

    analysis = analyze_dataset(dataset)
    print_analysis(analysis, dataset, args.rows)

    if args.output_dir:
        saved = save_outputs(analysis, dataset, Path(args.output_dir))
        print()
        print(f"Reports saved to {args.output_dir} ({', '.join(p.name for p in saved)})")


if __name__ == "__main__":
    main()
