"""Tests for the text report, CSV/JSON exports and the PDF report."""

import json
import sys
import pytest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from farmadvisor.analysis.pipeline import analyze_dataset
from farmadvisor.data.dataset import Dataset
from farmadvisor.data.validation import load_dataset
from farmadvisor.report.export import export_analysis_json, export_rows_csv
from farmadvisor.report.pdf_report import build_pdf_report, render_pdf
from farmadvisor.report.text_report import build_report

SCENARIO_A = "ph,nitrogen,phosphorus,potassium,moisture\n5.0,30,15,40,15\n8.0,150,10,50,25\n"


@pytest.fixture
def dataset():
    return load_dataset(SCENARIO_A)


class TestTextReport:
    def test_fixed_layout(self, dataset):
        expected = "\n".join([
            "Dataset rows: 2",
            "Average values:",
            "  pH: 6.50",
            "  Nitrogen: 90.0",
            "  Phosphorus: 12.5",
            "  Potassium: 45.0",
            "  Moisture: 20.0",
            "  Temperature: 25.0°C",
            "Issues counts:",
            "  Acidic soils (pH<5.5): 1",
            "  Alkaline soils (pH>7.5): 1",
            "  Low N: 1",
            "  Low P: 2",
            "  Low K: 1",
            "  Low moisture: 1",
            "Top recommended crops: Millet",
            "Crop recommendation counts:",
            "  Millet: 2",
        ])
        assert build_report(dataset) == expected

    def test_crop_table_lists_every_crop(self):
        dataset = load_dataset("ph,nitrogen,phosphorus,potassium,moisture\n"
                               "6.5,60,40,80,40\n4.0,10,10,10,10\n")
        report = build_report(dataset)
        assert "Top recommended crops: Tomato, Maize, Wheat, Millet" in report
        assert report.endswith("  Tomato: 1\n  Maize: 1\n  Wheat: 1\n  Millet: 1")

    def test_empty_dataset(self):
        assert build_report(Dataset([])) is None


class TestExports:
    def test_rows_csv(self, dataset):
        assert export_rows_csv(dataset) == (
            "ph,nitrogen,phosphorus,potassium,moisture\n"
            "5.0,30,15,40,15\n"
            "8.0,150,10,50,25"
        )

    def test_rows_csv_empty(self):
        assert export_rows_csv(Dataset([])) is None

    def test_analysis_json(self, dataset):
        data = json.loads(export_analysis_json(analyze_dataset(dataset)))
        assert data["count"] == 2
        assert data["report"]["issues"]["lowP"] == 2
        assert data["health_score"]["overall"] == 28
        assert data["insights"][0]["title"] == "Optimal pH Range"
        assert isinstance(data["anomalies"], list)


class TestPdfReport:
    def test_render_pdf(self, dataset):
        content = render_pdf(analyze_dataset(dataset))
        assert content[:4] == b"%PDF"

    def test_render_with_outlier_message(self):
        rows = [{"ph": "6.5", "nitrogen": "60", "phosphorus": "30", "potassium": "80",
                 "moisture": "40"} for _ in range(11)]
        rows.append(dict(rows[0], nitrogen="150"))
        analysis = analyze_dataset(Dataset(rows))
        assert "σ" in analysis.anomalies[0].message
        assert render_pdf(analysis)[:4] == b"%PDF"

    def test_build_pdf_report_writes_file(self, dataset, tmp_path):
        path = build_pdf_report(analyze_dataset(dataset), tmp_path / "out" / "report.pdf")
        assert path.exists()
        assert path.stat().st_size > 0

    def test_render_truncates_long_anomaly_list(self):
        rows = [{"ph": "6.5", "nitrogen": "0", "phosphorus": "30", "potassium": "80",
                 "moisture": "40"} for _ in range(60)]
        analysis = analyze_dataset(Dataset(rows))
        assert len(analysis.anomalies) == 60
        assert render_pdf(analysis)[:4] == b"%PDF"

    def test_render_empty_analysis(self):
        assert render_pdf(analyze_dataset(Dataset([])))[:4] == b"%PDF"
