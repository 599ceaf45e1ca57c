"""Tests for the FastAPI endpoints."""

import json
import sys
import pytest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

SCENARIO_A = "ph,nitrogen,phosphorus,potassium,moisture\n5.0,30,15,40,15\n8.0,150,10,50,25\n"


@pytest.fixture
def data_dir(tmp_path):
    """A dataset store with one valid and one invalid dataset."""
    uploads = tmp_path / "uploads"
    uploads.mkdir()
    (uploads / "soil.csv").write_text(SCENARIO_A, encoding="utf-8")
    (uploads / "bad.csv").write_text("name,value\nfoo,1\n", encoding="utf-8")
    (tmp_path / "datasets.json").write_text(json.dumps([
        {"file": "soil.csv", "originalName": "north-field.csv",
         "size": len(SCENARIO_A), "uploadedAt": "2024-03-01T10:00:00Z"},
        {"file": "bad.csv", "originalName": "bad.csv", "size": 18},
    ]), encoding="utf-8")
    return tmp_path


@pytest.fixture
def client(data_dir):
    """Test client bound to a temporary dataset store."""
    import farmadvisor.api.app as app_module
    from farmadvisor.analysis.pipeline import DatasetAnalyzer
    from farmadvisor.storage import DatasetStore

    app_module.store = DatasetStore(data_dir)
    app_module.analyzer = DatasetAnalyzer()

    from fastapi.testclient import TestClient
    return TestClient(app_module.app)


class TestHealthEndpoint:
    def test_health_returns_200(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["datasets_available"] == 2
        assert "version" in data


class TestAdminEndpoints:
    def test_list_datasets(self, client):
        response = client.get("/api/admin/datasets")
        assert response.status_code == 200
        data = response.json()
        assert [d["file"] for d in data] == ["soil.csv", "bad.csv"]
        assert data[0]["originalName"] == "north-field.csv"

    def test_get_dataset_text(self, client):
        response = client.get("/api/admin/dataset", params={"file": "soil.csv"})
        assert response.status_code == 200
        assert response.text == SCENARIO_A

    def test_missing_file_param(self, client):
        response = client.get("/api/admin/dataset")
        assert response.status_code == 400

    def test_unknown_dataset(self, client):
        response = client.get("/api/admin/dataset", params={"file": "nope.csv"})
        assert response.status_code == 404

    def test_path_traversal_is_confined(self, client, data_dir):
        (data_dir / "secret.csv").write_text("ph\n1\n", encoding="utf-8")
        response = client.get("/api/admin/dataset", params={"file": "../secret.csv"})
        assert response.status_code == 404


class TestCropRecommendation:
    def test_matching_crops(self, client):
        payload = {"ph": 6.5, "nitrogen": 60, "phosphorus": 40,
                   "potassium": 80, "moisture": 40, "temperature": 25}
        response = client.post("/api/crop-recommendation", json=payload)
        assert response.status_code == 200
        assert response.json()["recommendations"] == ["Tomato", "Maize", "Wheat"]

    def test_no_match(self, client):
        payload = {"ph": 9.0, "nitrogen": 10, "phosphorus": 10,
                   "potassium": 10, "moisture": 10, "temperature": 25}
        data = client.post("/api/crop-recommendation", json=payload).json()
        assert data["recommendations"] == []
        assert data["message"] == "No matches found"

    def test_missing_field_returns_422(self, client):
        response = client.post("/api/crop-recommendation", json={"ph": 6.5})
        assert response.status_code == 422


class TestDatasetAnalysis:
    def test_analyze_body(self, client):
        response = client.post("/api/datasets/analyze", content=SCENARIO_A)
        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 2
        assert data["report"]["issues"]["lowP"] == 2
        assert data["health_score"] == {"overall": 28, "nutrient": 60, "ph": 0, "completeness": 100}
        assert data["insights"][0]["title"] == "Optimal pH Range"

    def test_analyze_empty_body(self, client):
        response = client.post("/api/datasets/analyze", content="ph,nitrogen\n")
        assert response.status_code == 422
        assert "0 rows" in response.json()["detail"]

    def test_analyze_missing_columns(self, client):
        response = client.post("/api/datasets/analyze", content="name,value\nfoo,1\n")
        assert response.status_code == 422
        detail = response.json()["detail"]
        assert detail["valid"] is False
        # "name" contains "n", so only the nitrogen family matches
        assert detail["found_families"] == ["nitrogen"]
        assert "ph" in detail["missing_families"]

    def test_text_report(self, client):
        response = client.post("/api/datasets/report", content=SCENARIO_A)
        assert response.status_code == 200
        assert response.text.startswith("Dataset rows: 2\nAverage values:\n  pH: 6.50")
        assert "dataset-report.txt" in response.headers["content-disposition"]

    def test_stored_analysis_uses_cache(self, client):
        import farmadvisor.api.app as app_module
        first = client.get("/api/datasets/soil.csv/analysis")
        second = client.get("/api/datasets/soil.csv/analysis")
        assert first.status_code == second.status_code == 200
        assert first.json() == second.json()
        assert app_module.analyzer.hits == 1

    def test_stored_invalid_dataset(self, client):
        assert client.get("/api/datasets/bad.csv/analysis").status_code == 422

    def test_stored_unknown_dataset(self, client):
        assert client.get("/api/datasets/nope.csv/analysis").status_code == 404

    def test_pdf_report(self, client):
        response = client.get("/api/datasets/soil.csv/report.pdf")
        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert response.content[:4] == b"%PDF"


class TestMetricsEndpoint:
    def test_metrics(self, client):
        client.post("/api/datasets/analyze", content=SCENARIO_A)
        response = client.get("/metrics")
        assert response.status_code == 200
        assert "datasets_analyzed_total" in response.text


class TestStoreEdgeCases:
    def test_latin1_dataset_is_served(self, client, data_dir):
        text = "ph,nitrogen,phosphorus,potassium,moisture,Temp °C\n6.5,60,30,80,40,25\n"
        (data_dir / "uploads" / "latin.csv").write_bytes(text.encode("latin-1"))

        raw = client.get("/api/admin/dataset", params={"file": "latin.csv"})
        assert raw.status_code == 200
        assert "\ufffd" in raw.text

        analysis = client.get("/api/datasets/latin.csv/analysis")
        assert analysis.status_code == 200
        assert analysis.json()["count"] == 1
        # "Temp °C" is not a temperature alias, so the default applies
        assert analysis.json()["report"]["avg"]["temperature"] == 25.0

        assert client.get("/api/datasets/latin.csv/report.pdf").status_code == 200

    def test_malformed_index_entries_skipped(self, client, data_dir):
        (data_dir / "datasets.json").write_text(json.dumps([
            {"file": "soil.csv", "size": "1 KB"},
            "not-an-entry",
            {"originalName": "no-file.csv"},
            {"file": "bad.csv", "size": 12.5},
        ]), encoding="utf-8")
        response = client.get("/api/admin/datasets")
        assert response.status_code == 200
        data = response.json()
        assert [d["file"] for d in data] == ["bad.csv"]
        assert data[0]["size"] == 12.5

    def test_unreadable_index_is_empty(self, client, data_dir):
        (data_dir / "datasets.json").write_text("{not json", encoding="utf-8")
        assert client.get("/api/admin/datasets").json() == []
        assert client.get("/health").json()["datasets_available"] == 0

    def test_stored_analysis_carries_metadata(self, client):
        data = client.get("/api/datasets/soil.csv/analysis").json()
        assert data["dataset"]["originalName"] == "north-field.csv"
        assert data["dataset"]["uploadedAt"] == "2024-03-01T10:00:00Z"

    def test_stored_analysis_without_index_entry(self, client, data_dir):
        (data_dir / "uploads" / "unlisted.csv").write_text(SCENARIO_A, encoding="utf-8")
        data = client.get("/api/datasets/unlisted.csv/analysis").json()
        assert data["dataset"] is None
