"""Tests for the dataset-store and crop-recommendation HTTP clients."""

import sys
import pytest
import requests
from pathlib import Path
from unittest.mock import MagicMock

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from farmadvisor.clients.dataset_store import DatasetStoreClient
from farmadvisor.clients.recommendation import RecommendationServiceClient
from farmadvisor.data.schema import SoilSample
from farmadvisor.errors import (
    DatasetValidationError, FetchError, RecommendationServiceError,
)

API = "http://advisor.test/api"


def _response(status=200, json_body=None, text=""):
    resp = MagicMock()
    resp.status_code = status
    resp.ok = 200 <= status < 300
    resp.text = text
    if json_body is None:
        resp.json.side_effect = ValueError("no json")
    else:
        resp.json.return_value = json_body
    return resp


class TestDatasetStoreClient:
    def test_fetch_text(self):
        session = MagicMock()
        session.get.return_value = _response(text="ph,nitrogen,phosphorus\n6.5,60,30\n")
        client = DatasetStoreClient(api_base=API + "/", timeout=5, session=session)
        text = client.fetch_dataset_text("soil.csv")
        assert text.startswith("ph,")
        session.get.assert_called_once_with(
            f"{API}/admin/dataset", params={"file": "soil.csv"}, timeout=5,
        )

    def test_fetch_non_ok_status(self):
        session = MagicMock()
        session.get.return_value = _response(status=404, text="not found")
        client = DatasetStoreClient(api_base=API, session=session)
        with pytest.raises(FetchError) as exc:
            client.fetch_dataset_text("missing.csv")
        assert exc.value.status == 404
        assert "status 404" in str(exc.value)

    def test_fetch_transport_error(self):
        session = MagicMock()
        session.get.side_effect = requests.exceptions.ConnectionError("refused")
        client = DatasetStoreClient(api_base=API, session=session)
        with pytest.raises(FetchError) as exc:
            client.fetch_dataset_text("soil.csv")
        assert exc.value.status is None

    def test_no_dataset_selected(self):
        session = MagicMock()
        client = DatasetStoreClient(api_base=API, session=session)
        with pytest.raises(FetchError, match="No dataset selected"):
            client.fetch_dataset_text("")
        session.get.assert_not_called()

    def test_load_dataset_validates(self):
        session = MagicMock()
        session.get.return_value = _response(text="name,value\nfoo,1\n")
        client = DatasetStoreClient(api_base=API, session=session)
        with pytest.raises(DatasetValidationError):
            client.load_dataset("bad.csv")

    def test_load_dataset(self):
        session = MagicMock()
        session.get.return_value = _response(
            text="ph,nitrogen,phosphorus,potassium\n6.5,60,30,80\n")
        dataset = DatasetStoreClient(api_base=API, session=session).load_dataset("soil.csv")
        assert len(dataset) == 1
        assert dataset[0].potassium == 80.0

    def test_list_datasets(self):
        session = MagicMock()
        resp = _response(json_body=[{"file": "a.csv", "originalName": "a.csv", "size": 10}])
        session.get.return_value = resp
        client = DatasetStoreClient(api_base=API, session=session)
        assert client.list_datasets()[0]["file"] == "a.csv"

    def test_list_datasets_http_error(self):
        session = MagicMock()
        resp = _response(status=503)
        resp.raise_for_status.side_effect = requests.exceptions.HTTPError(response=resp)
        session.get.return_value = resp
        client = DatasetStoreClient(api_base=API, session=session)
        with pytest.raises(FetchError) as exc:
            client.list_datasets()
        assert exc.value.status == 503


class TestRecommendationServiceClient:
    def test_recommendations(self):
        session = MagicMock()
        session.post.return_value = _response(json_body={"recommendations": ["Tomato", "Maize"]})
        client = RecommendationServiceClient(api_base=API, timeout=3, session=session)
        sample = SoilSample(ph=6.5, nitrogen=60, phosphorus=40, potassium=80, moisture=40)
        result = client.recommend(sample)
        assert result.crops == ["Tomato", "Maize"]
        assert result.matched
        assert result.message is None
        session.post.assert_called_once_with(
            f"{API}/crop-recommendation", json=sample.to_dict(), timeout=3,
        )

    def test_empty_list_is_no_match(self):
        session = MagicMock()
        session.post.return_value = _response(json_body={"recommendations": []})
        result = RecommendationServiceClient(api_base=API, session=session).recommend(SoilSample())
        assert result.crops == []
        assert not result.matched
        assert result.message == "No matches found"

    def test_service_error(self):
        session = MagicMock()
        session.post.return_value = _response(status=500, json_body={"error": "model offline"})
        client = RecommendationServiceClient(api_base=API, session=session)
        with pytest.raises(RecommendationServiceError) as exc:
            client.recommend(SoilSample())
        assert str(exc.value) == "Prediction Failed: model offline"
        assert exc.value.status == 500

    def test_transport_error(self):
        session = MagicMock()
        session.post.side_effect = requests.exceptions.Timeout("timed out")
        client = RecommendationServiceClient(api_base=API, session=session)
        with pytest.raises(RecommendationServiceError, match="Prediction Failed"):
            client.recommend(SoilSample())

    def test_non_object_body(self):
        session = MagicMock()
        session.post.return_value = _response(json_body=["Tomato"])
        client = RecommendationServiceClient(api_base=API, session=session)
        with pytest.raises(RecommendationServiceError, match="Invalid response body"):
            client.recommend(SoilSample())

    def test_recommendations_not_a_list(self):
        session = MagicMock()
        session.post.return_value = _response(json_body={"recommendations": "Tomato"})
        client = RecommendationServiceClient(api_base=API, session=session)
        with pytest.raises(RecommendationServiceError, match="Invalid response body"):
            client.recommend(SoilSample())

    def test_invalid_json(self):
        session = MagicMock()
        session.post.return_value = _response(text="<html>")
        client = RecommendationServiceClient(api_base=API, session=session)
        with pytest.raises(RecommendationServiceError, match="Invalid JSON"):
            client.recommend(SoilSample())
