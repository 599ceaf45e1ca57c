"""
FastAPI application for the farm advisor.

Endpoints:
    GET  /health                         — Health check
    GET  /api/admin/datasets             — Stored dataset index
    GET  /api/admin/dataset?file=NAME    — Raw stored dataset text
    POST /api/crop-recommendation        — Rule-based crops for one soil sample
    POST /api/datasets/analyze           — Report, health score, insights, anomalies for CSV text
    POST /api/datasets/report            — Plain-text report for CSV text
    GET  /api/datasets/{file}/analysis   — Analysis of a stored dataset
    GET  /api/datasets/{file}/report.pdf — PDF report of a stored dataset
    GET  /metrics                        — Prometheus metrics
"""

import logging
import time
from typing import List, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse, Response
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from pydantic import ValidationError

from farmadvisor import __version__
from farmadvisor.analysis.pipeline import DatasetAnalysis, DatasetAnalyzer
from farmadvisor.analysis.recommender import NO_MATCH_MESSAGE, matching_crops
from farmadvisor.api.schemas import (
    AnalysisResponse, CropRecommendationResponse, DatasetInfo,
    HealthResponse, SoilSampleRequest,
)
from farmadvisor.config import get_settings
from farmadvisor.data.schema import SoilSample
from farmadvisor.data.validation import load_dataset
from farmadvisor.errors import DatasetValidationError, ParseEmptyError
from farmadvisor.report.pdf_report import render_pdf
from farmadvisor.report.text_report import REPORT_FILENAME, format_report
from farmadvisor.storage import DatasetNotFoundError, DatasetStore

logger = logging.getLogger(__name__)

# ---- App setup ----
app = FastAPI(
    title="Farm Advisor API",
    description="Soil dataset analysis and rule-based crop recommendations",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---- Prometheus metrics ----
DATASETS_ANALYZED = Counter("datasets_analyzed_total", "Datasets analysed")
ROWS_ANALYZED = Counter("dataset_rows_analyzed_total", "Rows analysed")
DATASETS_REJECTED = Counter(
    "datasets_rejected_total", "Datasets rejected before analysis", ["reason"],
)
ANOMALIES_FOUND = Counter("anomalies_found_total", "Anomalies found", ["severity"])
RECOMMENDATIONS = Counter("crop_recommendations_total", "Recommended crops", ["crop"])
ANALYSIS_LATENCY = Histogram(
    "dataset_analysis_seconds", "Dataset analysis latency",
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
)

# ---- Global references (replaced in tests) ----
settings = get_settings()
store = DatasetStore(settings.data_dir)
analyzer = DatasetAnalyzer(max_entries=settings.cache_size)


def _load_or_422(text: str):
    try:
        return load_dataset(text)
    except ParseEmptyError as e:
        DATASETS_REJECTED.labels(reason="empty").inc()
        raise HTTPException(status_code=422, detail=str(e))
    except DatasetValidationError as e:
        DATASETS_REJECTED.labels(reason="columns").inc()
        raise HTTPException(status_code=422, detail=e.result.to_dict())


def _read_stored(file_name: str) -> str:
    try:
        return store.read_text(file_name)
    except DatasetNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


def _analyze(text: str) -> DatasetAnalysis:
    dataset = _load_or_422(text)
    start_time = time.time()
    analysis = analyzer.analyze(dataset)
    ANALYSIS_LATENCY.observe(time.time() - start_time)
    DATASETS_ANALYZED.inc()
    ROWS_ANALYZED.inc(analysis.count)
    for anomaly in analysis.anomalies:
        ANOMALIES_FOUND.labels(severity=anomaly.severity).inc()
    return analysis


def _dataset_info(entry: dict) -> Optional[DatasetInfo]:
    """Picker entry for one index record; None when the record is unusable."""
    if not entry.get("file"):
        return None
    try:
        return DatasetInfo.model_validate(
            {k: v for k, v in entry.items() if k in DatasetInfo.model_fields}
        )
    except ValidationError as e:
        logger.warning("Skipping malformed dataset index entry %r: %s",
                       entry.get("file"), e.errors()[0].get("msg"))
        return None


async def _body_text(request: Request) -> str:
    raw = await request.body()
    return raw.decode("utf-8-sig", errors="replace")


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        datasets_available=len(store.list_datasets()),
    )


@app.get("/api/admin/datasets", response_model=List[DatasetInfo])
async def list_datasets():
    """Metadata of every stored dataset, for dataset pickers."""
    infos = (_dataset_info(entry) for entry in store.list_datasets())
    return [info for info in infos if info is not None]


@app.get("/api/admin/dataset", response_class=PlainTextResponse)
async def get_dataset(file: Optional[str] = None):
    """Raw text of one stored dataset."""
    if not file:
        raise HTTPException(status_code=400, detail="Missing file query parameter")
    return PlainTextResponse(_read_stored(file))


@app.post("/api/crop-recommendation", response_model=CropRecommendationResponse)
async def crop_recommendation(request: SoilSampleRequest):
    """
    Rule-based crops for one soil sample. An empty list with
    "No matches found" means no rule fired.
    """
    sample = SoilSample(**request.model_dump())
    crops = matching_crops(sample)
    for crop in crops:
        RECOMMENDATIONS.labels(crop=crop).inc()
    if not crops:
        return CropRecommendationResponse(recommendations=[], message=NO_MATCH_MESSAGE)
    return CropRecommendationResponse(recommendations=crops)


@app.post("/api/datasets/analyze", response_model=AnalysisResponse)
async def analyze_csv(request: Request):
    """Analyse CSV text sent as the request body."""
    analysis = _analyze(await _body_text(request))
    return AnalysisResponse(**analysis.to_dict())


@app.post("/api/datasets/report", response_class=PlainTextResponse)
async def report_csv(request: Request):
    """Plain-text report for CSV text sent as the request body."""
    analysis = _analyze(await _body_text(request))
    return PlainTextResponse(
        format_report(analysis.report),
        headers={"Content-Disposition": f'attachment; filename="{REPORT_FILENAME}"'},
    )


@app.get("/api/datasets/{file}/analysis", response_model=AnalysisResponse)
async def analyze_stored(file: str):
    """Analysis of a stored dataset."""
    analysis = _analyze(_read_stored(file))
    metadata = store.get_metadata(file)
    return AnalysisResponse(
        **analysis.to_dict(),
        dataset=_dataset_info(metadata) if metadata else None,
    )


@app.get("/api/datasets/{file}/report.pdf")
async def pdf_report_stored(file: str):
    """PDF report of a stored dataset."""
    analysis = _analyze(_read_stored(file))
    return Response(
        content=render_pdf(analysis),
        media_type="application/pdf",
        headers={"Content-Disposition": 'attachment; filename="dataset-report.pdf"'},
    )


@app.get("/metrics")
async def metrics():
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


if __name__ == "__main__":
    import uvicorn
    logging.basicConfig(level=settings.log_level)
    uvicorn.run(app, host="0.0.0.0", port=8000)
