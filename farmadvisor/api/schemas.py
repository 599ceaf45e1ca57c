"""
Pydantic request/response schemas for the farm advisor API.
"""

from typing import Dict, List, Optional, Union
from pydantic import BaseModel, Field


class SoilSampleRequest(BaseModel):
    """Input schema for /api/crop-recommendation."""
    ph: float = Field(..., description="Soil pH")
    nitrogen: float = Field(..., description="Nitrogen (mg/kg)")
    phosphorus: float = Field(..., description="Phosphorus (mg/kg)")
    potassium: float = Field(..., description="Potassium (mg/kg)")
    moisture: float = Field(..., description="Soil moisture (%)")
    temperature: float = Field(..., description="Temperature (°C)")

    model_config = {"json_schema_extra": {
        "examples": [{
            "ph": 6.5, "nitrogen": 60, "phosphorus": 30,
            "potassium": 80, "moisture": 45, "temperature": 25,
        }]
    }}


class CropRecommendationResponse(BaseModel):
    """Output schema for /api/crop-recommendation; empty list means no match."""
    recommendations: List[str]
    message: Optional[str] = None


class DatasetInfo(BaseModel):
    """One entry of the stored dataset index."""
    file: str
    originalName: Optional[str] = None
    size: Optional[Union[int, float]] = None
    uploadedAt: Optional[str] = None


class SoilAverages(BaseModel):
    ph: float
    nitrogen: float
    phosphorus: float
    potassium: float
    moisture: float
    temperature: float


class AggregateReportModel(BaseModel):
    count: int
    avg: SoilAverages
    issues: Dict[str, int]
    top_crops: List[str]
    crop_counts: Dict[str, int]


class HealthScoreModel(BaseModel):
    overall: int = Field(..., ge=0, le=100)
    nutrient: int = Field(..., ge=0, le=100)
    ph: int = Field(..., ge=0, le=100)
    completeness: int = Field(..., ge=0, le=100)


class InsightModel(BaseModel):
    type: str
    title: str
    message: str
    priority: str


class AnomalyModel(BaseModel):
    row_index: int
    row_number: int
    kind: str
    severity: str
    field: str
    value: float
    message: str


class AnalysisResponse(BaseModel):
    """Output schema for the dataset analysis endpoints."""
    fingerprint: str
    count: int
    report: Optional[AggregateReportModel] = None
    health_score: Optional[HealthScoreModel] = None
    insights: List[InsightModel] = []
    anomalies: List[AnomalyModel] = []
    anomaly_summary: Dict[str, int] = {}
    dataset: Optional[DatasetInfo] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    datasets_available: int
