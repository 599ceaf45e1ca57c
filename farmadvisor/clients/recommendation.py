"""
Client for the remote crop-recommendation service.

    POST {api_base}/crop-recommendation
        {ph, nitrogen, phosphorus, potassium, moisture, temperature}
    -> {recommendations: [crop, ...]}

An empty list means no match. A non-2xx answer raises
RecommendationServiceError; local rules are never substituted.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

import requests

from farmadvisor.analysis.recommender import NO_MATCH_MESSAGE
from farmadvisor.config import get_settings
from farmadvisor.data.schema import SoilSample
from farmadvisor.errors import RecommendationServiceError

logger = logging.getLogger(__name__)


@dataclass
class RemoteRecommendation:
    crops: List[str] = field(default_factory=list)
    message: Optional[str] = None

    @property
    def matched(self) -> bool:
        return bool(self.crops)


class RecommendationServiceClient:
    def __init__(self, api_base: Optional[str] = None, timeout: Optional[float] = None,
                 session: Optional[requests.Session] = None):
        settings = get_settings()
        self.api_base = (api_base or settings.api_base).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.http_timeout
        self.session = session or requests.Session()

    def recommend(self, sample: SoilSample) -> RemoteRecommendation:
        """Submit one sample; returns the service's crops or a no-match message."""
        try:
            resp = self.session.post(
                f"{self.api_base}/crop-recommendation",
                json=sample.to_dict(),
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.warning("Crop recommendation request failed: %s", e)
            raise RecommendationServiceError(str(e)) from e

        if not resp.ok:
            detail = _error_detail(resp)
            logger.warning("Crop recommendation service returned %s: %s", resp.status_code, detail)
            raise RecommendationServiceError(detail, status=resp.status_code)

        try:
            body = resp.json()
        except ValueError as e:
            raise RecommendationServiceError("Invalid JSON in response") from e

        if not isinstance(body, dict) or not isinstance(body.get("recommendations") or [], list):
            logger.warning("Crop recommendation service returned an unexpected body: %r", body)
            raise RecommendationServiceError("Invalid response body", status=resp.status_code)

        crops = [str(c) for c in (body.get("recommendations") or [])]
        if not crops:
            return RemoteRecommendation(crops=[], message=body.get("message") or NO_MATCH_MESSAGE)
        return RemoteRecommendation(crops=crops)


def _error_detail(resp: requests.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text or f"HTTP {resp.status_code}"
    if isinstance(body, dict):
        return str(body.get("error") or body.get("detail") or body.get("message")
                   or f"HTTP {resp.status_code}")
    return f"HTTP {resp.status_code}"
