"""
Exceptions raised by dataset loading and the outbound HTTP clients.
"""

from typing import Optional


class FarmAdvisorError(Exception):
    """Base exception for farm advisor failures."""


class ParseEmptyError(FarmAdvisorError):
    """Raised when CSV text yields no data rows (no header + data line)."""

    def __init__(self, message: str = None):
        super().__init__(
            message
            or "Dataset parsed to 0 rows. Check the CSV has a header row "
               "and at least one data row."
        )


class DatasetValidationError(FarmAdvisorError):
    """Raised when parsed rows lack enough recognised soil columns."""

    def __init__(self, result):
        super().__init__(result.message)
        self.result = result


class FetchError(FarmAdvisorError):
    """Raised when dataset text cannot be retrieved from the dataset store."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class RecommendationServiceError(FarmAdvisorError):
    """Raised when the crop-recommendation service answers with a non-2xx status."""

    def __init__(self, detail: str, status: Optional[int] = None):
        super().__init__(f"Prediction Failed: {detail}")
        self.detail = detail
        self.status = status
