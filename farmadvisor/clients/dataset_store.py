"""
HTTP client for the admin dataset store.

    GET {api_base}/admin/datasets          dataset metadata list
    GET {api_base}/admin/dataset?file=...  raw dataset text

Single request per call: no retry, the caller re-triggers a failed load.
"""

import logging
from typing import Dict, List, Optional

import requests

from farmadvisor.config import get_settings
from farmadvisor.data.dataset import Dataset
from farmadvisor.data.validation import load_dataset
from farmadvisor.errors import FetchError

logger = logging.getLogger(__name__)


class DatasetStoreClient:
    """Fetches dataset listings and raw CSV text from the dataset store."""

    def __init__(self, api_base: Optional[str] = None, timeout: Optional[float] = None,
                 session: Optional[requests.Session] = None):
        settings = get_settings()
        self.api_base = (api_base or settings.api_base).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.http_timeout
        self.session = session or requests.Session()

    def list_datasets(self) -> List[Dict]:
        """Dataset metadata ({file, originalName, size}) for a dataset picker."""
        try:
            resp = self.session.get(f"{self.api_base}/admin/datasets", timeout=self.timeout)
            resp.raise_for_status()
            data = resp.json()
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            logger.warning("Dataset listing failed (status %s)", status)
            raise FetchError(f"Failed to list datasets (status {status}).", status=status) from e
        except requests.exceptions.RequestException as e:
            logger.warning("Dataset listing request failed: %s", e)
            raise FetchError(f"Failed to list datasets: {e}") from e
        except ValueError as e:
            raise FetchError("Dataset listing is not valid JSON.") from e
        return data if isinstance(data, list) else []

    def fetch_dataset_text(self, file_name: str) -> str:
        """Raw text of a stored dataset."""
        if not file_name:
            raise FetchError("No dataset selected")
        try:
            resp = self.session.get(
                f"{self.api_base}/admin/dataset",
                params={"file": file_name},
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.warning("Dataset request for %s failed: %s", file_name, e)
            raise FetchError(f"Error loading dataset: {e}") from e

        if not resp.ok:
            logger.warning("Failed to fetch dataset %s: %s %s",
                           file_name, resp.status_code, resp.text[:200])
            raise FetchError(
                f"Failed to load dataset (status {resp.status_code}).",
                status=resp.status_code,
            )
        logger.info("Fetched dataset %s (%d chars)", file_name, len(resp.text))
        return resp.text

    def load_dataset(self, file_name: str) -> Dataset:
        """Fetch, parse and validate a stored dataset."""
        return load_dataset(self.fetch_dataset_text(file_name))
