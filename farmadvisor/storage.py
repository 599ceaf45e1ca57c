"""
Read side of the flat-file dataset store.

Layout under the data directory:
    datasets.json   list of {file, originalName, uploadedAt, size}
    uploads/<file>  raw dataset text

Uploading and deleting datasets belong to the admin service and are not
handled here.
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)


class DatasetNotFoundError(LookupError):
    """Raised when a requested dataset file does not exist in the store."""


class DatasetStore:
    """Lists stored datasets and reads their text."""

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)
        self.uploads_dir = self.data_dir / "uploads"
        self.metadata_file = self.data_dir / "datasets.json"

    def list_datasets(self) -> List[Dict]:
        """Dataset metadata entries; an absent or unreadable index is empty."""
        if not self.metadata_file.exists():
            return []
        try:
            with open(self.metadata_file, encoding="utf-8") as f:
                entries = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Could not read dataset index %s: %s", self.metadata_file, e)
            return []
        if not isinstance(entries, list):
            return []
        return [e for e in entries if isinstance(e, dict)]

    def resolve(self, file_name: str) -> Path:
        """Path of ``file_name`` inside the uploads directory (basename only)."""
        safe = Path(file_name).name
        if not safe or safe in (".", ".."):
            raise DatasetNotFoundError(f"Invalid dataset name: {file_name!r}")
        return self.uploads_dir / safe

    def read_text(self, file_name: str) -> str:
        path = self.resolve(file_name)
        if not path.is_file():
            raise DatasetNotFoundError(f"Dataset not found: {path.name}")
        # undecodable bytes (e.g. latin-1 exports) become U+FFFD
        return path.read_text(encoding="utf-8-sig", errors="replace")

    def get_metadata(self, file_name: str) -> Optional[Dict]:
        safe = Path(file_name).name
        for entry in self.list_datasets():
            if isinstance(entry, dict) and entry.get("file") == safe:
                return entry
        return None
