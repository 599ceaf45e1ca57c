"""
Runtime settings, read from environment variables.
"""

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent

DEFAULT_API_BASE = "http://localhost:5000/api"
DEFAULT_HTTP_TIMEOUT = 30.0
DEFAULT_CACHE_SIZE = 16


@dataclass(frozen=True)
class Settings:
    """Settings shared by the API, the HTTP clients and the scripts."""
    data_dir: Path
    api_base: str = DEFAULT_API_BASE
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    cache_size: int = DEFAULT_CACHE_SIZE
    log_level: str = "INFO"

    @property
    def uploads_dir(self) -> Path:
        return self.data_dir / "uploads"

    @property
    def datasets_file(self) -> Path:
        return self.data_dir / "datasets.json"

    @classmethod
    def from_env(cls) -> "Settings":
        data_dir = os.environ.get("FARMADVISOR_DATA_DIR")
        return cls(
            data_dir=Path(data_dir) if data_dir else PROJECT_ROOT / "data",
            api_base=os.environ.get("FARMADVISOR_API_BASE", DEFAULT_API_BASE).rstrip("/"),
            http_timeout=float(os.environ.get("FARMADVISOR_HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT)),
            cache_size=int(os.environ.get("FARMADVISOR_CACHE_SIZE", DEFAULT_CACHE_SIZE)),
            log_level=os.environ.get("FARMADVISOR_LOG_LEVEL", "INFO").upper(),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return process-wide settings (read once)."""
    return Settings.from_env()
