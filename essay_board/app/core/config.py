"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields, so the
application starts without any configuration and keeps its data in
``db.json`` next to the project root.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Essay Board API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

    # Path of the JSON document holding essays and users.  A relative
    # path is resolved against the project root by ``get_database_path``.
    data_file: str = os.getenv("DATA_FILE", "db.json")

    # Pagination defaults applied by the essay list endpoint when the
    # client omits ``limit`` or sends something unusable.
    default_page_size: int = int(os.getenv("DEFAULT_PAGE_SIZE", "20"))

    # Comma-separated list of allowed origins.  Empty disables CORS.
    cors_origins: str = os.getenv("CORS_ORIGINS", "")

    @property
    def cors_origin_list(self) -> List[str]:
        return _split_csv(self.cors_origins)


def get_database_path(config: "Settings") -> Path:
    """Compute the path to the JSON data file.

    If ``data_file`` is an absolute path, use it directly.  Otherwise
    resolve it relative to the project root.
    """
    raw = Path(config.data_file).expanduser()
    if raw.is_absolute():
        return raw
    base_dir = Path(__file__).resolve().parent.parent.parent.parent
    return (base_dir / raw).resolve()


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables
# must therefore be set before importing this module.
settings = Settings()
