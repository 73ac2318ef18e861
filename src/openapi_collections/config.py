"""Configuration for openapi-collections."""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

import yaml
from pydantic_settings import BaseSettings

from .models import CollectionSource, SourcesConfig


class Settings(BaseSettings):
    """Application settings."""

    # Path to sources.yaml
    sources_file: Path = Path("sources.yaml")

    # Seconds between sync cycles
    sync_interval: float = 60.0

    # HTTP client timeout in seconds
    timeout: float = 30.0

    user_agent: str = "openapi-collections/0.1.0"

    log_level: str = "INFO"

    model_config = {"env_prefix": "OPENAPI_COLLECTIONS_"}


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(
        level=(level or get_settings().log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def get_project_root() -> Path:
    """Get the project root directory."""
    # Start from the current file and go up to find pyproject.toml
    current = Path(__file__).resolve().parent
    while current != current.parent:
        if (current / "pyproject.toml").exists():
            return current
        current = current.parent
    # Fallback to current working directory
    return Path.cwd()


def load_sources(sources_file: Optional[Path] = None) -> list[CollectionSource]:
    """Load the documents to import from a YAML file.

    Without an explicit path the configured ``sources_file`` is used and a
    missing file means no sources.
    """
    if sources_file is None:
        sources_file = get_settings().sources_file
        if not sources_file.is_absolute():
            sources_file = get_project_root() / sources_file
        if not sources_file.exists():
            return []

    if not sources_file.exists():
        raise FileNotFoundError(f"Sources file not found: {sources_file}")

    with open(sources_file) as f:
        data = yaml.safe_load(f) or {}

    config = SourcesConfig(**data)
    return config.sources
