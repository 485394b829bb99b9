"""Unified settings for multipart-triage."""

import importlib.metadata
import tomllib
from pathlib import Path
from typing import ClassVar, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def read_pyproject(pyproject_path: Path) -> dict:
    """Read pyproject.toml into a dict, empty when the file is not shipped."""
    if not pyproject_path.is_file():
        return {}
    with pyproject_path.open("rb") as file_handle:
        return tomllib.load(file_handle)


def get_version(project: dict) -> str:
    """Get version from installed package metadata or fall back to pyproject."""
    fallback = project.get("project", {}).get("version", "0.0.0")
    try:
        return importlib.metadata.version("multipart-triage")
    except importlib.metadata.PackageNotFoundError:
        return fallback


class Settings(BaseSettings):
    """Unified settings for the multipart triage service."""

    DEBUG: bool = True
    ENVIRONMENT: Literal["DEV", "PROD"] = "DEV"
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    # ClassVar to prevent Pydantic from trying to load from env
    BASE_DIR: ClassVar[Path] = Path(__file__).parent.parent.parent
    PROJECT: ClassVar[dict] = read_pyproject(BASE_DIR / "pyproject.toml")
    API_NAME: ClassVar[str] = PROJECT.get("project", {}).get("name", "multipart-triage")
    API_DESCRIPTION: ClassVar[str] = PROJECT.get("project", {}).get("description", "Multipart triage trigger")
    API_VERSION: ClassVar[str] = get_version(PROJECT)

    # Server
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000

    # Trigger
    TRIGGER_PATH: str = "/MultipartTrigger"
    ACCEPTED_METHOD: str = "POST"
    REJECTION_MESSAGE: str = "POST only"
    PREVIEW_LINES: int = Field(default=10, ge=0)

    @property
    def api_url(self) -> str:
        return f"http://{self.API_HOST}:{self.API_PORT}"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


settings = Settings()  # type: ignore
