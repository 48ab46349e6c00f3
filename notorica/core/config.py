"""
Configuration Management.

Loads overrides from the environment (and an optional config/.env) and
settings from config/settings/*.yaml.
Code holds no hardcoded settings; everything comes from these sources.

Environment (.env / NOTORICA_*):
    NOTORICA_DATABASE_URL, NOTORICA_SYSTEM_THEME

Settings (YAML):
    application.yaml   - App identity
    storage.yaml       - Key-value backend, database file, storage keys
    logging.yaml       - Logging configuration
    palettes.yaml      - Label and box color palettes
    dashboard.yaml     - Pseudo-note entries, empty state, preview length
"""

from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from notorica.core.config_schema import (
    ApplicationSchema,
    DashboardSchema,
    LoggingSchema,
    PalettesSchema,
    StorageSchema,
)


def find_project_root() -> Path:
    """Find project root by looking for .project_root marker file."""
    current = Path.cwd()
    while current != current.parent:
        if (current / ".project_root").exists():
            return current
        current = current.parent
    raise RuntimeError("Project root not found. Ensure .project_root file exists.")


def validate_project_root() -> Path:
    """
    Validate that the project root can be found.

    Raises SystemExit with a clear message if .project_root is not found.
    Use this in entry scripts before any configuration loading.
    """
    try:
        return find_project_root()
    except RuntimeError as e:
        raise SystemExit(f"Error: {e}") from e


def load_yaml_config(filename: str) -> dict[str, Any]:
    """Load a YAML configuration file from config/settings/."""
    project_root = find_project_root()
    config_path = project_root / "config" / "settings" / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


class Settings(BaseSettings):
    """Environment overrides. Everything here is optional."""

    database_url: str | None = None
    system_theme: Literal["light", "dark"] = "light"

    model_config = SettingsConfigDict(
        env_prefix="NOTORICA_",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


def _load_validated(schema_cls: type, filename: str) -> Any:
    """Load YAML and validate against schema. Returns typed model instance."""
    raw = load_yaml_config(filename)
    try:
        return schema_cls(**raw)
    except ValidationError as e:
        raise ValueError(
            f"Invalid configuration in {filename}:\n{e}"
        ) from e


class AppConfig:
    """
    Application configuration loaded from YAML files.

    Each YAML file is validated against its Pydantic schema at load time.
    Missing keys, wrong types, or unknown fields raise a clear error
    immediately instead of causing cryptic KeyErrors later.
    """

    def __init__(self) -> None:
        self._application = _load_validated(ApplicationSchema, "application.yaml")
        self._storage = _load_validated(StorageSchema, "storage.yaml")
        self._logging = _load_validated(LoggingSchema, "logging.yaml")
        self._palettes = _load_validated(PalettesSchema, "palettes.yaml")
        self._dashboard = _load_validated(DashboardSchema, "dashboard.yaml")

    @property
    def application(self) -> ApplicationSchema:
        """Application settings."""
        return self._application

    @property
    def storage(self) -> StorageSchema:
        """Storage backend and key names."""
        return self._storage

    @property
    def logging(self) -> LoggingSchema:
        """Logging settings."""
        return self._logging

    @property
    def palettes(self) -> PalettesSchema:
        """Color palettes for labels and boxes."""
        return self._palettes

    @property
    def dashboard(self) -> DashboardSchema:
        """Dashboard composition settings."""
        return self._dashboard


@lru_cache
def get_settings() -> Settings:
    """Get cached environment settings. Reads config/.env when present."""
    env_path = find_project_root() / "config" / ".env"
    return Settings(_env_file=str(env_path))


@lru_cache
def get_app_config() -> AppConfig:
    """Get cached application configuration."""
    return AppConfig()


def get_database_url() -> str:
    """
    Construct the key-value database URL.

    NOTORICA_DATABASE_URL wins; otherwise the SQLite file from storage.yaml
    is resolved relative to the project root.

    Returns:
        Async SQLAlchemy database URL string.
    """
    override = get_settings().database_url
    if override:
        return override
    db_path = find_project_root() / get_app_config().storage.sqlite.path
    return f"sqlite+aiosqlite:///{db_path}"
