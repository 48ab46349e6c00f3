"""
Configuration Schemas.

Pydantic models defining the expected structure of each YAML config file.
Used by AppConfig to validate configuration at load time. If a YAML file
has missing keys, wrong types, or unknown fields, a clear ValidationError
is raised at startup instead of a cryptic KeyError deep in application code.

Each top-level class corresponds to one file in config/settings/:
    ApplicationSchema  → application.yaml
    StorageSchema      → storage.yaml
    LoggingSchema      → logging.yaml
    PalettesSchema     → palettes.yaml
    DashboardSchema    → dashboard.yaml
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class _StrictBase(BaseModel):
    """Base with extra='forbid' so unknown YAML keys are caught immediately."""

    model_config = ConfigDict(extra="forbid")


# =============================================================================
# application.yaml
# =============================================================================


class ApplicationSchema(_StrictBase):
    name: str
    version: str
    description: str
    environment: str
    debug: bool


# =============================================================================
# storage.yaml
# =============================================================================


class SqliteSchema(_StrictBase):
    path: str
    echo: bool


class StorageKeysSchema(_StrictBase):
    notes: str
    dark_mode: str
    nepali_date: str
    user_set_theme: str


class StorageSchema(_StrictBase):
    backend: Literal["sqlite", "memory"]
    sqlite: SqliteSchema
    keys: StorageKeysSchema


# =============================================================================
# logging.yaml
# =============================================================================


class ConsoleHandlerSchema(_StrictBase):
    enabled: bool


class FileHandlerSchema(_StrictBase):
    enabled: bool
    path: str
    max_bytes: int
    backup_count: int


class HandlersSchema(_StrictBase):
    console: ConsoleHandlerSchema
    file: FileHandlerSchema


class LoggingSchema(_StrictBase):
    level: str
    format: str
    handlers: HandlersSchema


# =============================================================================
# palettes.yaml
# =============================================================================


class PalettesSchema(_StrictBase):
    label: list[str] = Field(min_length=1)
    box_light: list[str] = Field(min_length=1)
    box_dark: list[str] = Field(min_length=1)


# =============================================================================
# dashboard.yaml
# =============================================================================


class PseudoEntrySchema(_StrictBase):
    id: str
    title: str
    content: str
    preview: str
    label_color_light: str
    label_color_dark: str
    box_color_light: str
    box_color_dark: str


class FallbackColorsSchema(_StrictBase):
    label: str
    box_light: str
    box_dark: str


class EmptyStateSchema(_StrictBase):
    message: str
    hint: str


class DashboardSchema(_StrictBase):
    preview_length: int = Field(gt=0)
    create_entry: PseudoEntrySchema
    settings_entry: PseudoEntrySchema
    fallback_colors: FallbackColorsSchema
    empty_state: EmptyStateSchema
    sample_previews: list[str] = Field(min_length=1)
