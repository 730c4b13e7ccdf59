"""Pydantic models for configuration."""

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from qdavault.constants import DEFAULT_DB_PATH, DEFAULT_STORAGE_ROOT


class ImportConfig(BaseModel):
    """Destination settings for backup imports."""

    db_path: str = Field(default=DEFAULT_DB_PATH, min_length=1)
    storage_root: str = Field(default=DEFAULT_STORAGE_ROOT, min_length=1)
    log_file: str | None = None

    @field_validator("log_file")
    @classmethod
    def empty_log_file_disables(cls, v: str | None) -> str | None:
        """Treat an empty log_file as not configured."""
        if v is not None and not v.strip():
            return None
        return v

    @property
    def log_path(self) -> Path | None:
        return Path(self.log_file).expanduser() if self.log_file else None


class Configuration(BaseModel):
    """Complete qdavault configuration."""

    config_version: str = "1.0"
    qdavault: ImportConfig = ImportConfig()
