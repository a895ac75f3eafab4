"""Configuration models for TaskFlow.

Persisted as JSON by :class:`taskflow.services.config_service.ConfigService`.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class StorageConfig(BaseModel):
    """Snapshot storage configuration."""

    snapshot_path: str | None = Field(
        default=None, description="Snapshot file; defaults to the user data dir"
    )


class SyncConfig(BaseModel):
    """Remote event stream configuration."""

    endpoint: str = Field(default="http://localhost:4000/api")
    board_id: str | None = Field(
        default=None, description="Board scope for subscriptions (None = all boards)"
    )
    timeout: int = Field(default=30)
    skip: bool = Field(default=False)

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("endpoint cannot be empty")
        return v.strip().rstrip("/")


class OutputConfig(BaseModel):
    """Output configuration."""

    color: bool = Field(default=True)
    date_format: str = Field(default="%Y-%m-%d")


class RecommendationConfig(BaseModel):
    """Recommendation display configuration."""

    limit: int = Field(default=3, ge=1)


class AppConfig(BaseModel):
    """Main TaskFlow configuration"""

    storage: StorageConfig = Field(default_factory=StorageConfig)
    sync: SyncConfig = Field(default_factory=SyncConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    recommendation: RecommendationConfig = Field(default_factory=RecommendationConfig)
