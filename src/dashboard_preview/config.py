"""Runtime configuration for the dashboard preview."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven runtime settings."""

    model_config = SettingsConfigDict(env_prefix="DASHBOARD_PREVIEW_", env_file=".env", extra="ignore")

    app_name: str = "azure-dashboard-preview"
    log_level: str = "INFO"
    bicep_binary: str = Field(
        default="bicep",
        description="Bicep CLI executable used to compile .bicep files to ARM JSON.",
    )
    compile_timeout_seconds: float = Field(default=60.0, gt=0)
    grid_columns: int = Field(default=18, ge=1)
    watch_interval_seconds: float = Field(default=1.0, gt=0)


settings = Settings()
