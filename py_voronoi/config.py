from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Library settings pulled from environment variables (PY_VORONOI_*)."""

    # Geometry tolerances
    duplicate_epsilon: float = Field(default=1e-6, gt=0, description="Max coordinate difference for two vertices to be merged")
    extrapolation_factor: float = Field(default=4.0, gt=1, description="Infinite edges are extended this many domain diagonals")

    # Performance Configuration
    max_workers: int = Field(default=1, ge=1, description="Threads used to compute vertex loops")

    # Logging Configuration
    log_level: str = Field(default="WARNING", description="Logging level")
    log_format: str = Field(default="json", description="Logging format (plain or json)")

    model_config = SettingsConfigDict(
        env_prefix="PY_VORONOI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


# Instantiate singleton settings object
settings = Settings()
