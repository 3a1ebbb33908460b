from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Validated settings (env-driven), keeping config out of code for easy extension."""

    model_config = SettingsConfigDict(
        # Support both "repo root/.env" and "backend/.env" (local dev)
        env_file=(".env", "../.env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Map file loaded by the API on startup; empty leaves the service without a graph.
    map_path: str = Field(default="", alias="MAP_PATH")

    out_dir: str = Field(default="out", alias="OUT_DIR")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    fuel_price_per_km: float = Field(default=1.5, ge=0.0, alias="FUEL_PRICE_PER_KM")
    weight_sum_tolerance: float = Field(default=0.01, gt=0.0, le=0.5, alias="WEIGHT_SUM_TOLERANCE")
    strict_map_references: bool = Field(default=False, alias="STRICT_MAP_REFERENCES")
    # 0 disables the search deadline.
    route_search_timeout_s: float = Field(default=0.0, ge=0.0, le=600.0, alias="ROUTE_SEARCH_TIMEOUT_S")


settings = Settings()
