"""Application configuration with comprehensive validation."""
from typing import Optional, Literal, Dict
from functools import lru_cache
from pydantic import Field, field_validator, model_validator, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with production-grade validation."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "Lawyer Performance Scoring API"
    APP_VERSION: str = "1.0.0"
    APP_ENV: Literal["development", "staging", "production"] = "development"
    DEBUG: bool = False
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    LOG_FORMAT: Literal["json", "console"] = "console"

    # API
    API_V1_PREFIX: str = "/api/v1"

    # Storage
    STORAGE_BACKEND: Literal["memory", "snowflake"] = "memory"

    # Snowflake
    SNOWFLAKE_ACCOUNT: Optional[str] = None
    SNOWFLAKE_USER: Optional[str] = None
    SNOWFLAKE_PASSWORD: Optional[SecretStr] = None
    SNOWFLAKE_DATABASE: Optional[str] = None
    SNOWFLAKE_SCHEMA: Optional[str] = None
    SNOWFLAKE_WAREHOUSE: Optional[str] = None
    SNOWFLAKE_ROLE: Optional[str] = None

    # Redis
    REDIS_URL: str = "redis://localhost:6379/0"
    CACHE_TTL_LAWYERS: int = Field(default=300, ge=1, le=86400)

    # Remote preprocessing (primary strategy, local pipeline is the fallback)
    PREPROCESS_URL: Optional[str] = None
    PREPROCESS_TIMEOUT_SECONDS: float = Field(default=30.0, gt=0, le=300)

    # Upload handling
    MAX_UPLOAD_BYTES: int = Field(default=5 * 1024 * 1024, ge=1)
    SAMPLE_ROW_COUNT: int = Field(default=5, ge=1, le=100)

    # Scoring weight override, e.g. SCORE_WEIGHTS='{"completion_rate": 0.7}'
    SCORE_WEIGHTS: Optional[Dict[str, float]] = None

    @field_validator("SCORE_WEIGHTS")
    @classmethod
    def validate_score_weights(cls, v: Optional[Dict[str, float]]) -> Optional[Dict[str, float]]:
        if v is None:
            return v
        from app.scoring.lawyer_scorer import FEATURE_NORMALIZERS  # the scorer owns the feature names

        unknown = sorted(set(v) - set(FEATURE_NORMALIZERS))
        if unknown:
            raise ValueError(f"Unknown scoring features: {', '.join(unknown)}")
        negative = sorted(k for k, w in v.items() if w < 0)
        if negative:
            raise ValueError(f"Scoring weights must be non-negative: {', '.join(negative)}")
        return v

    @model_validator(mode="after")
    def validate_snowflake_settings(self):
        """Snowflake backend needs credentials up front."""
        if self.STORAGE_BACKEND == "snowflake":
            missing = [
                name for name in ("SNOWFLAKE_ACCOUNT", "SNOWFLAKE_USER", "SNOWFLAKE_PASSWORD")
                if not getattr(self, name)
            ]
            if missing:
                raise ValueError(f"Snowflake backend requires: {', '.join(missing)}")
        return self

    @model_validator(mode="after")
    def validate_production_settings(self):
        """Ensure production does not run in debug mode."""
        if self.APP_ENV == "production" and self.DEBUG:
            raise ValueError("DEBUG must be False in production")
        return self


@lru_cache
def get_settings() -> Settings:
    return Settings()

settings = get_settings()
