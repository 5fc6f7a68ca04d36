"""Application configuration with comprehensive validation."""
from typing import Dict, Literal
from functools import lru_cache
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# =============================================================================
# LEVEL WEIGHTING PROFILES
# =============================================================================
# Each engineer level emphasises the five pillars differently.
# Every row must sum to 1.0.
# =============================================================================

PILLAR_NAMES = (
    "project_impact",
    "direction",
    "engineering_excellence",
    "operational_ownership",
    "people_impact",
)

DEFAULT_LEVEL_WEIGHTS: Dict[str, Dict[str, float]] = {
    "JUNIOR": {
        "project_impact": 0.20,          # Learning and contributing
        "direction": 0.10,               # Limited strategic responsibility
        "engineering_excellence": 0.25,  # Technical growth and code quality
        "operational_ownership": 0.20,   # Building good habits
        "people_impact": 0.25,           # Collaboration
    },
    "MID": {
        "project_impact": 0.25,
        "direction": 0.15,
        "engineering_excellence": 0.25,
        "operational_ownership": 0.20,
        "people_impact": 0.15,           # Mentoring juniors
    },
    "SENIOR": {
        "project_impact": 0.30,
        "direction": 0.20,               # Influencing technical direction
        "engineering_excellence": 0.20,
        "operational_ownership": 0.15,
        "people_impact": 0.15,
    },
    "LEAD": {
        "project_impact": 0.30,          # Impact across teams
        "direction": 0.25,               # Leading technical direction
        "engineering_excellence": 0.20,
        "operational_ownership": 0.15,
        "people_impact": 0.10,
    },
    "MANAGER": {
        "project_impact": 0.35,          # Impact through team delivery
        "direction": 0.25,
        "engineering_excellence": 0.15,
        "operational_ownership": 0.10,
        "people_impact": 0.15,
    },
}


class Settings(BaseSettings):
    """Application settings with production-grade validation."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "Performance Review Scoring Engine"
    APP_VERSION: str = "1.0.0"
    APP_ENV: Literal["development", "staging", "production"] = "development"
    DEBUG: bool = False
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    LOG_FORMAT: Literal["json", "console"] = "console"

    # API
    API_V1_PREFIX: str = "/api/v1"

    # Scoring
    LEVEL_WEIGHTS: Dict[str, Dict[str, float]] = Field(
        default_factory=lambda: {level: dict(row) for level, row in DEFAULT_LEVEL_WEIGHTS.items()}
    )
    EXCEEDS_THRESHOLD_PCT: float = Field(default=85.0, ge=0, le=100)
    MEETS_THRESHOLD_PCT: float = Field(default=50.0, ge=0, le=100)
    DEFAULT_ENGINEER_LEVEL: Literal["JUNIOR", "MID", "SENIOR", "LEAD", "MANAGER"] = "MID"

    # Calibration
    MIN_JUSTIFICATION_LENGTH: int = Field(default=20, ge=1, le=500)

    @model_validator(mode="after")
    def validate_level_weights(self):
        """Validate every level profile covers all pillars and sums to 1.0."""
        for level in DEFAULT_LEVEL_WEIGHTS:
            if level not in self.LEVEL_WEIGHTS:
                raise ValueError(f"No pillar weights configured for level {level}")
        for level, row in self.LEVEL_WEIGHTS.items():
            missing = set(PILLAR_NAMES) - set(row)
            if missing:
                raise ValueError(f"Weights for {level} missing pillars: {sorted(missing)}")
            total = sum(row[p] for p in PILLAR_NAMES)
            if abs(total - 1.0) > 0.001:
                raise ValueError(f"Pillar weights for {level} must sum to 1.0, got {total}")
        return self

    @model_validator(mode="after")
    def validate_tier_thresholds(self):
        if self.MEETS_THRESHOLD_PCT >= self.EXCEEDS_THRESHOLD_PCT:
            raise ValueError(
                "MEETS_THRESHOLD_PCT must be below EXCEEDS_THRESHOLD_PCT, "
                f"got {self.MEETS_THRESHOLD_PCT} >= {self.EXCEEDS_THRESHOLD_PCT}"
            )
        return self

    @model_validator(mode="after")
    def validate_production_settings(self):
        """Ensure production runs without debug."""
        if self.APP_ENV == "production" and self.DEBUG:
            raise ValueError("DEBUG must be False in production")
        return self


@lru_cache
def get_settings() -> Settings:
    return Settings()

settings = get_settings()
