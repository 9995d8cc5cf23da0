from pydantic_settings import BaseSettings
from pydantic import Field, field_validator
from functools import lru_cache
from typing import List


class Settings(BaseSettings):
    # Environment
    environment: str = Field(default="development", alias="ENVIRONMENT")

    # Database - PostgreSQL for production, SQLite for development
    database_url: str = Field(
        default="sqlite:///./filter_tracker.db",
        alias="DATABASE_URL"
    )

    # CORS - Frontend URLs (comma-separated)
    allowed_origins: str = Field(
        default="http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173,http://127.0.0.1:5173",
        alias="ALLOWED_ORIGINS"
    )

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_json: bool = Field(default=False, alias="LOG_JSON")

    # Filter defaults (applied when the fleet is first created)
    default_service_frequency_days: int = Field(default=90, alias="DEFAULT_SERVICE_FREQUENCY_DAYS")
    default_filter_location: str = Field(default="Storage", alias="DEFAULT_FILTER_LOCATION")

    # Longest date range accepted by availability reads
    max_availability_range_days: int = Field(default=366, alias="MAX_AVAILABILITY_RANGE_DAYS")

    # Rate limiting on write endpoints
    rate_limit_enabled: bool = Field(default=True, alias="RATE_LIMIT_ENABLED")

    @field_validator('default_service_frequency_days')
    @classmethod
    def validate_service_frequency(cls, v: int) -> int:
        if v < 1 or v > 365:
            raise ValueError("DEFAULT_SERVICE_FREQUENCY_DAYS must be between 1 and 365")
        return v

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def cors_origins(self) -> List[str]:
        """
        Parse allowed origins from comma-separated string.
        Returns a list suitable for CORSMiddleware.
        """
        if not self.allowed_origins:
            return ["http://localhost:5173"]

        origins = []
        for origin in self.allowed_origins.split(","):
            origin = origin.strip().rstrip("/")
            if origin and origin not in origins:
                origins.append(origin)

        return origins or ["http://localhost:5173"]

    class Config:
        env_file = ".env"
        extra = "ignore"
        populate_by_name = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


# Initialize settings on module load
settings = get_settings()
