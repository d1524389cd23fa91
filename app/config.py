"""
SchoolMeals settings, read from the environment or a local .env file.
"""

from enum import Enum
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator


class Environment(str, Enum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class Settings(BaseSettings):
    """
    Deployment settings.

    Every field maps to the upper-cased environment variable of the same name,
    e.g. DATABASE_URL, LOG_LEVEL, CORS_ORIGINS (JSON list).
    """

    app_name: str = Field(default="SchoolMeals", description="Service name reported by /health-check")
    app_version: str = Field(default="1.0.0")
    environment: Environment = Field(default=Environment.DEVELOPMENT)
    debug: bool = False

    host: str = Field(default="0.0.0.0", description="Bind address for uvicorn")
    port: int = Field(default=8000, ge=1, le=65535)

    # Meal catalog, school prices and meal plans all live in this database
    database_url: str = Field(
        default="postgresql+psycopg2://schoolmeals@localhost:5432/schoolmeals",
        description="SQLAlchemy URL; sqlite:// gives a throwaway in-memory store",
    )
    db_echo: bool = Field(default=False, description="Log every SQL statement")
    db_init_attempts: int = Field(
        default=8, ge=1, description="Schema creation attempts while the database starts"
    )
    db_init_delay_sec: float = Field(default=2.0, ge=0)

    log_level: str = Field(default="INFO")
    log_format: str = Field(default="%(asctime)s %(levelname)s %(name)s: %(message)s")

    # Admin console origins
    cors_origins: list[str] = Field(
        default=["http://localhost:5173", "http://localhost:3000"]
    )
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = Field(default=["*"])
    cors_allow_headers: list[str] = Field(default=["*"])

    api_prefix: str = Field(default="", description="Mount point of every router, e.g. /api")
    api_title: str = "SchoolMeals API"
    api_description: str = (
        "Meal-plan scheduling and school price management for school meal delivery"
    )

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    @field_validator("environment", mode="before")
    @classmethod
    def normalize_environment(cls, v):
        return Environment(v.lower()) if isinstance(v, str) else v

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()

    def is_production(self) -> bool:
        return self.environment is Environment.PRODUCTION

    def is_development(self) -> bool:
        return self.environment is Environment.DEVELOPMENT

    @property
    def docs_enabled(self) -> bool:
        """OpenAPI docs are served everywhere except production"""
        return not self.is_production()


settings = Settings()
