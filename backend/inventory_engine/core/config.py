"""
Inventory Engine Configuration
Core settings for the inventory ledger and costing service
"""
from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # Application Info
    APP_NAME: str = "Inventory Ledger API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # Database Configuration
    DATABASE_URL: str = "sqlite:///./inventory.db"
    DATABASE_ECHO: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Path = Path("logs")
    LOG_FILE: str = "inventory.log"
    ERROR_LOG_FILE: str = "error.log"
    LOG_TO_FILE: bool = False

    # Precision
    CURRENCY_DECIMAL_PLACES: int = 2
    QUANTITY_DECIMAL_PLACES: int = 2

    # Business Rules
    DEFAULT_VALUATION_METHOD: str = "average"  # average, fifo, lifo
    VALIDATE_QUANTITIES: bool = True
    CLAMP_REQUISITION_FILLS: bool = False

    # API Configuration
    API_V1_STR: str = "/api/v1"
    DOCS_URL: str = "/docs"
    REDOC_URL: str = "/redoc"
    OPENAPI_URL: str = "/openapi.json"

    @field_validator("DEFAULT_VALUATION_METHOD")
    @classmethod
    def check_valuation_method(cls, v: str) -> str:
        """Only the three supported valuation methods are accepted"""
        method = v.lower()
        if method not in ("average", "fifo", "lifo"):
            raise ValueError(f"Unsupported valuation method: {v}")
        return method

    @field_validator("LOG_DIR", mode="before")
    @classmethod
    def coerce_log_dir(cls, v):
        return Path(v) if isinstance(v, str) else v

    @model_validator(mode="after")
    def create_log_dir(self):
        if self.LOG_TO_FILE:
            self.LOG_DIR.mkdir(exist_ok=True, parents=True)
        return self


# Global settings instance
settings = Settings()

# Database connection string for SQLAlchemy
DATABASE_URL = settings.DATABASE_URL
