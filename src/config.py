"""
SOH Estimator Configuration Management
Application, presentation and projection settings
"""
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # Application
    app_name: str = "SOH Estimator"
    app_env: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_prefix: str = "/api/v1"

    # Presentation
    loss_bar_full_scale_percent: float = Field(default=40.0, gt=0)  # loss shown as a full bar
    report_label_placeholder: str = "Unnamed battery"

    # Form defaults for the range sliders
    default_dod_percent: float = Field(default=80.0, ge=0, le=100)
    default_charge_rate_c: float = Field(default=0.5, ge=0)

    # Projection
    projection_months_ahead: int = Field(default=60, ge=0, le=600)
    projection_step_months: int = Field(default=12, ge=1)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
