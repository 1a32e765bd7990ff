"""
Configuration Management for the indicator engine
Centralized settings with environment variable support
"""
from functools import lru_cache
from pydantic_settings import BaseSettings
from pydantic import Field


class LoggingSettings(BaseSettings):
    """Logging Configuration"""
    level: str = Field(default="INFO", alias="LOG_LEVEL")
    format: str = Field(
        default="%(asctime)s %(levelname)s %(name)s: %(message)s",
        alias="LOG_FORMAT"
    )


class IndicatorSettings(BaseSettings):
    """Indicator Engine Configuration"""
    # Validate every input bar through OHLCVBar before computing
    strict_bars: bool = Field(default=False, alias="INDICATORS_STRICT_BARS")


class Settings(BaseSettings):
    """Main Settings aggregating all configurations"""
    # Sub-configurations
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    indicators: IndicatorSettings = Field(default_factory=IndicatorSettings)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
