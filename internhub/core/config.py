"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Server
    environment: str = "development"
    host: str = "0.0.0.0"
    port: int = 5000
    log_level: str = "INFO"

    # MongoDB
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "internhub"

    # Planetary radius used to turn a distance into radians
    earth_radius_mi: float = 3963.2
    earth_radius_km: float = 6378.1

    # Geocoder (MapQuest-compatible)
    geocoder_provider: str = "mapquest"
    geocoder_api_key: str = ""
    geocoder_url: str = "https://www.mapquestapi.com/geocoding/v1/address"
    geocoder_timeout: float = 10.0
    geocode_on_save: bool = True

    # JWT Auth
    jwt_secret_key: str = "change-this-secret"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 43200
    jwt_cookie_expire_days: int = 30

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
