"""Tunable configuration using Pydantic Settings.

This module centralizes cache policy, payload caps and timeouts for the place
resolution layer. Values can be overridden via environment variables or .env file.
"""
import os
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Place cache settings with environment variable support."""

    # ===== Cache TTLs (seconds) =====
    # Identity is stable, live attributes drift: keep these far apart.
    PLACE_ID_CACHE_TTL_SECONDS: int = int(os.getenv("PLACE_ID_CACHE_TTL_SECONDS", "2592000"))  # 30 days
    PLACE_DETAILS_CACHE_TTL_SECONDS: int = int(os.getenv("PLACE_DETAILS_CACHE_TTL_SECONDS", "21600"))  # 6 hours

    # ===== Cache Sizes =====
    PLACE_ID_CACHE_MAX_SIZE: int = int(os.getenv("PLACE_ID_CACHE_MAX_SIZE", "1000"))
    PLACE_DETAILS_CACHE_MAX_SIZE: int = int(os.getenv("PLACE_DETAILS_CACHE_MAX_SIZE", "1000"))

    # ===== Payload Caps =====
    MAX_REVIEWS: int = int(os.getenv("MAX_REVIEWS", "5"))
    MAX_PHOTOS: int = int(os.getenv("MAX_PHOTOS", "8"))

    # ===== Provider Requests =====
    PROVIDER_TIMEOUT_SECONDS: float = float(os.getenv("PROVIDER_TIMEOUT_SECONDS", "10"))
    PROVIDER_LANGUAGE_CODE: str = os.getenv("PROVIDER_LANGUAGE_CODE", "en")
    PROVIDER_REGION_CODE: str = os.getenv("PROVIDER_REGION_CODE", "JP")
    SEARCH_COUNTRY_HINT: str = os.getenv("SEARCH_COUNTRY_HINT", "Japan")
    AUTOCOMPLETE_PAGE_SIZE: int = int(os.getenv("AUTOCOMPLETE_PAGE_SIZE", "10"))

    # ===== Photo Proxy =====
    PHOTO_PROXY_PATH: str = os.getenv("PHOTO_PROXY_PATH", "/api/v1/places/photo")
    PHOTO_PROXY_MAX_WIDTH: int = int(os.getenv("PHOTO_PROXY_MAX_WIDTH", "1600"))
    PHOTO_DIMENSION_MIN: int = 1
    PHOTO_DIMENSION_MAX: int = 4800

    # ===== Logging & Debug =====
    ERROR_BODY_TRUNCATION_LENGTH: int = int(os.getenv("ERROR_BODY_TRUNCATION_LENGTH", "400"))

    class Config:
        env_file = ".env"
        case_sensitive = True
        # Allow extra fields from .env that aren't defined here
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure singleton pattern - settings are loaded once.
    """
    return Settings()


# Global settings instance for easy import
settings = get_settings()
