"""Application settings loaded from environment variables."""
import os
from typing import Optional
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Application settings."""

    # ============================================================================
    # GOOGLE PLACES
    # ============================================================================
    GOOGLE_PLACES_API_KEY: Optional[str] = os.getenv("GOOGLE_PLACES_API_KEY") or None
    PLACES_API_BASE_URL: str = os.getenv("PLACES_API_BASE_URL", "https://places.googleapis.com/v1")

    # ============================================================================
    # DURABLE STORE
    # ============================================================================
    # One of: database, redis, memory, none
    DURABLE_STORE_BACKEND: str = os.getenv("DURABLE_STORE_BACKEND", "database").lower()

    DATABASE_URL: Optional[str] = os.getenv("DATABASE_URL") or None
    DATABASE_HOST: str = os.getenv("DATABASE_HOST", "localhost")
    DATABASE_PORT: int = int(os.getenv("DATABASE_PORT", "3306"))
    DATABASE_USER: str = os.getenv("DATABASE_USER", "root")
    DATABASE_PASSWORD: str = os.getenv("DATABASE_PASSWORD", "")
    DATABASE_NAME: str = os.getenv("DATABASE_NAME", "places")

    # Redis Cache
    REDIS_CACHE_HOST: str = os.getenv("REDIS_CACHE_HOST", "localhost")
    REDIS_CACHE_PORT: int = int(os.getenv("REDIS_CACHE_PORT", "6379"))
    REDIS_CACHE_DB: int = int(os.getenv("REDIS_CACHE_DB", "2"))
    REDIS_CACHE_PASSWORD: Optional[str] = os.getenv("REDIS_CACHE_PASSWORD") or None

    # ============================================================================
    # PERFORMANCE SETTINGS
    # ============================================================================

    # Connection Pooling
    HTTP_MAX_CONNECTIONS: int = int(os.getenv("HTTP_MAX_CONNECTIONS", "100"))
    HTTP_MAX_KEEPALIVE: int = int(os.getenv("HTTP_MAX_KEEPALIVE", "50"))
    HTTP_CONNECT_TIMEOUT_SECONDS: float = float(os.getenv("HTTP_CONNECT_TIMEOUT_SECONDS", "5"))

    # ============================================================================
    # API
    # ============================================================================
    CORS_ALLOW_ORIGINS: str = os.getenv("CORS_ALLOW_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000")

    # ============================================================================
    # LOGGING
    # ============================================================================
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    @classmethod
    def get_database_url(cls) -> str:
        """Get SQLAlchemy database URL."""
        if cls.DATABASE_URL:
            return cls.DATABASE_URL
        return (
            f"mysql+pymysql://{cls.DATABASE_USER}:{cls.DATABASE_PASSWORD}"
            f"@{cls.DATABASE_HOST}:{cls.DATABASE_PORT}/{cls.DATABASE_NAME}"
        )

    @classmethod
    def get_cors_origins(cls) -> list:
        """Get allowed CORS origins."""
        return [origin.strip() for origin in cls.CORS_ALLOW_ORIGINS.split(",") if origin.strip()]

    @classmethod
    def get_redis_cache_url(cls) -> str:
        """Get Redis cache connection URL."""
        if cls.REDIS_CACHE_PASSWORD:
            return f"redis://:{cls.REDIS_CACHE_PASSWORD}@{cls.REDIS_CACHE_HOST}:{cls.REDIS_CACHE_PORT}/{cls.REDIS_CACHE_DB}"
        return f"redis://{cls.REDIS_CACHE_HOST}:{cls.REDIS_CACHE_PORT}/{cls.REDIS_CACHE_DB}"


# Global settings instance
settings = Settings()
