"""QrBites Backend: Configuration via pydantic-settings."""

import re
from datetime import timedelta
from functools import lru_cache

from pydantic_settings import BaseSettings

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$")
_DURATION_UNITS = {"": 1, "s": 1, "m": 60, "h": 3600, "d": 86400}


def parse_duration(value: str) -> timedelta:
    """Parse durations like '7d', '12h', '30m', '45s' or plain seconds."""
    match = _DURATION_RE.match(str(value))
    if not match:
        raise ValueError(f"Invalid duration: {value!r}")
    amount, unit = match.groups()
    return timedelta(seconds=int(amount) * _DURATION_UNITS[unit])


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./qrbites.db"

    # Security
    JWT_SECRET: str = "change-me"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRES_IN: str = "7d"
    BCRYPT_ROUNDS: int = 12
    ENCRYPTION_KEY: str = ""  # Fernet key for OAuth tokens, derived from JWT_SECRET when empty
    SESSION_SECRET: str = "change-me-session"

    # OAuth
    GOOGLE_CLIENT_ID: str = ""
    GOOGLE_CLIENT_SECRET: str = ""

    # Cloudinary
    CLOUDINARY_CLOUD_NAME: str = ""
    CLOUDINARY_API_KEY: str = ""
    CLOUDINARY_API_SECRET: str = ""

    # Public URLs
    API_URL: str = "http://localhost:5000"
    FRONTEND_URL: str = "http://localhost:3000"
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    # Uploads
    MAX_FILE_SIZE: int = 5 * 1024 * 1024
    MAX_FILE_COUNT: int = 10

    # Rate limits (limits notation)
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_API: str = "100/15minutes"
    RATE_LIMIT_AUTH: str = "50/hour"
    RATE_LIMIT_REGISTER: str = "5/hour"
    RATE_LIMIT_PUBLIC_MENU: str = "30/minute"
    RATE_LIMIT_PUBLIC_RESTAURANT: str = "20/minute"
    RATE_LIMIT_QR_SCAN: str = "60/minute"

    # Server
    PORT: int = 5000
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @property
    def jwt_expires_delta(self) -> timedelta:
        return parse_duration(self.JWT_EXPIRES_IN)

    @property
    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def max_file_size_mb(self) -> int:
        return max(1, self.MAX_FILE_SIZE // (1024 * 1024))

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    return Settings()
