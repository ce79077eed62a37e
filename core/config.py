from pydantic import BaseModel
from typing import List
import os

DEFAULT_SECRET_KEY = "your-secret-key-change-in-production"


def split_hosts(value: str) -> List[str]:
    """Parse a comma-separated host list such as "api.example.com,localhost"."""
    return [host.strip() for host in value.split(",") if host.strip()] or ["*"]


class Settings(BaseModel):
    """Application settings and configuration."""

    # App settings
    APP_NAME: str = "Expense Tracker Backend"
    VERSION: str = "1.0.0"
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "5000"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Security
    SECRET_KEY: str = os.getenv("SECRET_KEY", DEFAULT_SECRET_KEY)
    ALGORITHM: str = "HS256"
    # 0 issues tokens without an "exp" claim (they never expire)
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "0"))
    BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "10"))

    # Host header allow-list for TrustedHostMiddleware; "*" accepts any host
    ALLOWED_HOSTS: List[str] = split_hosts(os.getenv("ALLOWED_HOSTS", "*"))

    # Storage: "sql" uses DATABASE_URL, "memory" keeps everything in process
    STORE_BACKEND: str = os.getenv("STORE_BACKEND", "sql")
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./expenses.db")

    # Hardening: upper bound for a single request
    REQUEST_TIMEOUT_SECONDS: float = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "30"))

    class Config:
        frozen = True

# Create settings instance
settings = Settings()
