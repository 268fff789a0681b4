"""
Environment-aware configuration.
Values are read once when the config class is selected; create_app copies
them into app.config and builds the session core from them. Nothing
changes them afterwards.
"""
import os
import re
from datetime import timedelta

from dotenv import load_dotenv

load_dotenv()  # Read .env if present

_DURATION_RE = re.compile(r"^\s*(\d+)\s*(s|m|h|d)?\s*$")
_UNITS = {"s": "seconds", "m": "minutes", "h": "hours", "d": "days"}


def parse_duration(raw: str) -> timedelta:
    """
    Parse "90s", "15m", "720h", "7d" or bare seconds ("900") into a timedelta.
    Raises ValueError on anything else.
    """
    match = _DURATION_RE.match(str(raw))
    if not match:
        raise ValueError(f"invalid duration: {raw!r}")
    amount, unit = match.groups()
    return timedelta(**{_UNITS[unit or "s"]: int(amount)})


class BaseConfig:
    DEBUG = False
    TESTING = False
    APP_ENV = os.getenv("APP_ENV", "dev")
    # CORS: in dev we usually allow '*', in prod supply a comma-separated list in env
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Signing secret for access tokens. The algorithm is fixed (HS256) in utils.tokens.
    JWT_SECRET = os.getenv("JWT_SECRET", "")
    ACCESS_TOKEN_TTL = parse_duration(os.getenv("ACCESS_TOKEN_TTL", "15m"))
    REFRESH_TOKEN_TTL = parse_duration(os.getenv("REFRESH_TOKEN_TTL", "720h"))

    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///catalog-sessions.db")
    # upper bound for any single store operation
    STORE_TIMEOUT_SECONDS = float(os.getenv("STORE_TIMEOUT_SECONDS", "5"))
    SQL_ECHO = os.getenv("SQL_ECHO", "0").lower() in ("1", "true", "yes")


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    JWT_SECRET = os.getenv("JWT_SECRET", "dev-only-signing-secret-change-me-0123456789")


class TestingConfig(BaseConfig):
    TESTING = True
    JWT_SECRET = "test-signing-secret-0123456789abcdef0123456789"
    ACCESS_TOKEN_TTL = timedelta(minutes=15)
    REFRESH_TOKEN_TTL = timedelta(hours=720)
    DATABASE_URL = "sqlite:///:memory:"
    LOG_LEVEL = "WARNING"


class ProductionConfig(BaseConfig):
    DEBUG = False


def get_config(name: str | None):
    """
    Select config class.
    - If name is provided, choose by name.
    - Else choose based on APP_ENV (dev/test/prod).
    """
    env = (name or os.getenv("APP_ENV", "dev")).lower()
    if env in ["prod", "production"]:
        return ProductionConfig
    if env in ["test", "testing"]:
        return TestingConfig
    return DevelopmentConfig


def validate_config(config) -> None:
    """Fail fast at startup on settings the session core cannot run with."""
    if not config.get("JWT_SECRET"):
        raise RuntimeError("JWT_SECRET is required")
    for key in ("ACCESS_TOKEN_TTL", "REFRESH_TOKEN_TTL"):
        ttl = config.get(key)
        if not isinstance(ttl, timedelta) or ttl.total_seconds() <= 0:
            raise RuntimeError(f"{key} must be a positive duration")
    if float(config.get("STORE_TIMEOUT_SECONDS", 0)) <= 0:
        raise RuntimeError("STORE_TIMEOUT_SECONDS must be positive")
