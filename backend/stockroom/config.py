# backend/stockroom/config.py
from __future__ import annotations
import os


class ConfigurationError(RuntimeError):
    """Raised at startup when required configuration is missing or invalid."""


def _split_origins(raw: str) -> set[str]:
    return {o.strip() for o in raw.split(",") if o.strip()}


class Config:
    # Signing key for session tokens. Required: there is no fallback value.
    JWT_SECRET = os.environ.get("JWT_SECRET")

    # SQLite DB stored next to the process by default
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL",  # optional alternative location
        "sqlite:///stockroom.sqlite3",  # default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # bcrypt cost factor (12 keeps a hash well above 10ms)
    BCRYPT_ROUNDS = int(os.environ.get("BCRYPT_ROUNDS", "12"))

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    CORS_ORIGINS = _split_origins(os.environ.get(
        "CORS_ORIGINS",
        "http://localhost:5173,http://127.0.0.1:5173",
    ))

    PORT = int(os.environ.get("PORT", "10000"))


def validate_config(config) -> None:
    """
    Fail fast on settings the app cannot run without.

    The signing secret is checked here, once, at startup so a missing
    secret never turns into a guessable default at request time.
    """
    secret = config.get("JWT_SECRET")
    if not secret or not str(secret).strip():
        raise ConfigurationError("JWT_SECRET must be set to start the application")

    rounds = config.get("BCRYPT_ROUNDS")
    if not isinstance(rounds, int) or not 4 <= rounds <= 31:
        raise ConfigurationError("BCRYPT_ROUNDS must be an integer between 4 and 31")
