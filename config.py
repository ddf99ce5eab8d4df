"""Application configuration module."""

import os
from datetime import timedelta


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


class Config:
    """Base configuration for the Flask application."""

    # Core
    SECRET_KEY = os.getenv("SECRET_KEY", "change-me")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET", os.getenv("JWT_SECRET_KEY", SECRET_KEY))
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=24)
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///app.db")
    SQLALCHEMY_DATABASE_URI = DATABASE_URL
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True, "pool_recycle": 1800}
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # CORS
    _raw_origins = os.getenv("ORIGINS", "http://localhost:3000")
    if _raw_origins.strip() == "*":
        CORS_ORIGINS = "*"
    else:
        CORS_ORIGINS = [o.strip() for o in _raw_origins.split(",") if o.strip()]

    # Passwords (werkzeug method string, e.g. "scrypt" or "pbkdf2:sha256:600000")
    PASSWORD_HASH_METHOD = os.getenv("PASSWORD_HASH_METHOD", "scrypt")

    # Outbound mail
    MAIL_BACKEND = os.getenv("MAIL_BACKEND", "smtp")
    MAIL_SERVER = os.getenv("EMAIL_HOST", "localhost")
    MAIL_PORT = int(os.getenv("EMAIL_PORT", "587"))
    MAIL_USE_TLS = _env_flag("EMAIL_USE_TLS", "true")
    MAIL_USERNAME = os.getenv("EMAIL_USER")
    MAIL_PASSWORD = os.getenv("EMAIL_PASS")
    MAIL_DEFAULT_SENDER = os.getenv(
        "EMAIL_FROM", f'"Travel Planner" <{MAIL_USERNAME or "no-reply@localhost"}>'
    )
    MAIL_TIMEOUT = float(os.getenv("EMAIL_TIMEOUT", "10"))

    # Verification links
    VERIFY_URL_TEMPLATE = os.getenv(
        "VERIFY_URL_TEMPLATE",
        "http://localhost:{}/api/auth/verify/{{unique_id}}".format(os.getenv("PORT", "5000")),
    )
