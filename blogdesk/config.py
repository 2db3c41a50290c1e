from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env if present
ENV_PATH = Path(__file__).resolve().parents[1] / ".env"
if ENV_PATH.exists():
    load_dotenv(ENV_PATH)


def _int_list(raw: str) -> tuple[int, ...]:
    return tuple(int(part) for part in raw.split(",") if part.strip())


class Config:
    SECRET_KEY: str = os.getenv("SECRET_KEY", os.urandom(32).hex())

    SITE_NAME = os.getenv("SITE_NAME", "Blogdesk")

    # Database
    # Read from environment and then unset for security
    SQLALCHEMY_DATABASE_URI: str = os.environ.pop("DATABASE_URL", "sqlite:///blogdesk.db")
    SQLALCHEMY_TRACK_MODIFICATIONS: bool = False

    # Sessions
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SECURE = os.getenv("FLASK_ENV", "production") == "production"
    SESSION_COOKIE_SAMESITE = "Lax"
    SESSION_COOKIE_PATH = "/"
    SESSION_LIFETIME_MINUTES = int(os.getenv("SESSION_LIFETIME_MINUTES", "120"))
    ABSOLUTE_SESSION_MAX_AGE_SECONDS = int(os.getenv("ABSOLUTE_SESSION_MAX_AGE_SECONDS", str(8 * 60 * 60)))

    MAX_CONTENT_LENGTH = int(os.getenv("MAX_CONTENT_LENGTH", str(1024 * 1024)))

    # Rate limiting
    RATELIMIT_DEFAULT = os.getenv("RATELIMIT_DEFAULT", "100 per minute")
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")

    # Blog listing
    BLOGS_DEFAULT_PER_PAGE = int(os.getenv("BLOGS_DEFAULT_PER_PAGE", "10"))
    BLOGS_MAX_PER_PAGE = int(os.getenv("BLOGS_MAX_PER_PAGE", "100"))
    BLOGS_PER_PAGE_OPTIONS = _int_list(os.getenv("BLOGS_PER_PAGE_OPTIONS", "5,10,25,50"))

    # Security headers
    # {nonce} is replaced per request in blogdesk.security.apply_security_headers
    SECURITY_CSP = (
        "default-src 'self'; "
        "script-src 'nonce-{nonce}' 'strict-dynamic'; "
        "style-src 'self'; "
        "img-src 'self'; "
        "font-src 'self'; "
        "object-src 'none'; "
        "base-uri 'self'; "
        "form-action 'self'; "
        "frame-ancestors 'none'"
    )
    SECURITY_HSTS_SECONDS = 31536000
    SECURITY_PERMISSIONS_POLICY = (
        "geolocation=(), microphone=(), camera=(), payment=(), usb=(), "
        "magnetometer=(), gyroscope=(), accelerometer=()"
    )

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Flask env
    ENV = os.getenv("FLASK_ENV", "production")
    DEBUG = ENV != "production"
