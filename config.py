#!/usr/bin/env python
# config.py
import os
from typing import List

# This assumes config.py is at the root of your project
basedir = os.path.abspath(os.path.dirname(__file__))


def _get_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _get_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "t", "yes", "y", "on"}


def _get_csv_list(name: str, default: str) -> List[str]:
    raw = os.getenv(name)
    source = raw if raw is not None else default
    return [token.strip() for token in source.split(",") if token and token.strip()]


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'change-me-pinsound-dev-key'

    # Analysis cache lives in a single SQL table
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
        'sqlite:///' + os.path.join(basedir, 'instance', 'pinsound.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Spotify API (client credentials flow, catalog search only)
    SPOTIPY_CLIENT_ID = os.environ.get('SPOTIPY_CLIENT_ID')
    SPOTIPY_CLIENT_SECRET = os.environ.get('SPOTIPY_CLIENT_SECRET')

    # Google Cloud Vision (REST, API key)
    GOOGLE_VISION_API_KEY = os.environ.get('GOOGLE_VISION_API_KEY')

    # Gemini
    GEMINI_API_KEY = os.environ.get('GEMINI_API_KEY')
    GEMINI_MODEL = os.getenv('GEMINI_MODEL', 'gemini-2.5-flash')

    # Pinterest OAuth
    PINTEREST_CLIENT_ID = os.environ.get('PINTEREST_CLIENT_ID')
    PINTEREST_CLIENT_SECRET = os.environ.get('PINTEREST_CLIENT_SECRET')
    PINTEREST_REDIRECT_URI = os.getenv(
        'PINTEREST_REDIRECT_URI', 'http://localhost:5001/auth/pinterest/callback'
    )
    # Where the OAuth callback sends the browser once the token is issued
    FRONTEND_URL = os.getenv('FRONTEND_URL', 'http://localhost:3000')

    CORS_ALLOWED_ORIGINS = _get_csv_list('CORS_ALLOWED_ORIGINS', 'http://localhost:3000')

    # Outbound HTTP timeout for vendor calls (seconds)
    HTTP_TIMEOUT_SECONDS = _get_float('HTTP_TIMEOUT_SECONDS', 30.0)

    # Uploads are analysed in memory; Flask rejects larger bodies with 413
    MAX_CONTENT_LENGTH = _get_int('MAX_UPLOAD_BYTES', 10 * 1024 * 1024)

    # Runtime behavior
    DEBUG = _get_bool('DEBUG', False)
    PORT = _get_int('PORT', 5001)
    # Control console logging; when disabled, logs go only to file
    ENABLE_CONSOLE_LOGS = _get_bool('ENABLE_CONSOLE_LOGS', False)
