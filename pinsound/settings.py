#!/usr/bin/env python
"""
Typed view over config.Config for service wiring.

create_app() hands an AppSettings instance to the vendor clients instead of
letting each of them read Config (or the environment) on its own.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from config import Config


class AppSettings(BaseModel):
    """Vendor credentials and tunables used by the analysis services."""

    model_config = ConfigDict(extra="ignore")

    # Spotify credentials
    spotify_client_id: Optional[str] = None
    spotify_client_secret: Optional[str] = None

    # Google
    vision_api_key: Optional[str] = None
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-2.5-flash"

    # Pinterest
    pinterest_client_id: Optional[str] = None
    pinterest_client_secret: Optional[str] = None
    pinterest_redirect_uri: str = "http://localhost:5001/auth/pinterest/callback"
    frontend_url: str = "http://localhost:3000"

    http_timeout: float = Field(default=30.0, gt=0)
    cors_allowed_origins: List[str] = Field(default_factory=list)

    @field_validator(
        "spotify_client_id",
        "spotify_client_secret",
        "vision_api_key",
        "gemini_api_key",
        "pinterest_client_id",
        "pinterest_client_secret",
        mode="before",
    )
    @classmethod
    def _blank_to_none(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        value = str(value).strip()
        return value or None

    @field_validator("frontend_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    def configured_vendors(self) -> Dict[str, bool]:
        return {
            "spotify": bool(self.spotify_client_id and self.spotify_client_secret),
            "vision": bool(self.vision_api_key),
            "gemini": bool(self.gemini_api_key),
            "pinterest": bool(self.pinterest_client_id and self.pinterest_client_secret),
        }


# AppSettings field -> Config attribute
_CONFIG_KEYS = {
    "spotify_client_id": "SPOTIPY_CLIENT_ID",
    "spotify_client_secret": "SPOTIPY_CLIENT_SECRET",
    "vision_api_key": "GOOGLE_VISION_API_KEY",
    "gemini_api_key": "GEMINI_API_KEY",
    "gemini_model": "GEMINI_MODEL",
    "pinterest_client_id": "PINTEREST_CLIENT_ID",
    "pinterest_client_secret": "PINTEREST_CLIENT_SECRET",
    "pinterest_redirect_uri": "PINTEREST_REDIRECT_URI",
    "frontend_url": "FRONTEND_URL",
    "http_timeout": "HTTP_TIMEOUT_SECONDS",
    "cors_allowed_origins": "CORS_ALLOWED_ORIGINS",
}


def load_app_settings(source: Optional[Mapping[str, Any]] = None) -> AppSettings:
    """Build settings from a Flask config mapping, or from Config when omitted."""
    data: Dict[str, Any] = {}
    for field_name, config_key in _CONFIG_KEYS.items():
        if source is not None and config_key in source:
            value = source[config_key]
        else:
            value = getattr(Config, config_key, None)
        if value is not None:
            data[field_name] = value
    return AppSettings(**data)


__all__ = ["AppSettings", "load_app_settings"]
