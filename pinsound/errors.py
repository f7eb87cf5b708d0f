"""Exceptions shared by the vendor clients, the pipeline and the routes."""

from __future__ import annotations

from typing import Any, Optional


class PinSoundError(Exception):
    """Base class for application errors."""


class UpstreamError(PinSoundError):
    """A vendor call (Spotify, Vision, Gemini, Pinterest) failed.

    ``detail`` carries the vendor's own error body when one was returned so
    routes can pass it through to the caller unchanged.
    """

    def __init__(
        self,
        service: str,
        message: str,
        detail: Any = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(f"{service}: {message}")
        self.service = service
        self.message = message
        self.detail = detail
        self.status_code = status_code

    @property
    def payload(self) -> Any:
        return self.detail if self.detail is not None else self.message


class ConfigurationError(UpstreamError):
    """Vendor credentials are missing, so the vendor cannot be reached."""

    def __init__(self, service: str, message: str) -> None:
        super().__init__(service, message)


__all__ = ["PinSoundError", "UpstreamError", "ConfigurationError"]
