# infrastructure/pinterest.py
import logging
from typing import Any, Dict, Iterator, List, Optional
from urllib.parse import urlencode

import requests

from pinsound.errors import ConfigurationError, UpstreamError

logger = logging.getLogger(__name__)

PINTEREST_AUTHORIZE_URL = "https://www.pinterest.com/oauth/"
PINTEREST_API_BASE = "https://api.pinterest.com/v5"
PINTEREST_SCOPES = "user_accounts:read,pins:read,boards:read"
PIN_FIELDS = "id,title,description,media"


class PinterestClient:
    """Pinterest OAuth code exchange and pin listing (API v5)."""

    def __init__(
        self,
        client_id: Optional[str],
        client_secret: Optional[str],
        redirect_uri: str,
        session: Optional[requests.Session] = None,
        timeout: float = 30.0,
    ):
        self._client_id = client_id
        self._client_secret = client_secret
        self.redirect_uri = redirect_uri
        self._session = session or requests.Session()
        self._timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self._client_id and self._client_secret)

    def authorization_url(self, state: str) -> str:
        if not self._client_id:
            raise ConfigurationError("pinterest", "PINTEREST_CLIENT_ID is not set")
        query = urlencode(
            {
                "response_type": "code",
                "client_id": self._client_id,
                "redirect_uri": self.redirect_uri,
                "scope": PINTEREST_SCOPES,
                "state": state,
            }
        )
        return f"{PINTEREST_AUTHORIZE_URL}?{query}"

    def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        url = f"{PINTEREST_API_BASE}{path}"
        try:
            response = self._session.request(method, url, timeout=self._timeout, **kwargs)
            response.raise_for_status()
            return response.json() or {}
        except requests.HTTPError as exc:
            detail = None
            if exc.response is not None:
                try:
                    detail = exc.response.json()
                except ValueError:
                    detail = exc.response.text or None
            raise UpstreamError(
                "pinterest",
                f"{method} {path} failed",
                detail=detail,
                status_code=exc.response.status_code if exc.response is not None else None,
            ) from exc
        except requests.RequestException as exc:
            raise UpstreamError("pinterest", f"{method} {path} failed: {exc}") from exc
        except ValueError as exc:
            raise UpstreamError("pinterest", f"invalid JSON from {path}: {exc}") from exc

    def exchange_code(self, code: str) -> str:
        """Trade an authorization code for an access token."""
        if not self.configured:
            raise ConfigurationError("pinterest", "PINTEREST_CLIENT_ID and PINTEREST_CLIENT_SECRET are not set")
        payload = self._request(
            "POST",
            "/oauth/token",
            data={
                "grant_type": "authorization_code",
                "redirect_uri": self.redirect_uri,
                "code": code,
            },
            auth=(self._client_id, self._client_secret),
        )
        token = payload.get("access_token")
        if not token:
            raise UpstreamError("pinterest", "token response missing access_token", detail=payload)
        return token

    @staticmethod
    def _bearer(token: str) -> Dict[str, str]:
        return {"Authorization": f"Bearer {token}"}

    def user_account(self, access_token: str) -> Dict[str, Any]:
        return self._request("GET", "/user_account", headers=self._bearer(access_token))

    def list_pins(self, access_token: str, bookmark: Optional[str] = None, page_size: int = 25) -> Dict[str, Any]:
        params: Dict[str, Any] = {"page_size": page_size, "fields": PIN_FIELDS}
        if bookmark:
            params["bookmark"] = bookmark
        return self._request("GET", "/pins", headers=self._bearer(access_token), params=params)

    def iter_all_pins(self, access_token: str, page_size: int = 25) -> Iterator[Dict[str, Any]]:
        """Yield every pin, following the ``bookmark`` cursor until it runs out."""
        bookmark: Optional[str] = None
        while True:
            page = self.list_pins(access_token, bookmark=bookmark, page_size=page_size)
            for pin in page.get("items") or []:
                yield pin
            bookmark = page.get("bookmark")
            if not bookmark:
                break

    def fetch_all_pins(self, access_token: str) -> List[Dict[str, Any]]:
        pins = list(self.iter_all_pins(access_token))
        logger.info("Total Pins Retrieved: %s", len(pins))
        return pins


__all__ = ["PinterestClient", "PINTEREST_AUTHORIZE_URL", "PINTEREST_API_BASE", "PINTEREST_SCOPES"]
