# infrastructure/spotify.py
import dataclasses
import logging
import threading
import time
from typing import Any, Callable, Iterable, List, Optional

import requests
import spotipy
from spotipy.exceptions import SpotifyException

from pinsound.domain.analysis.models import MusicRecommendation, SongCandidate
from pinsound.errors import ConfigurationError, UpstreamError
from pinsound.observability.logging import vendor_fields

logger = logging.getLogger(__name__)

SPOTIFY_TOKEN_URL = "https://accounts.spotify.com/api/token"


@dataclasses.dataclass
class SpotifyToken:
    value: str
    expires_at: float

    def is_valid(self, now: float) -> bool:
        return bool(self.value) and now < self.expires_at


class SpotifyTokenProvider:
    """
    Client-credentials bearer token for catalog search.

    The token lives in a single slot shared by every request thread; the lock
    makes a refresh happen once even when several callers see it expire.
    """

    def __init__(
        self,
        client_id: Optional[str],
        client_secret: Optional[str],
        session: Optional[requests.Session] = None,
        timeout: float = 30.0,
        clock: Callable[[], float] = time.time,
    ):
        self._client_id = client_id
        self._client_secret = client_secret
        self._session = session or requests.Session()
        self._timeout = timeout
        self._clock = clock
        self._lock = threading.RLock()
        self._token: Optional[SpotifyToken] = None

    @property
    def configured(self) -> bool:
        return bool(self._client_id and self._client_secret)

    def get_token(self) -> str:
        with self._lock:
            if self._token and self._token.is_valid(self._clock()):
                return self._token.value
            self._token = self._exchange()
            return self._token.value

    def invalidate(self) -> None:
        with self._lock:
            self._token = None

    def _exchange(self) -> SpotifyToken:
        if not self.configured:
            raise ConfigurationError("spotify", "SPOTIPY_CLIENT_ID and SPOTIPY_CLIENT_SECRET are not set")

        logger.debug("Requesting new Spotify client-credentials token.")
        try:
            response = self._session.post(
                SPOTIFY_TOKEN_URL,
                data={"grant_type": "client_credentials"},
                auth=(self._client_id, self._client_secret),
                timeout=self._timeout,
            )
            response.raise_for_status()
            payload = response.json()
            value = payload["access_token"]
            lifetime = float(payload.get("expires_in", 3600))
        except requests.HTTPError as exc:
            raise UpstreamError(
                "spotify",
                "token exchange failed",
                detail=_response_body(exc.response),
                status_code=exc.response.status_code if exc.response is not None else None,
            ) from exc
        except requests.RequestException as exc:
            raise UpstreamError("spotify", f"token exchange failed: {exc}") from exc
        except (KeyError, TypeError, ValueError) as exc:
            raise UpstreamError("spotify", f"unexpected token response: {exc}") from exc

        logger.info("Spotify access token refreshed; valid for %ss.", int(lifetime))
        return SpotifyToken(value=value, expires_at=self._clock() + lifetime)


def _response_body(response: Optional[requests.Response]) -> Any:
    if response is None:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text or None


class CatalogService:
    """Spotify track search used to turn song candidates into links."""

    def __init__(
        self,
        token_provider: SpotifyTokenProvider,
        spotify_factory: Optional[Callable[[str], Any]] = None,
        timeout: float = 30.0,
    ):
        self.token_provider = token_provider
        self._spotify_factory = spotify_factory or (
            lambda token: spotipy.Spotify(auth=token, requests_timeout=timeout, retries=0)
        )
        # One spotipy client (and its HTTP session) per token value
        self._client_lock = threading.Lock()
        self._client_token: Optional[str] = None
        self._client: Any = None

    def _get_client(self):
        token = self.token_provider.get_token()
        with self._client_lock:
            if self._client is None or self._client_token != token:
                self._client = self._spotify_factory(token)
                self._client_token = token
            return self._client

    def _search(self, query: str) -> dict:
        return self._get_client().search(q=query, type="track", limit=1)

    def search_track(self, query: str) -> Optional[MusicRecommendation]:
        """Best single track for ``query``, or None when Spotify has no match."""
        try:
            try:
                results = self._search(query)
            except SpotifyException as exc:
                if exc.http_status != 401:
                    raise
                logger.warning("Spotify token rejected during search for '%s'. Refreshing once.", query)
                self.token_provider.invalidate()
                with self._client_lock:
                    self._client = None
                results = self._search(query)
        except SpotifyException as exc:
            raise UpstreamError(
                "spotify", exc.msg or str(exc), detail=getattr(exc, "msg", None), status_code=exc.http_status
            ) from exc
        except requests.RequestException as exc:
            raise UpstreamError("spotify", f"search failed: {exc}") from exc

        items = ((results or {}).get("tracks") or {}).get("items") or []
        if not items:
            return None
        track = items[0]
        try:
            artists = track.get("artists") or []
            return MusicRecommendation(
                song=track["name"],
                artist=artists[0]["name"] if artists else "",
                spotify_url=(track.get("external_urls") or {})["spotify"],
            )
        except (KeyError, TypeError) as exc:
            raise UpstreamError("spotify", f"unexpected search response: {exc}") from exc

    def resolve_candidates(self, candidates: Iterable[SongCandidate]) -> List[MusicRecommendation]:
        """
        Resolve candidates one at a time.

        The bearer token is fetched once up front and a failure there raises.
        After that a failed or empty search only skips its own candidate.
        """
        candidates = list(candidates)
        resolved: List[MusicRecommendation] = []
        if not candidates:
            return resolved
        self.token_provider.get_token()
        for candidate in candidates:
            try:
                track = self.search_track(candidate.query)
            except UpstreamError as exc:
                logger.warning(
                    "Spotify search failed for %s - %s: %s", candidate.song, candidate.artist, exc,
                    extra=vendor_fields(exc),
                )
                continue
            if track is None:
                logger.info("No Spotify match for %s - %s", candidate.song, candidate.artist)
                continue
            resolved.append(
                MusicRecommendation(song=candidate.song, artist=candidate.artist, spotify_url=track.spotify_url)
            )
        return resolved


__all__ = ["SpotifyToken", "SpotifyTokenProvider", "CatalogService", "SPOTIFY_TOKEN_URL"]
