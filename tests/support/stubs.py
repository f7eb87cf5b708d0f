"""Shared test stubs for the vendor clients and their HTTP transports."""

from typing import Any, Dict, List, Optional

import requests

from pinsound.domain.analysis.cache import AnalysisCache
from pinsound.domain.analysis.models import ImageAnnotation
from pinsound.errors import UpstreamError


class FakeResponse:
    """Just enough of requests.Response for the REST clients."""

    def __init__(self, status_code: int = 200, payload: Any = None, text: str = ""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("no JSON body")
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error", response=self)


class FakeSession:
    """Records calls and replays queued responses (or raises queued errors)."""

    def __init__(self, responses: Optional[List[Any]] = None):
        self.responses = list(responses or [])
        self.calls: List[Dict[str, Any]] = []

    def _next(self, method: str, url: str, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        if not self.responses:
            raise AssertionError(f"unexpected {method} {url}")
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def post(self, url, **kwargs):
        return self._next("POST", url, **kwargs)

    def get(self, url, **kwargs):
        return self._next("GET", url, **kwargs)

    def request(self, method, url, **kwargs):
        return self._next(method, url, **kwargs)


class SpotipySearchStub:
    """Minimal Spotipy client stub: answers per query, or raises per query."""

    def __init__(self, tracks: Optional[Dict[str, dict]] = None, errors: Optional[Dict[str, Exception]] = None):
        self.tracks = tracks or {}
        self.errors = errors or {}
        self.queries: List[str] = []

    def search(self, q, type=None, limit=None, **kwargs):
        self.queries.append(q)
        if q in self.errors:
            raise self.errors[q]
        track = self.tracks.get(q)
        return {"tracks": {"items": [track] if track else []}}


def spotify_track(name: str, artist: str, url: str) -> dict:
    return {
        "name": name,
        "artists": [{"name": artist}],
        "external_urls": {"spotify": url},
    }


class StaticTokenProvider:
    def __init__(self, token: str = "test-token", error: Optional[Exception] = None):
        self.token = token
        self.error = error
        self.invalidations = 0

    def get_token(self) -> str:
        if self.error:
            raise self.error
        return self.token

    def invalidate(self) -> None:
        self.invalidations += 1


class VisionStub:
    def __init__(self, annotation: Optional[ImageAnnotation] = None, error: Optional[Exception] = None):
        self.annotation = annotation or ImageAnnotation()
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    def annotate(self, image_url=None, content=None):
        self.calls.append({"image_url": image_url, "content": content})
        if self.error:
            raise self.error
        return self.annotation


class GeneratorStub:
    def __init__(
        self,
        recommendations: str = "",
        story: str = "",
        recommendation_error: Optional[Exception] = None,
        story_error: Optional[Exception] = None,
    ):
        self.recommendations = recommendations
        self.story = story
        self.recommendation_error = recommendation_error
        self.story_error = story_error
        self.calls: List[tuple] = []

    def recommend_songs(self, emotion, labels):
        self.calls.append(("recommend", emotion, list(labels)))
        if self.recommendation_error:
            raise self.recommendation_error
        return self.recommendations

    def write_story(self, emotion, labels):
        self.calls.append(("story", emotion, list(labels)))
        if self.story_error:
            raise self.story_error
        return self.story


class CatalogStub:
    def __init__(self, results=None, error: Optional[Exception] = None):
        self.results = list(results or [])
        self.error = error
        self.resolved: List[list] = []
        self.searches: List[str] = []

    def resolve_candidates(self, candidates):
        self.resolved.append(list(candidates))
        if self.error:
            raise self.error
        return list(self.results)

    def search_track(self, query):
        self.searches.append(query)
        if self.error:
            raise self.error
        return self.results[0] if self.results else None


class InMemoryAnalysisCache(AnalysisCache):
    def __init__(self):
        self.entries = {}
        self.lookups: List[str] = []

    def lookup(self, image_url):
        self.lookups.append(image_url)
        return self.entries.get(image_url)

    def store(self, image_url, result):
        self.entries[image_url] = result


def upstream(service: str = "vision", message: str = "boom", detail: Any = None) -> UpstreamError:
    return UpstreamError(service, message, detail=detail)
