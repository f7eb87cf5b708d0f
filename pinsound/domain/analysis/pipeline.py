import logging
import time
from typing import Callable, List, Optional, Tuple, TypeVar

from pinsound.errors import UpstreamError
from pinsound.observability.logging import vendor_fields
from pinsound.observability.metrics import record_analysis, record_cache_lookup, record_upstream_failure

from .cache import AnalysisCache
from .emotion import NEUTRAL, dominant_emotion
from .models import AnalysisResult, ImageAnnotation, MusicRecommendation
from .songs import extract_song_candidates

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AnalysisPipeline:
    """
    Image -> labels/emotion -> Gemini songs + story -> Spotify links.

    Two entry points share the same stages but not the same failure policy:
    ``analyze_url`` is strict (a Vision, Gemini or Spotify token failure raises)
    and cached by URL; ``analyze_upload`` degrades each stage to a default
    value and is never cached.
    """

    def __init__(self, vision, generator, catalog, cache: Optional[AnalysisCache] = None):
        self.vision = vision
        self.generator = generator
        self.catalog = catalog
        self.cache = cache

    # --- shared stages -------------------------------------------------

    @staticmethod
    def _describe(annotation: ImageAnnotation) -> Tuple[List[str], str]:
        return list(annotation.labels), dominant_emotion(annotation.face)

    def _recommend(self, emotion: str, labels: List[str]) -> List[MusicRecommendation]:
        text = self.generator.recommend_songs(emotion, labels)
        candidates = extract_song_candidates(text)
        logger.info("Gemini suggested %s songs for mood '%s'", len(candidates), emotion)
        return self.catalog.resolve_candidates(candidates)

    # --- URL path (strict, cached) -------------------------------------

    def analyze_url(self, image_url: str) -> AnalysisResult:
        started = time.monotonic()
        try:
            if self.cache is not None:
                cached = self.cache.lookup(image_url)
                record_cache_lookup(cached is not None)
                if cached is not None:
                    record_analysis("url", "cache_hit")
                    return cached

            annotation = self.vision.annotate(image_url=image_url)
            labels, emotion = self._describe(annotation)
            # A Spotify token failure raises here too, so no song-less result is cached
            recommendations = self._recommend(emotion, labels)
            story = self.generator.write_story(emotion, labels)
        except UpstreamError as exc:
            record_upstream_failure(exc.service)
            record_analysis("url", "error", time.monotonic() - started)
            raise
        except Exception:
            record_analysis("url", "error", time.monotonic() - started)
            raise

        result = AnalysisResult(
            labels=tuple(labels),
            dominant_emotion=emotion,
            music_recommendations=tuple(recommendations),
            story=story,
        )
        if self.cache is not None:
            self.cache.store(image_url, result)
        record_analysis("url", "ok", time.monotonic() - started)
        return result

    # --- upload path (degrading, uncached) -----------------------------

    def _stage(self, name: str, call: Callable[[], T], default: T) -> Tuple[T, bool]:
        try:
            return call(), True
        except UpstreamError as exc:
            record_upstream_failure(exc.service)
            logger.warning("Something went wrong with %s: %s", name, exc, extra=vendor_fields(exc))
        except Exception as exc:
            logger.error("Unexpected error during %s: %s", name, exc, exc_info=True)
        return default, False

    def analyze_upload(self, content: bytes) -> AnalysisResult:
        started = time.monotonic()

        annotation, ok_vision = self._stage(
            "google vision", lambda: self.vision.annotate(content=content), ImageAnnotation()
        )
        labels, emotion = self._describe(annotation)
        recommendations, ok_songs = self._stage(
            "gemini recommendations", lambda: self._recommend(emotion, labels), []
        )
        story, ok_story = self._stage(
            "gemini story", lambda: self.generator.write_story(emotion, labels), ""
        )

        outcome = "ok" if (ok_vision and ok_songs and ok_story) else "degraded"
        record_analysis("upload", outcome, time.monotonic() - started)
        return AnalysisResult(
            labels=tuple(labels),
            dominant_emotion=emotion or NEUTRAL,
            music_recommendations=tuple(recommendations),
            story=story,
        )


__all__ = ["AnalysisPipeline"]
