# infrastructure/gemini.py
import logging
import threading
from typing import Any, Callable, Optional, Sequence

from google import genai
from google.genai import errors as genai_errors

from pinsound.errors import ConfigurationError, UpstreamError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"


def _context(emotion: str, labels: Sequence[str]) -> str:
    return f"Detected emotion: {emotion}. Context labels: {', '.join(labels)}."


def build_recommendation_prompt(emotion: str, labels: Sequence[str]) -> str:
    return f"{_context(emotion, labels)} Recommend songs matching this mood as **Song - Artist**."


def build_story_prompt(emotion: str, labels: Sequence[str]) -> str:
    return f"{_context(emotion, labels)} Write a short story that reflects this mood and setting."


class GenerationClient:
    """Thin wrapper over the google-genai SDK returning plain text."""

    def __init__(
        self,
        api_key: Optional[str],
        model: str = DEFAULT_MODEL,
        client_factory: Optional[Callable[[str], Any]] = None,
    ):
        self._api_key = api_key
        self.model = model or DEFAULT_MODEL
        self._client_factory = client_factory or (lambda key: genai.Client(api_key=key))
        self._client = None
        self._client_lock = threading.Lock()

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    def _get_client(self):
        if not self.configured:
            raise ConfigurationError("gemini", "GEMINI_API_KEY is not set")
        with self._client_lock:
            if self._client is None:
                self._client = self._client_factory(self._api_key)
                logger.info("Gemini client initialized for model %s.", self.model)
            return self._client

    def generate(self, prompt: str) -> str:
        client = self._get_client()
        try:
            response = client.models.generate_content(model=self.model, contents=prompt)
        except genai_errors.APIError as exc:
            raise UpstreamError(
                "gemini",
                exc.message or str(exc),
                detail=exc.details or exc.message,
                status_code=exc.code,
            ) from exc
        except Exception as exc:
            raise UpstreamError("gemini", f"generate_content failed: {exc}") from exc
        return getattr(response, "text", None) or ""

    def recommend_songs(self, emotion: str, labels: Sequence[str]) -> str:
        return self.generate(build_recommendation_prompt(emotion, labels))

    def write_story(self, emotion: str, labels: Sequence[str]) -> str:
        return self.generate(build_story_prompt(emotion, labels))


__all__ = ["GenerationClient", "build_recommendation_prompt", "build_story_prompt", "DEFAULT_MODEL"]
