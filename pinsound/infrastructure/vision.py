# infrastructure/vision.py
import base64
import logging
from typing import Any, Dict, Optional

import requests

from pinsound.domain.analysis.models import ImageAnnotation
from pinsound.errors import ConfigurationError, UpstreamError

logger = logging.getLogger(__name__)

VISION_ANNOTATE_URL = "https://vision.googleapis.com/v1/images:annotate"

MAX_LABELS = 5
MAX_FACES = 1


class VisionClient:
    """Google Cloud Vision label + face detection over the REST API."""

    def __init__(self, api_key: Optional[str], session: Optional[requests.Session] = None, timeout: float = 30.0):
        self._api_key = api_key
        self._session = session or requests.Session()
        self._timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    @staticmethod
    def build_request(image_url: Optional[str] = None, content: Optional[bytes] = None) -> Dict[str, Any]:
        if image_url:
            image: Dict[str, Any] = {"source": {"imageUri": image_url}}
        elif content:
            image = {"content": base64.b64encode(content).decode("ascii")}
        else:
            raise ValueError("either image_url or content is required")
        return {
            "requests": [
                {
                    "image": image,
                    "features": [
                        {"type": "LABEL_DETECTION", "maxResults": MAX_LABELS},
                        {"type": "FACE_DETECTION", "maxResults": MAX_FACES},
                    ],
                }
            ]
        }

    def annotate(self, image_url: Optional[str] = None, content: Optional[bytes] = None) -> ImageAnnotation:
        """Annotate an image given by URL or raw bytes."""
        if not self.configured:
            raise ConfigurationError("vision", "GOOGLE_VISION_API_KEY is not set")

        body = self.build_request(image_url=image_url, content=content)
        logger.info("Requesting Vision annotation for %s", image_url or f"<{len(content or b'')} uploaded bytes>")
        try:
            response = self._session.post(
                VISION_ANNOTATE_URL,
                params={"key": self._api_key},
                json=body,
                timeout=self._timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except requests.HTTPError as exc:
            detail = None
            if exc.response is not None:
                try:
                    detail = exc.response.json()
                except ValueError:
                    detail = exc.response.text or None
            raise UpstreamError(
                "vision",
                "annotate request failed",
                detail=detail,
                status_code=exc.response.status_code if exc.response is not None else None,
            ) from exc
        except requests.RequestException as exc:
            raise UpstreamError("vision", f"annotate request failed: {exc}") from exc
        except ValueError as exc:
            raise UpstreamError("vision", f"invalid JSON from vision API: {exc}") from exc

        return self.parse_response(payload)

    @staticmethod
    def parse_response(payload: Dict[str, Any]) -> ImageAnnotation:
        responses = (payload or {}).get("responses") or []
        if not responses:
            return ImageAnnotation()
        first = responses[0] or {}
        # Per-image failures come back with HTTP 200 and an "error" object
        if first.get("error"):
            error = first["error"]
            raise UpstreamError("vision", error.get("message") or "image annotation failed", detail=error)

        labels = tuple(
            label.get("description")
            for label in (first.get("labelAnnotations") or [])
            if label.get("description")
        )
        faces = first.get("faceAnnotations") or []
        return ImageAnnotation(labels=labels, face=faces[0] if faces else None)


__all__ = ["VisionClient", "VISION_ANNOTATE_URL"]
