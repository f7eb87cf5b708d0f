# domain/analysis/models.py

from __future__ import annotations

import dataclasses
from typing import Any, Dict, List, Mapping, Optional, Tuple


@dataclasses.dataclass(frozen=True)
class SongCandidate:
    """A "Song - Artist" pair pulled out of generated text."""
    song: str
    artist: str

    @property
    def query(self) -> str:
        return f"{self.song} {self.artist}"


@dataclasses.dataclass(frozen=True)
class MusicRecommendation:
    song: str
    artist: str
    spotify_url: str

    def to_dict(self) -> Dict[str, str]:
        return {"song": self.song, "artist": self.artist, "spotifyUrl": self.spotify_url}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MusicRecommendation":
        return cls(
            song=data.get("song", ""),
            artist=data.get("artist", ""),
            spotify_url=data.get("spotifyUrl") or data.get("url") or "",
        )


@dataclasses.dataclass(frozen=True)
class ImageAnnotation:
    """Labels and the first detected face returned by the vision API."""
    labels: Tuple[str, ...] = ()
    face: Optional[Dict[str, Any]] = None


@dataclasses.dataclass(frozen=True)
class AnalysisResult:
    """
    Composite analysis of one image. Serialised verbatim into the cache and
    into the HTTP response.
    """
    labels: Tuple[str, ...]
    dominant_emotion: str
    music_recommendations: Tuple[MusicRecommendation, ...]
    story: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "labels": list(self.labels),
            "dominantEmotion": self.dominant_emotion,
            "musicRecommendations": [rec.to_dict() for rec in self.music_recommendations],
            "story": self.story,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AnalysisResult":
        recommendations: List[MusicRecommendation] = [
            MusicRecommendation.from_dict(item)
            for item in (data.get("musicRecommendations") or [])
        ]
        return cls(
            labels=tuple(data.get("labels") or ()),
            dominant_emotion=data.get("dominantEmotion") or "neutral",
            music_recommendations=tuple(recommendations),
            story=data.get("story") or "",
        )


__all__ = ["SongCandidate", "MusicRecommendation", "ImageAnnotation", "AnalysisResult"]
