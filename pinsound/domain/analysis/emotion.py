"""Dominant emotion from a Vision face annotation."""

from __future__ import annotations

from typing import Any, Mapping, Optional

NEUTRAL = "neutral"

LIKELIHOOD_SCORES = {
    "VERY_UNLIKELY": 0,
    "UNLIKELY": 1,
    "POSSIBLE": 2,
    "LIKELY": 3,
    "VERY_LIKELY": 4,
}

# Order matters: ties go to the earliest entry.
EMOTION_FIELDS = (
    ("joy", "joyLikelihood"),
    ("sorrow", "sorrowLikelihood"),
    ("anger", "angerLikelihood"),
    ("surprise", "surpriseLikelihood"),
)

EMOTIONS = tuple(name for name, _ in EMOTION_FIELDS) + (NEUTRAL,)


def likelihood_score(likelihood: Any) -> int:
    """Map a Vision likelihood label to 0..4; unknown or missing labels score 0."""
    if not isinstance(likelihood, str):
        return 0
    return LIKELIHOOD_SCORES.get(likelihood.strip().upper(), 0)


def dominant_emotion(face: Optional[Mapping[str, Any]]) -> str:
    if not face:
        return NEUTRAL

    best_name, best_score = NEUTRAL, 0
    for name, field in EMOTION_FIELDS:
        score = likelihood_score(face.get(field))
        if score > best_score:
            best_name, best_score = name, score
    # A winning score of 0 means every emotion was VERY_UNLIKELY (or absent)
    return best_name if best_score > 0 else NEUTRAL


__all__ = ["NEUTRAL", "EMOTIONS", "LIKELIHOOD_SCORES", "likelihood_score", "dominant_emotion"]
