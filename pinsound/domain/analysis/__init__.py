"""Image analysis domain: emotion, song extraction, caching and orchestration."""

from .models import AnalysisResult, ImageAnnotation, MusicRecommendation, SongCandidate
from .emotion import dominant_emotion, likelihood_score
from .songs import extract_song_candidates
from .cache import AnalysisCache, SqlAnalysisCache
from .pipeline import AnalysisPipeline

__all__ = [
    "AnalysisResult",
    "ImageAnnotation",
    "MusicRecommendation",
    "SongCandidate",
    "dominant_emotion",
    "likelihood_score",
    "extract_song_candidates",
    "AnalysisCache",
    "SqlAnalysisCache",
    "AnalysisPipeline",
]
