"""Route blueprints exposed via Flask."""

from .analyze import analysis_bp
from .upload import upload_bp
from .search import search_bp
from .pinterest import pinterest_bp
from .health import health_bp

__all__ = [
    "analysis_bp",
    "upload_bp",
    "search_bp",
    "pinterest_bp",
    "health_bp",
]
