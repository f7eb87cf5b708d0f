from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from pinsound.database.db_manager import db, AnalysisCacheEntry
from .models import AnalysisResult


logger = logging.getLogger(__name__)


class AnalysisCache:
    """Interface for the image-URL keyed analysis cache."""

    def lookup(self, image_url: str) -> Optional[AnalysisResult]:  # pragma: no cover - interface
        raise NotImplementedError

    def store(self, image_url: str, result: AnalysisResult) -> None:  # pragma: no cover - interface
        raise NotImplementedError


class SqlAnalysisCache(AnalysisCache):
    """Cache backed by the ``analysis_cache`` table. Needs an app context."""

    def lookup(self, image_url: str) -> Optional[AnalysisResult]:
        entry = AnalysisCacheEntry.query.filter_by(image_url=image_url).first()
        if entry is None:
            return None
        logger.info("Image found in cache: %s", image_url)
        return AnalysisResult.from_dict(entry.image_data or {})

    def store(self, image_url: str, result: AnalysisResult) -> None:
        try:
            db.session.add(AnalysisCacheEntry(image_url=image_url, image_data=result.to_dict()))
            db.session.commit()
            logger.info("Added new image to cache: %s", image_url)
        except IntegrityError:
            # Another request cached this URL first; its entry stays.
            db.session.rollback()
            logger.info("Image already cached by a concurrent request: %s", image_url)
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error("Failed to cache analysis for %s: %s", image_url, e, exc_info=True)


__all__ = ["AnalysisCache", "SqlAnalysisCache"]
