# database/db_manager.py
from flask_sqlalchemy import SQLAlchemy
import os  # Import os for path handling
import logging
from datetime import datetime, timezone
from sqlalchemy.engine import make_url

# Initialize the SQLAlchemy object
db = SQLAlchemy()
logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class AnalysisCacheEntry(db.Model):
    """One analysed image. Written once, never updated or expired."""

    __tablename__ = 'analysis_cache'

    id = db.Column(db.Integer, primary_key=True)
    image_url = db.Column(db.String(2048), unique=True, nullable=False, index=True)
    image_data = db.Column(db.JSON, nullable=False)  # AnalysisResult.to_dict()
    created_at = db.Column(db.DateTime, default=_utcnow, nullable=False)

    def __repr__(self):
        return f'<AnalysisCacheEntry {self.image_url}>'

    def to_dict(self):
        return {
            'id': self.id,
            'image_url': self.image_url,
            'image_data': self.image_data,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }


def initialize_database(app):
    """
    Initializes the SQLAlchemy extension with the Flask app instance
    and creates all database tables if they don't already exist.
    """
    db.init_app(app)

    # Ensure the directory for the configured SQLite file exists
    try:
        uri = app.config.get('SQLALCHEMY_DATABASE_URI')
        if uri:
            url = make_url(uri)
            # Only handle file-based SQLite (not :memory:)
            if url.get_backend_name() == 'sqlite' and url.database and url.database != ':memory:':
                db_dir = os.path.dirname(url.database)
                if db_dir and not os.path.exists(db_dir):
                    os.makedirs(db_dir, exist_ok=True)
                    logger.info("Created SQLite DB directory: %s", db_dir)
    except Exception as e:
        # Don't block app startup on path parsing issues; log and continue
        logger.warning("Could not ensure SQLite directory exists: %s", e)

    # Create database tables within the application context
    with app.app_context():
        db.create_all()
        logger.info("Database tables created or already exist.")
