import os
import logging
from datetime import datetime
from uuid import uuid4

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# --- Flask specific imports ---
from flask import Flask, request, g
from flask_cors import CORS

from config import Config
from pinsound.database.db_manager import initialize_database
from pinsound.domain.analysis import AnalysisPipeline, SqlAnalysisCache
from pinsound.infrastructure import (
    CatalogService,
    GenerationClient,
    PinterestClient,
    SpotifyTokenProvider,
    VisionClient,
)
from pinsound.interfaces.http.routes import (
    analysis_bp,
    upload_bp,
    search_bp,
    pinterest_bp,
    health_bp,
)
from pinsound.observability import configure_structured_logging, metrics_blueprint
from pinsound.settings import load_app_settings


logger = logging.getLogger(__name__)


def configure_logging(log_dir: str) -> str:
    """
    Configure root logging with:
      - FileHandler (INFO+) to a new file per run: log-YYYY-MM-DD-HH-MM-SS
      - StreamHandler (WARNING+) to console when ENABLE_CONSOLE_LOGS is set
      - Werkzeug/Flask loggers routed to root

    Returns the path to the created log file.
    """
    os.makedirs(log_dir, exist_ok=True)

    timestamp = datetime.now().strftime("%Y-%m-%d-%H-%M-%S")
    log_path = os.path.join(log_dir, f"log-{timestamp}")

    root = logging.getLogger()
    root.setLevel(logging.INFO)

    # Preserve structured handlers; remove existing FileHandlers to avoid duplicates
    root.handlers = [h for h in root.handlers if not isinstance(h, logging.FileHandler)]

    formatter = logging.Formatter(
        fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    file_handler = logging.FileHandler(log_path, encoding='utf-8')
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(formatter)
    root.addHandler(file_handler)

    if Config.ENABLE_CONSOLE_LOGS:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.WARNING)
        console_handler.setFormatter(formatter)
        root.addHandler(console_handler)

    for name in ("werkzeug", "flask.app"):
        _l = logging.getLogger(name)
        _l.setLevel(logging.INFO)
        _l.handlers = []
        _l.propagate = True

    return log_path


def create_app(overrides=None):
    app = Flask(__name__, instance_relative_config=False)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)
    configure_structured_logging(app)

    @app.before_request
    def _assign_request_id():
        g.request_id = request.headers.get('X-Request-ID') or uuid4().hex

    @app.after_request
    def _inject_request_id(response):
        if getattr(g, 'request_id', None):
            response.headers.setdefault('X-Request-ID', g.request_id)
        return response

    settings = load_app_settings(app.config)
    app.extensions['app_settings'] = settings

    allowed_origins = sorted({
        origin.strip()
        for origin in settings.cors_allowed_origins
        if origin and origin.strip() and origin.strip() != "*"
    })
    CORS(app, origins=allowed_origins, supports_credentials=True)

    # Initialize database (analysis cache table)
    initialize_database(app)

    # Build vendor clients once; routes reach them through app.extensions
    timeout = settings.http_timeout
    token_provider = SpotifyTokenProvider(
        client_id=settings.spotify_client_id,
        client_secret=settings.spotify_client_secret,
        timeout=timeout,
    )
    catalog_service = CatalogService(token_provider, timeout=timeout)
    vision_client = VisionClient(api_key=settings.vision_api_key, timeout=timeout)
    generation_client = GenerationClient(api_key=settings.gemini_api_key, model=settings.gemini_model)
    pinterest_client = PinterestClient(
        client_id=settings.pinterest_client_id,
        client_secret=settings.pinterest_client_secret,
        redirect_uri=settings.pinterest_redirect_uri,
        timeout=timeout,
    )

    app.extensions['spotify_token_provider'] = token_provider
    app.extensions['catalog_service'] = catalog_service
    app.extensions['pinterest_client'] = pinterest_client
    app.extensions['analysis_pipeline'] = AnalysisPipeline(
        vision=vision_client,
        generator=generation_client,
        catalog=catalog_service,
        cache=SqlAnalysisCache(),
    )

    for vendor, configured in settings.configured_vendors().items():
        if not configured:
            app.logger.warning("%s credentials not set; related features will fail or degrade.", vendor)

    # --- Register Blueprints ---
    app.register_blueprint(analysis_bp)
    app.register_blueprint(upload_bp)
    app.register_blueprint(search_bp)
    app.register_blueprint(pinterest_bp)
    app.register_blueprint(health_bp)
    app.register_blueprint(metrics_blueprint)

    return app


if __name__ == '__main__':
    log_dir = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'log')
    if not Config.DEBUG or os.environ.get('WERKZEUG_RUN_MAIN') == 'true':
        log_file_path = configure_logging(log_dir)
        logger.info("File logging initialized at %s", log_file_path)

    app = create_app()
    app.logger.handlers = []
    app.logger.setLevel(logging.INFO)
    app.logger.propagate = True
    logger.info("Starting Flask application on port %s...", Config.PORT)
    app.run(debug=Config.DEBUG, host='0.0.0.0', port=Config.PORT, threaded=True)
