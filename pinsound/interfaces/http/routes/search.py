import logging
from flask import Blueprint, current_app, jsonify, request

from pinsound.errors import UpstreamError
from pinsound.observability.logging import vendor_fields

logger = logging.getLogger(__name__)

search_bp = Blueprint('search_bp', __name__)


@search_bp.route('/search', methods=['GET'])
@search_bp.route('/auth/spotify/search', methods=['GET'])
def search_spotify():
    query = (request.args.get('query') or '').strip()
    if not query:
        return jsonify({"message": "Missing query parameter"}), 400

    catalog = current_app.extensions['catalog_service']
    try:
        track = catalog.search_track(query)
    except UpstreamError as e:
        logger.error("Spotify Search Error: %s", e, extra=vendor_fields(e))
        return jsonify({"message": "Failed to search Spotify", "error": e.payload}), 500

    if track is None:
        return jsonify({"message": "No track found", "error": query}), 404
    return jsonify(track.to_dict())
