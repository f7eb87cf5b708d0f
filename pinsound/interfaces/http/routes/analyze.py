import logging
from flask import Blueprint, current_app, jsonify, request

from pinsound.errors import UpstreamError
from pinsound.observability.logging import vendor_fields

logger = logging.getLogger(__name__)

analysis_bp = Blueprint('analysis_bp', __name__)


def get_analysis_pipeline():
    return current_app.extensions['analysis_pipeline']


def _read_image_request():
    if request.method == 'POST':
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            data = {}
        image_url = data.get('imageUrl') or request.args.get('imageUrl')
        user_id = data.get('userId')
    else:
        image_url = request.args.get('imageUrl')
        user_id = request.args.get('userId')
    if isinstance(image_url, str):
        image_url = image_url.strip()
    return image_url, user_id


@analysis_bp.route('/analyze', methods=['GET', 'POST'])
@analysis_bp.route('/auth/pinterest/analyze-pin', methods=['POST'])
def analyze_pin():
    image_url, user_id = _read_image_request()
    if not image_url or not isinstance(image_url, str):
        return jsonify({"message": "Image URL is required"}), 400

    logger.info("Analyzing pin image %s (user=%s)", image_url, user_id)
    try:
        result = get_analysis_pipeline().analyze_url(image_url)
    except UpstreamError as e:
        logger.error("Error analyzing pin: %s", e, extra=vendor_fields(e))
        return jsonify({"message": "Failed to analyze pin", "error": e.payload}), 500
    except Exception as e:
        logger.error("Error analyzing pin %s: %s", image_url, e, exc_info=True)
        return jsonify({"message": "Failed to analyze pin", "error": str(e)}), 500
    return jsonify(result.to_dict())
