import logging
from flask import Blueprint, current_app, jsonify, request
from werkzeug.utils import secure_filename

logger = logging.getLogger(__name__)

upload_bp = Blueprint('upload_bp', __name__)


@upload_bp.route('/upload', methods=['POST'])
@upload_bp.route('/upload/userfile', methods=['POST'])
def upload_image():
    """Analyse an uploaded image. Vendor failures degrade fields, not the response."""
    image = request.files.get('image')
    if image is None:
        return jsonify({"message": "Image file is required"}), 400

    content = image.read()
    if not content:
        return jsonify({"message": "Image file is empty"}), 400

    filename = secure_filename(image.filename or '') or 'upload'
    logger.info("Analyzing uploaded image %s (%s bytes)", filename, len(content))
    result = current_app.extensions['analysis_pipeline'].analyze_upload(content)
    return jsonify(result.to_dict())
