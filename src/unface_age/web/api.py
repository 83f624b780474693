"""REST API endpoints for Unface age detection"""
import logging

from flask import Blueprint, request, jsonify, current_app
from werkzeug.exceptions import HTTPException

from ..moderation.age_classifier import (
    AgeRangeUnavailableError,
    InvalidImageError,
    NoFaceDetectedError,
)
from .utils import decode_image_payload

logger = logging.getLogger(__name__)


api_bp = Blueprint('api', __name__, url_prefix='/api')


@api_bp.route('/detect-age', methods=['POST'])
def detect_age():
    """Classify the primary face of an image as adult or minor.

    Request (application/json):
        image (str): Base64 image, optionally prefixed with
            ``data:image/<subtype>;base64,`` (required)

    Returns:
        200: {ageRange: {low, high}, estimatedAge, isAdult, confidence}
        400: Image missing or not decodable
        404: No face detected
        500: Age range not available, or the provider call failed
    """
    try:
        data = request.get_json(silent=True)
        image = data.get('image') if isinstance(data, dict) else None

        if not image or not isinstance(image, str):
            return jsonify({'error': 'Image is required'}), 400

        try:
            image_bytes = decode_image_payload(image)
        except InvalidImageError as e:
            logger.warning(f"Rejected image payload: {e}")
            return jsonify({'error': 'Invalid image data'}), 400

        classifier = current_app.age_classifier
        decision = classifier.classify(image_bytes)

        return jsonify(decision.to_dict())

    except NoFaceDetectedError:
        return jsonify({'error': 'No face detected in image'}), 404
    except AgeRangeUnavailableError:
        logger.warning("Provider returned a face without an age range")
        return jsonify({'error': 'Age range not available'}), 500
    except HTTPException:
        # Oversized bodies and similar are answered by the app error handlers
        raise
    except Exception as e:
        logger.error(f"Age detection failed: {e}", exc_info=True)
        return jsonify({
            'error': 'Failed to detect age',
            'details': str(e) or 'Unknown error'
        }), 500
