"""Web application for Unface age detection"""

import logging

from flask import Flask, request, jsonify
from flask_cors import CORS

from ..utils.config_loader import load_config, load_config_with_defaults
from ..moderation.age_classifier import AgeClassifier
from ..moderation.face_detector import RekognitionFaceDetector
from .api import api_bp

logger = logging.getLogger(__name__)

SERVICE_NAME = 'unface-age-detection'


def create_app(config_path=None, config=None, app_config=None, face_detector=None):
    """Create and configure Flask application

    Args:
        config_path: Optional YAML/JSON service configuration file
        config: Flask config overrides (e.g. ``{'TESTING': True}``)
        app_config: Already loaded service configuration; loaded from
            defaults, ``config_path`` and the environment when omitted
        face_detector: Shared face detector; a Rekognition detector is built
            from the ``aws`` section when omitted

    Returns:
        Configured Flask application

    Raises:
        ConfigurationError: If the service configuration is invalid
    """
    app = Flask(__name__)

    if config:
        app.config.update(config)

    if app_config is None:
        if app.config.get('TESTING'):
            app_config = load_config_with_defaults()
        else:
            app_config = load_config(config_path)

    web_config = app_config.get('web', {})
    app.config['MAX_CONTENT_LENGTH'] = web_config.get('max_content_length', 10 * 1024 * 1024)
    app.json.sort_keys = False

    allowed_origins = web_config.get('cors_origins', '*')
    if isinstance(allowed_origins, str) and allowed_origins != '*':
        allowed_origins = [origin.strip() for origin in allowed_origins.split(',') if origin.strip()]
    CORS(app, origins=allowed_origins)

    if face_detector is None:
        logger.info("Initializing Rekognition face detector...")
        face_detector = RekognitionFaceDetector.from_config(app_config.get('aws', {}))

    # One detector/classifier pair per process, shared read-only by all requests
    app.app_config = app_config
    app.face_detector = face_detector
    app.age_classifier = AgeClassifier(face_detector)

    app.register_blueprint(api_bp)

    @app.before_request
    def log_request():
        """Log incoming requests."""
        logger.debug(
            "Incoming request",
            extra={
                "method": request.method,
                "path": request.path,
                "remote_addr": request.remote_addr,
                "user_agent": request.user_agent.string
            }
        )

    @app.after_request
    def log_response(response):
        """Log outgoing responses."""
        logger.debug(
            "Outgoing response",
            extra={
                "method": request.method,
                "path": request.path,
                "status": response.status_code,
                "content_length": response.content_length
            }
        )
        return response

    @app.route('/health')
    def health_check():
        """Health check endpoint, no dependency checks"""
        return jsonify({'status': 'ok', 'service': SERVICE_NAME})

    @app.errorhandler(404)
    def not_found(error):
        """Handle not found error"""
        return jsonify({'error': 'Not found'}), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        """Handle method not allowed error"""
        return jsonify({'error': 'Method not allowed'}), 405

    @app.errorhandler(413)
    def request_entity_too_large(error):
        """Handle body too large error"""
        limit_mb = app.config['MAX_CONTENT_LENGTH'] / (1024 * 1024)
        return jsonify({'error': f'Request body too large. Maximum size is {limit_mb:g}MB'}), 413

    @app.errorhandler(500)
    def internal_error(error):
        """Handle internal server error"""
        logger.error(f"Internal server error: {str(error)}")
        return jsonify({'error': 'Internal server error'}), 500

    return app


def run_server(app, host='0.0.0.0', port=3001, debug=False):
    """Run the Flask server, one thread per in-flight request"""
    logger.info(f"Starting Unface age detection server on {host}:{port}")
    app.run(host=host, port=port, debug=debug, threaded=True)
