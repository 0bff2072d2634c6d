"""Flask application factory for the chat message service."""
import logging
import sys
from typing import Optional

from flask import Flask, jsonify

from chat_messages.config.settings import get_config
from chat_messages.infrastructure.service_container import ServiceContainer
from chat_messages.middleware.monitoring import register_metrics_middleware
from chat_messages.middleware.error_handler import init_error_handlers
from chat_messages.api import messages_blueprint
from chat_messages.views.health import health_blueprint


def create_app(config_class=None, service_container: Optional[ServiceContainer] = None) -> Flask:
    """
    Create and configure Flask application with dependency injection.

    Args:
        config_class: Optional configuration class (for testing)
        service_container: Optional pre-built container (for testing)

    Returns:
        Configured Flask application
    """
    _logger = logging.getLogger(__name__)

    config = config_class or get_config()

    # Configure logging FIRST (needed for all subsequent operations)
    _configure_logging(config.DEBUG)

    try:
        app = Flask(__name__)
        app.config.from_object(config)

        try:
            config.validate()
        except ValueError as e:
            _logger.warning(f"Configuration validation warning: {e}")

        app.register_blueprint(messages_blueprint)
        app.register_blueprint(health_blueprint)

        @app.route("/", methods=["GET"])
        def root():
            """Root endpoint for testing."""
            return jsonify({
                "status": "ok",
                "service": "chat-messages",
                "message": "Service is running"
            }), 200

        register_metrics_middleware(app)
        init_error_handlers(app)

        # Services are built lazily on first use
        app.config["service_container"] = service_container or ServiceContainer(config)

        _logger.info(f"Application ready - storage backend: {config.DOCUMENT_STORAGE_TYPE}")
    except Exception as e:
        _logger.critical(f"Failed to create Flask application: {e}", exc_info=True)
        raise

    return app


def _configure_logging(debug: bool) -> None:
    """Configure application logging."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stdout,
        force=True
    )
