"""Error handling middleware with Sentry integration."""
import logging
from flask import jsonify
from werkzeug.exceptions import HTTPException

from chat_messages.config.settings import Config
from chat_messages.domain.errors import (
    MessageDeletedError,
    MessageStoreError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Most specific classes first
_STATUS_BY_ERROR = (
    (MessageDeletedError, 409),
    (ValidationError, 400),
    (NotFoundError, 404),
    (PersistenceError, 503),
)


def status_for(error: Exception) -> int:
    """HTTP status code for an exception raised while handling a request."""
    for error_class, status in _STATUS_BY_ERROR:
        if isinstance(error, error_class):
            return status
    if isinstance(error, HTTPException) and error.code:
        return error.code
    return 500


def init_error_handlers(app) -> None:
    """
    Initialize error handlers for the application.

    Args:
        app: Flask application instance
    """
    # Initialize Sentry if DSN is provided
    if app.config.get("SENTRY_DSN"):
        try:
            import sentry_sdk
            from sentry_sdk.integrations.flask import FlaskIntegration

            sentry_sdk.init(
                dsn=app.config["SENTRY_DSN"],
                integrations=[FlaskIntegration()],
                traces_sample_rate=0.1,
                environment="development" if app.config.get("DEBUG", Config.DEBUG) else "production",
            )
            logger.info("Sentry error tracking initialized")
        except ImportError:
            logger.warning("Sentry SDK not installed, skipping Sentry initialization")

    @app.errorhandler(MessageStoreError)
    def message_store_error(error):
        """Handle domain errors raised by the message store."""
        status = status_for(error)
        if status >= 500:
            logger.error(f"Storage failure: {error}")
        return jsonify({"status": "error", "message": str(error)}), status

    @app.errorhandler(404)
    def not_found(error):
        """Handle 404 errors."""
        return jsonify({"status": "error", "message": "Resource not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        """Handle 405 errors."""
        return jsonify({"status": "error", "message": "Method not allowed"}), 405

    @app.errorhandler(500)
    def internal_error(error):
        """Handle 500 errors."""
        logger.error(f"Internal server error: {error}", exc_info=True)
        return jsonify({"status": "error", "message": "Internal server error"}), 500
