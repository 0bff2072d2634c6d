"""Monitoring and metrics middleware using Prometheus."""
import logging
import time
from typing import Callable
from flask import request
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST

from chat_messages.middleware.error_handler import status_for

logger = logging.getLogger(__name__)

# Prometheus metrics
api_requests_total = Counter(
    'chat_messages_api_requests_total',
    'Total number of message API requests',
    ['method', 'endpoint', 'status']
)

api_request_duration = Histogram(
    'chat_messages_api_request_duration_seconds',
    'Time spent processing message API requests',
    ['endpoint'],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5]
)


def register_metrics_middleware(app) -> None:
    """
    Register Prometheus metrics endpoint.

    Args:
        app: Flask application instance
    """
    if not app.config.get("ENABLE_METRICS"):
        return

    @app.route('/metrics')
    def metrics():
        """Prometheus metrics endpoint."""
        return generate_latest(), 200, {'Content-Type': CONTENT_TYPE_LATEST}

    logger.info("Prometheus metrics enabled at /metrics")


def track_request(endpoint: str):
    """
    Decorator to track API request metrics.

    Args:
        endpoint: Endpoint name for metrics
    """
    def decorator(f: Callable) -> Callable:
        def wrapper(*args, **kwargs):
            start_time = time.time()
            status_code = 500

            try:
                response = f(*args, **kwargs)
                status_code = response[1] if isinstance(response, tuple) else 200
                return response
            except Exception as e:
                status_code = status_for(e)
                raise
            finally:
                api_requests_total.labels(
                    method=request.method,
                    endpoint=endpoint,
                    status=status_code
                ).inc()
                api_request_duration.labels(endpoint=endpoint).observe(time.time() - start_time)

        wrapper.__name__ = f.__name__
        return wrapper
    return decorator
