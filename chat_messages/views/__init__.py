"""Views module - exports all blueprints."""
from chat_messages.views.health import health_blueprint

__all__ = ["health_blueprint"]
