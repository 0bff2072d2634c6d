"""HTTP API blueprints."""
from chat_messages.api.messages import messages_blueprint

__all__ = ["messages_blueprint"]
