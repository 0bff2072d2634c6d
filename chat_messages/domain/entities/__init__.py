"""Domain entities - core business objects."""
from chat_messages.domain.entities.message import CreateMessageInput, Message, Reaction

__all__ = [
    "CreateMessageInput",
    "Message",
    "Reaction",
]
