"""Domain errors raised by the message store."""


class MessageStoreError(Exception):
    """Base class for all message store errors."""


class ValidationError(MessageStoreError):
    """Raised when input is missing or malformed. Storage is never touched."""


class MessageDeletedError(ValidationError):
    """Raised when a mutation targets a soft-deleted message."""

    def __init__(self, message_id: str):
        super().__init__(f"Message {message_id} is deleted")
        self.message_id = message_id


class NotFoundError(MessageStoreError):
    """Raised when no message matches the given id."""

    def __init__(self, message_id: str):
        super().__init__(f"Message {message_id} not found")
        self.message_id = message_id


class PersistenceError(MessageStoreError):
    """Raised when the underlying storage operation fails."""
