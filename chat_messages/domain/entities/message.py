"""Message domain entity."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Reaction:
    """A single user's reaction to a message."""

    user_id: str
    reaction: str


@dataclass
class CreateMessageInput:
    """Payload for creating a message. The sender comes from the caller's context."""

    conversation_id: str
    text: str
    tags: Optional[List[str]] = None


@dataclass
class Message:
    """
    Domain entity representing a chat message.

    `conversation` and `sender` are resolved references attached at read
    time. They are never persisted.
    """

    id: str
    conversation_id: str
    sender_id: str
    text: str
    tags: List[str] = field(default_factory=list)
    likes: List[str] = field(default_factory=list)
    reactions: List[Reaction] = field(default_factory=list)
    resolved: bool = False
    deleted: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    conversation: Optional[Dict[str, Any]] = None
    sender: Optional[Dict[str, Any]] = None

    @property
    def likes_count(self) -> int:
        """Number of users who liked the message."""
        return len(self.likes)
