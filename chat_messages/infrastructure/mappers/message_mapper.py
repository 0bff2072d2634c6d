"""Translation between the Message entity and its storage/output shapes."""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from chat_messages.domain.entities.message import Message, Reaction


class MessageMapper:
    """
    Maps messages to and from storage documents.

    Documents use camelCase keys and ISO-8601 timestamps. Derived fields
    (``likesCount``) and enrichment (``conversation``, ``sender``) never
    reach storage; they only appear in the output representation.
    """

    @staticmethod
    def format_timestamp(value: Optional[datetime]) -> Optional[str]:
        return value.isoformat() if value else None

    @staticmethod
    def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
        return datetime.fromisoformat(value) if value else None

    @staticmethod
    def reaction_to_document(reaction: Reaction) -> Dict[str, str]:
        return {"userId": reaction.user_id, "reaction": reaction.reaction}

    @staticmethod
    def reaction_from_document(document: Dict[str, Any]) -> Reaction:
        return Reaction(user_id=document["userId"], reaction=document["reaction"])

    @classmethod
    def new_document(
        cls,
        conversation_id: str,
        sender_id: str,
        text: str,
        tags: List[str],
        created_at: Optional[datetime] = None
    ) -> Dict[str, Any]:
        """Build the document for a freshly created message with all defaults applied."""
        created_at = created_at or datetime.now(timezone.utc)
        return cls.to_document(Message(
            id="",
            conversation_id=conversation_id,
            sender_id=sender_id,
            text=text,
            tags=list(tags),
            created_at=created_at,
            updated_at=created_at,
        ))

    @classmethod
    def to_document(cls, message: Message) -> Dict[str, Any]:
        """Storage document for a message. The id is owned by the collection."""
        return {
            "conversationId": message.conversation_id,
            "senderId": message.sender_id,
            "text": message.text,
            "tags": list(message.tags),
            "likes": list(message.likes),
            "reactions": [cls.reaction_to_document(r) for r in message.reactions],
            "resolved": message.resolved,
            "deleted": message.deleted,
            "createdAt": cls.format_timestamp(message.created_at),
            "updatedAt": cls.format_timestamp(message.updated_at),
        }

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> Message:
        return Message(
            id=document["id"],
            conversation_id=document["conversationId"],
            sender_id=document["senderId"],
            text=document["text"],
            tags=list(document.get("tags") or []),
            likes=list(document.get("likes") or []),
            reactions=[cls.reaction_from_document(r) for r in document.get("reactions") or []],
            resolved=bool(document.get("resolved", False)),
            deleted=bool(document.get("deleted", False)),
            created_at=cls.parse_timestamp(document.get("createdAt")),
            updated_at=cls.parse_timestamp(document.get("updatedAt")),
        )

    @classmethod
    def to_output(cls, message: Message) -> Dict[str, Any]:
        """
        JSON-ready representation returned to API callers.

        ``conversation`` and ``sender`` are only present on enriched
        messages; list queries leave them out.
        """
        output = cls.to_document(message)
        output["id"] = message.id
        output["likesCount"] = message.likes_count
        if message.conversation is not None:
            output["conversation"] = message.conversation
        if message.sender is not None:
            output["sender"] = message.sender
        return output
