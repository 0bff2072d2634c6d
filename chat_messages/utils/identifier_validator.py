"""Identifier and tag validation utilities."""
import re
from typing import Any, List

_IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.:\-]{0,127}$")


class IdentifierValidator:
    """Utility class for validating entity identifiers and tag lists."""

    @staticmethod
    def normalize(identifier: Any, name: str = "id") -> str:
        """
        Validate an identifier and return its string form.

        Accepts strings such as 24-char ObjectId hex or 32-char uuid hex,
        as well as other short opaque ids (letters, digits, ``_.:-``).

        Args:
            identifier: Identifier to validate
            name: Field name used in error messages

        Returns:
            The identifier with surrounding whitespace removed

        Raises:
            ValueError: If the identifier is missing or malformed
        """
        if identifier is None:
            raise ValueError(f"{name} is required")
        if not isinstance(identifier, str):
            raise ValueError(f"{name} must be a string, got {type(identifier).__name__}")

        cleaned = identifier.strip()
        if not cleaned:
            raise ValueError(f"{name} is required")
        if not _IDENTIFIER_PATTERN.match(cleaned):
            raise ValueError(f"Invalid {name} format: {identifier!r}")

        return cleaned

    @staticmethod
    def normalize_tags(tags: Any) -> List[str]:
        """
        Validate a sequence of tags.

        Order and duplicates are kept as given.

        Raises:
            ValueError: If tags is not a list/tuple or any tag is blank
        """
        if not isinstance(tags, (list, tuple)):
            raise ValueError("tags must be a list of strings")

        for tag in tags:
            if not isinstance(tag, str) or not tag.strip():
                raise ValueError(f"Invalid tag: {tag!r}")

        return list(tags)
