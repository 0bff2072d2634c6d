"""Filter matching and patch application shared by document collections."""
import copy
from typing import Any, Dict, Optional

SUPPORTED_OPERATORS = ("$set", "$push", "$addToSet", "$pull")


def _value_matches(stored: Any, expected: Any) -> bool:
    if isinstance(stored, list):
        return expected in stored
    return stored == expected


def matches(document: Dict[str, Any], filters: Optional[Dict[str, Any]]) -> bool:
    """
    Check whether a document satisfies every filter.

    Args:
        document: Stored document
        filters: Mapping of field to a literal or ``{"$in": [...]}``

    Returns:
        True if all filters match

    Raises:
        ValueError: If a filter uses an unsupported operator
    """
    for field_name, condition in (filters or {}).items():
        stored = document.get(field_name)
        if isinstance(condition, dict):
            if set(condition) != {"$in"}:
                raise ValueError(f"Unsupported filter for {field_name}: {condition}")
            if not any(_value_matches(stored, value) for value in condition["$in"]):
                return False
        elif not _value_matches(stored, condition):
            return False
    return True


def filter_values(condition: Any) -> list:
    """Return the values a filter condition accepts."""
    if isinstance(condition, dict):
        return list(condition.get("$in", []))
    return [condition]


def apply_patch(document: Dict[str, Any], patch: Dict[str, Dict[str, Any]]) -> Dict[str, Any]:
    """
    Apply update operators to a copy of a document.

    Args:
        document: Current document (left untouched)
        patch: Mapping of operator to ``{field: value}``

    Returns:
        Updated copy of the document

    Raises:
        ValueError: On unknown operators, id changes or non-list operands
    """
    updated = copy.deepcopy(document)

    for operator, fields in patch.items():
        if operator not in SUPPORTED_OPERATORS:
            raise ValueError(f"Unsupported update operator: {operator}")

        for field_name, value in fields.items():
            if field_name == "id":
                raise ValueError("Document id is immutable")

            if operator == "$set":
                updated[field_name] = copy.deepcopy(value)
                continue

            if not isinstance(value, list):
                raise ValueError(f"{operator} on {field_name} expects a list of values")

            current = updated.get(field_name) or []
            if operator == "$push":
                current = current + copy.deepcopy(value)
            elif operator == "$addToSet":
                current = list(current)
                for item in value:
                    if item not in current:
                        current.append(copy.deepcopy(item))
            else:
                current = [item for item in current if item not in value]
            updated[field_name] = current

    return updated
