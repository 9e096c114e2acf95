"""
Persisted collection document.

The storage slot holds a JSON array of full card records using the
camelCase attribute names of the Card model.
"""

import json

from localwallet.models.card import Card


class CorruptDocumentError(Exception):
    """Raised when a stored document cannot be decoded into cards."""

    pass


def dump_collection(cards: list[Card]) -> str:
    """Serialize the whole collection."""
    return json.dumps([card.to_record() for card in cards], ensure_ascii=False)


def load_collection(text: str | None) -> list[Card]:
    """
    Decode a stored document.

    Args:
        text: Slot contents. None or blank means an empty collection.

    Returns:
        Cards in storage order (unsorted).

    Raises:
        CorruptDocumentError: If the document or any record is malformed
    """
    if text is None or not text.strip():
        return []

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise CorruptDocumentError(f"Stored collection is not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise CorruptDocumentError("Stored collection is not a JSON array")

    try:
        return [Card.from_record(record) for record in data]
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise CorruptDocumentError(f"Stored collection has a malformed record: {e}") from e
