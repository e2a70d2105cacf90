"""JSON backup and restore of the whole collection."""

import json
import logging

from pydantic import ValidationError

from flashdeck.domain.models import Collection
from flashdeck.infrastructure.serialization import (
    collection_from_data,
    collection_to_json,
    has_required_collections,
)

logger = logging.getLogger(__name__)


def export_data(collection: Collection) -> str:
    """Serialize the collection as pretty-printed JSON."""
    return collection_to_json(collection)


def import_data(json_string: str) -> Collection | None:
    """
    Parse a JSON backup.

    Returns:
        The restored collection, or None if the text is not valid JSON, lacks
        the decks/cards/reviewHistory lists, or holds malformed records.
    """
    try:
        data = json.loads(json_string)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to import data: {e}")
        return None

    if not has_required_collections(data):
        logger.error("Failed to import data: invalid data structure")
        return None

    try:
        return collection_from_data(data)
    except ValidationError as e:
        logger.error(f"Failed to import data: {e}")
        return None
