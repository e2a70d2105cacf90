"""
JSON File Repository: infrastructure adapter for local key-value storage.

Implements CollectionRepository by keeping one JSON document per storage key
inside a data directory.
"""

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from flashdeck.domain.constants import DEFAULT_STORAGE_KEY
from flashdeck.domain.models import Collection
from flashdeck.domain.ports import CollectionRepository

from .serialization import collection_from_data, collection_to_json, has_required_collections

logger = logging.getLogger(__name__)


class JsonFileRepository(CollectionRepository):
    """
    Stores the collection at ``<data_dir>/<storage_key>.json``.

    Anything unreadable falls back to an empty collection on load; write
    failures are logged and reported through the return value of save().
    """

    def __init__(self, data_dir: Path, storage_key: str = DEFAULT_STORAGE_KEY):
        self.data_dir = data_dir
        self.storage_key = storage_key

    @property
    def path(self) -> Path:
        return self.data_dir / f"{self.storage_key}.json"

    def load(self) -> Collection:
        if not self.path.exists():
            logger.debug(f"No stored collection at {self.path}")
            return Collection()

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.error(f"Failed to load collection from {self.path}: {e}")
            return Collection()

        if not has_required_collections(data):
            logger.error(f"Stored collection at {self.path} is missing required lists")
            return Collection()

        try:
            return collection_from_data(data)
        except ValidationError as e:
            logger.error(f"Stored collection at {self.path} is malformed: {e}")
            return Collection()

    def save(self, collection: Collection) -> bool:
        payload = collection_to_json(collection, indent=None)
        tmp_path = self.path.with_suffix(".json.tmp")
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(payload, encoding="utf-8")
            tmp_path.replace(self.path)
        except OSError as e:
            logger.error(f"Failed to save collection to {self.path}: {e}")
            return False
        logger.debug(
            f"Saved {len(collection.cards)} cards in {len(collection.decks)} decks to {self.path}"
        )
        return True
