"""
JSON document schema for the collection.

The on-disk and backup format uses camelCase keys and millisecond
timestamps. These pydantic models validate that shape and convert it to and
from the domain dataclasses.
"""

from dataclasses import asdict
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from flashdeck.domain.constants import EXPORT_INDENT
from flashdeck.domain.models import Card, Collection, Deck, ReviewRecord

REQUIRED_COLLECTIONS = ("decks", "cards", "reviewHistory")


class _Document(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class DeckDocument(_Document):
    id: str
    name: str
    description: str = ""
    created_at: int
    updated_at: int


class CardDocument(_Document):
    id: str
    deck_id: str
    front: str
    back: str
    created_at: int
    updated_at: int
    ease_factor: float
    interval: int
    repetitions: int
    next_review_date: int
    last_review_date: int | None = None


class ReviewDocument(_Document):
    card_id: str
    deck_id: str
    timestamp: int
    quality: int
    previous_interval: int
    new_interval: int


class CollectionDocument(_Document):
    decks: list[DeckDocument]
    cards: list[CardDocument]
    review_history: list[ReviewDocument]

    @classmethod
    def from_domain(cls, collection: Collection) -> "CollectionDocument":
        return cls(
            decks=[DeckDocument(**asdict(d)) for d in collection.decks],
            cards=[CardDocument(**asdict(c)) for c in collection.cards],
            review_history=[ReviewDocument(**asdict(r)) for r in collection.review_history],
        )

    def to_domain(self) -> Collection:
        return Collection(
            decks=[Deck(**d.model_dump()) for d in self.decks],
            cards=[Card(**c.model_dump()) for c in self.cards],
            review_history=[ReviewRecord(**r.model_dump()) for r in self.review_history],
        )


def has_required_collections(data: Any) -> bool:
    """True if `data` is an object whose three top-level collections are lists."""
    if not isinstance(data, dict):
        return False
    return all(isinstance(data.get(key), list) for key in REQUIRED_COLLECTIONS)


def collection_to_json(collection: Collection, indent: int | None = EXPORT_INDENT) -> str:
    return CollectionDocument.from_domain(collection).model_dump_json(
        by_alias=True, indent=indent
    )


def collection_from_data(data: dict[str, Any]) -> Collection:
    """
    Build a Collection from already-decoded JSON.

    Raises:
        pydantic.ValidationError: If any record is malformed.
    """
    return CollectionDocument.model_validate(data).to_domain()
