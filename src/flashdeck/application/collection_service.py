"""
Collection Service: application layer owner of the card collection.

Holds the in-memory collection, applies deck/card edits and reviews, and
writes the result through the injected repository after every change.
"""

import logging
from collections.abc import Callable
from dataclasses import replace

from flashdeck.application.id_service import generate_id
from flashdeck.application.scheduler import compute_review, select_due, select_new
from flashdeck.application.utils.common import now_ms
from flashdeck.domain.constants import DEFAULT_EASE_FACTOR
from flashdeck.domain.models import Card, Collection, Deck, ReviewRecord
from flashdeck.domain.ports import CollectionRepository

logger = logging.getLogger(__name__)


class CollectionService:
    """
    Application service for decks, cards and reviews.

    Follows Dependency Inversion: depends on the CollectionRepository
    abstraction, not a concrete store. Each change builds a new Collection
    so snapshots handed out earlier are never modified.
    """

    def __init__(
        self,
        repository: CollectionRepository,
        clock: Callable[[], int] | None = None,
    ):
        """
        Args:
            repository: The repository (port) the collection is loaded from and saved to.
            clock: Optional source of epoch milliseconds; uses the wall clock if not provided.
        """
        self._repo = repository
        self._clock = clock or now_ms
        self._collection = repository.load()
        self.last_save_ok = True

    @property
    def collection(self) -> Collection:
        return self._collection

    def _commit(self, collection: Collection) -> None:
        self._collection = collection
        self.last_save_ok = self._repo.save(collection)
        if not self.last_save_ok:
            logger.warning("Collection change kept in memory but not persisted")

    # ---------- Decks ----------

    def get_deck(self, deck_id: str) -> Deck | None:
        return next((d for d in self._collection.decks if d.id == deck_id), None)

    def add_deck(self, name: str, description: str = "") -> Deck:
        now = self._clock()
        deck = Deck(
            id=generate_id(),
            name=name,
            description=description,
            created_at=now,
            updated_at=now,
        )
        self._commit(replace(self._collection, decks=[*self._collection.decks, deck]))
        logger.info(f"Added deck '{name}' ({deck.id})")
        return deck

    def update_deck(
        self, deck_id: str, name: str | None = None, description: str | None = None
    ) -> Deck | None:
        deck = self.get_deck(deck_id)
        if deck is None:
            return None

        updated = replace(
            deck,
            name=deck.name if name is None else name,
            description=deck.description if description is None else description,
            updated_at=self._clock(),
        )
        decks = [updated if d.id == deck_id else d for d in self._collection.decks]
        self._commit(replace(self._collection, decks=decks))
        return updated

    def delete_deck(self, deck_id: str) -> bool:
        """Remove a deck together with its cards and their review records."""
        if self.get_deck(deck_id) is None:
            return False

        self._commit(
            Collection(
                decks=[d for d in self._collection.decks if d.id != deck_id],
                cards=[c for c in self._collection.cards if c.deck_id != deck_id],
                review_history=[
                    r for r in self._collection.review_history if r.deck_id != deck_id
                ],
            )
        )
        logger.info(f"Deleted deck {deck_id}")
        return True

    # ---------- Cards ----------

    def get_card(self, card_id: str) -> Card | None:
        return next((c for c in self._collection.cards if c.id == card_id), None)

    def add_card(self, deck_id: str, front: str, back: str) -> Card | None:
        if self.get_deck(deck_id) is None:
            logger.warning(f"Cannot add card: unknown deck {deck_id}")
            return None

        now = self._clock()
        card = Card(
            id=generate_id(),
            deck_id=deck_id,
            front=front,
            back=back,
            created_at=now,
            updated_at=now,
            ease_factor=DEFAULT_EASE_FACTOR,
            interval=0,
            repetitions=0,
            next_review_date=now,  # Immediately available for review
            last_review_date=None,
        )
        self._commit(replace(self._collection, cards=[*self._collection.cards, card]))
        return card

    def update_card(
        self, card_id: str, front: str | None = None, back: str | None = None
    ) -> Card | None:
        """Edit card content. Scheduling fields are left untouched."""
        card = self.get_card(card_id)
        if card is None:
            return None

        updated = replace(
            card,
            front=card.front if front is None else front,
            back=card.back if back is None else back,
            updated_at=self._clock(),
        )
        cards = [updated if c.id == card_id else c for c in self._collection.cards]
        self._commit(replace(self._collection, cards=cards))
        return updated

    def delete_card(self, card_id: str) -> bool:
        if self.get_card(card_id) is None:
            return False

        self._commit(
            replace(
                self._collection,
                cards=[c for c in self._collection.cards if c.id != card_id],
                review_history=[
                    r for r in self._collection.review_history if r.card_id != card_id
                ],
            )
        )
        return True

    # ---------- Reviews ----------

    def review_card(
        self, card_id: str, quality: int, now: int | None = None
    ) -> ReviewRecord | None:
        """
        Record a review: reschedule the card and append to the review log.

        This is the only operation that changes a card's scheduling state.

        Returns:
            The new review record, or None if the card does not exist.
        """
        card = self.get_card(card_id)
        if card is None:
            logger.warning(f"Cannot review unknown card {card_id}")
            return None

        if now is None:
            now = self._clock()

        result = compute_review(card, quality, now=now)
        reviewed = replace(
            card,
            ease_factor=result.ease_factor,
            interval=result.interval,
            repetitions=result.repetitions,
            next_review_date=result.next_review_date,
            last_review_date=now,
        )
        record = ReviewRecord(
            card_id=card.id,
            deck_id=card.deck_id,
            timestamp=now,
            quality=int(quality),
            previous_interval=card.interval,
            new_interval=result.interval,
        )

        self._commit(
            replace(
                self._collection,
                cards=[reviewed if c.id == card_id else c for c in self._collection.cards],
                review_history=[*self._collection.review_history, record],
            )
        )
        logger.debug(
            f"Reviewed {card_id} q={quality}: interval {card.interval} -> {result.interval}, "
            f"ease {card.ease_factor:.2f} -> {result.ease_factor:.2f}"
        )
        return record

    # ---------- Queries ----------

    def cards_for_deck(self, deck_id: str) -> list[Card]:
        return [c for c in self._collection.cards if c.deck_id == deck_id]

    def due_cards(self, deck_id: str | None = None, now: int | None = None) -> list[Card]:
        return select_due(
            self._collection.cards, now if now is not None else self._clock(), deck_id
        )

    def new_cards(self, deck_id: str | None = None) -> list[Card]:
        return select_new(self._collection.cards, deck_id)

    def review_history_for_deck(self, deck_id: str) -> list[ReviewRecord]:
        return [r for r in self._collection.review_history if r.deck_id == deck_id]

    # ---------- Import ----------

    def replace_collection(self, collection: Collection) -> None:
        """Install a restored collection in place of the current one."""
        self._commit(collection)
        logger.info(
            f"Imported {len(collection.decks)} decks, {len(collection.cards)} cards, "
            f"{len(collection.review_history)} reviews"
        )
