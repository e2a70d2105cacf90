"""
Review session for one deck (or all decks).

Builds the study queue once, three due cards for every new card, and feeds
the user's answers back to the collection service.
"""

import logging

from flashdeck.application.collection_service import CollectionService
from flashdeck.application.scheduler import build_session_queue
from flashdeck.domain.models import Card, Quality, ReviewRecord

logger = logging.getLogger(__name__)

# Answer buttons offered to the user, mapped to SM-2 quality ratings.
ANSWER_BUTTONS: dict[str, Quality] = {
    "again": Quality.COMPLETE_BLACKOUT,
    "hard": Quality.INCORRECT_BUT_EASY,
    "good": Quality.CORRECT_WITH_DIFFICULTY,
    "easy": Quality.PERFECT,
}


class ReviewSession:
    """
    Walks a queue built by build_session_queue.

    New cards are also due from the moment they are created, so they can
    appear twice in the queue; each card is answered at most once per session.
    """

    def __init__(
        self,
        service: CollectionService,
        deck_id: str | None = None,
        now: int | None = None,
    ):
        self._service = service
        self.deck_id = deck_id
        due = service.due_cards(deck_id, now=now)
        new = service.new_cards(deck_id)
        self.queue: list[Card] = build_session_queue(due, new)
        self._position = 0
        self._answered: set[str] = set()
        self.reviewed_count = 0
        logger.debug(
            f"Session for deck={deck_id or 'all'}: {len(due)} due, {len(new)} new"
        )

    @property
    def total(self) -> int:
        return len(self.queue)

    @property
    def remaining(self) -> int:
        """Distinct cards still to be answered, counting a queued card once."""
        self._skip_answered()
        pending = {
            c.id
            for c in self.queue[self._position :]
            if c.id not in self._answered and self._service.get_card(c.id)
        }
        return len(pending)

    def _skip_answered(self) -> None:
        # Also skips cards deleted since the queue was built.
        while self._position < len(self.queue):
            card_id = self.queue[self._position].id
            if card_id not in self._answered and self._service.get_card(card_id):
                return
            self._position += 1

    @property
    def current(self) -> Card | None:
        self._skip_answered()
        if self._position >= len(self.queue):
            return None
        # Latest version, reflecting edits made since the queue was built.
        return self._service.get_card(self.queue[self._position].id)

    @property
    def is_finished(self) -> bool:
        return self.current is None

    @property
    def progress(self) -> float:
        """Percentage of the queue walked so far."""
        if not self.queue:
            return 100.0
        self._skip_answered()
        return self._position / len(self.queue) * 100

    def skip(self) -> None:
        """Move past the current card without answering it."""
        self._skip_answered()
        if self._position < len(self.queue):
            self._position += 1

    def answer(self, quality: int) -> ReviewRecord | None:
        """Rate the current card and advance. Returns None once the session is over."""
        card = self.current
        if card is None:
            return None

        record = self._service.review_card(card.id, quality)
        self._answered.add(card.id)
        self._position += 1
        if record is not None:
            self.reviewed_count += 1
        return record
