"""
Domain models for decks, cards and the review log.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass, field
from enum import IntEnum

from .constants import DEFAULT_EASE_FACTOR


class Quality(IntEnum):
    """
    Self-rated recall quality, 0 (total failure) to 5 (perfect).

    Values of 3 and above count as a successful recall.
    """

    COMPLETE_BLACKOUT = 0
    INCORRECT_BUT_REMEMBERED = 1
    INCORRECT_BUT_EASY = 2
    CORRECT_WITH_DIFFICULTY = 3
    CORRECT_WITH_HESITATION = 4
    PERFECT = 5

    @property
    def label(self) -> str:
        return _QUALITY_LABELS[self]


_QUALITY_LABELS = {
    Quality.COMPLETE_BLACKOUT: "Complete Blackout",
    Quality.INCORRECT_BUT_REMEMBERED: "Incorrect (Remembered)",
    Quality.INCORRECT_BUT_EASY: "Incorrect (Seemed Easy)",
    Quality.CORRECT_WITH_DIFFICULTY: "Correct (Difficult)",
    Quality.CORRECT_WITH_HESITATION: "Correct (Hesitation)",
    Quality.PERFECT: "Perfect",
}


@dataclass(frozen=True)
class ScheduleResult:
    """
    Scheduling fields produced by a single review.

    Attributes:
        ease_factor: Updated ease factor (never below 1.3).
        interval: Days until the next review.
        repetitions: Consecutive successful reviews since the last lapse.
        next_review_date: Epoch milliseconds of the next review.
    """

    ease_factor: float
    interval: int
    repetitions: int
    next_review_date: int


@dataclass
class Deck:
    id: str
    name: str
    description: str
    created_at: int
    updated_at: int


@dataclass
class Card:
    """
    A flashcard with its SM-2 scheduling state.

    Timestamps are epoch milliseconds. A card with no last_review_date
    has never been reviewed and counts as new.
    """

    id: str
    deck_id: str
    front: str
    back: str
    created_at: int
    updated_at: int

    # SM-2 scheduling state
    ease_factor: float = DEFAULT_EASE_FACTOR
    interval: int = 0  # Days until next review
    repetitions: int = 0
    next_review_date: int = 0
    last_review_date: int | None = None

    @property
    def is_new(self) -> bool:
        return self.last_review_date is None


@dataclass(frozen=True)
class ReviewRecord:
    """
    A single entry of the append-only review log.

    Attributes:
        card_id: The card that was reviewed.
        deck_id: Deck the card belonged to at review time.
        timestamp: Epoch milliseconds of the review.
        quality: Rating given by the user (as entered, before clamping).
        previous_interval: Interval in days before the review.
        new_interval: Interval in days assigned by the review.
    """

    card_id: str
    deck_id: str
    timestamp: int
    quality: int
    previous_interval: int
    new_interval: int


@dataclass
class Collection:
    """Everything the application persists: decks, cards and the review log."""

    decks: list[Deck] = field(default_factory=list)
    cards: list[Card] = field(default_factory=list)
    review_history: list[ReviewRecord] = field(default_factory=list)
