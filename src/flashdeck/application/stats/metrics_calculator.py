"""
Metrics calculator for deck and collection statistics.

This is a pure computation module with no I/O.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Literal

from flashdeck.application.scheduler import is_due, select_due, select_new
from flashdeck.application.utils.common import now_ms
from flashdeck.domain.constants import DEFAULT_EASE_FACTOR, MS_PER_DAY
from flashdeck.domain.models import Card, Collection, ReviewRecord

CardStatus = Literal["new", "due", "learning"]


@dataclass
class DeckStats:
    total: int
    due: int
    new: int
    reviewed: int


@dataclass
class OverallStats:
    """
    Collection-wide statistics.
    """

    total_cards: int
    total_decks: int
    due_cards: int
    new_cards: int
    total_reviews: int
    avg_ease_factor: float
    reviews_today: int
    streak: int  # Consecutive days with at least one review


class MetricsCalculator:
    """
    Computes derived statistics from cards and the review log.

    Stateless and side-effect free.
    """

    def card_status(self, card: Card, now: int | None = None) -> CardStatus:
        if card.last_review_date is None:
            return "new"
        if is_due(card, now):
            return "due"
        return "learning"

    def deck_stats(self, cards: Sequence[Card], now: int | None = None) -> DeckStats:
        now = now_ms() if now is None else now
        return DeckStats(
            total=len(cards),
            due=len(select_due(cards, now)),
            new=len(select_new(cards)),
            reviewed=sum(1 for c in cards if c.last_review_date is not None),
        )

    def overall_stats(self, collection: Collection, now: int | None = None) -> OverallStats:
        now = now_ms() if now is None else now
        cards = collection.cards
        reviews = collection.review_history

        avg_ease = (
            sum(c.ease_factor for c in cards) / len(cards) if cards else DEFAULT_EASE_FACTOR
        )
        today_start = self._local_day_start(now)

        return OverallStats(
            total_cards=len(cards),
            total_decks=len(collection.decks),
            due_cards=len(select_due(cards, now)),
            new_cards=len(select_new(cards)),
            total_reviews=len(reviews),
            avg_ease_factor=avg_ease,
            reviews_today=sum(1 for r in reviews if r.timestamp >= today_start),
            streak=self.calculate_streak(reviews, now),
        )

    def calculate_streak(self, reviews: Sequence[ReviewRecord], now: int | None = None) -> int:
        """
        Count consecutive review days ending at the most recent one.

        Days are whole UTC days since the epoch. The streak is broken (0) when
        the last review day is older than yesterday.
        """
        if not reviews:
            return 0

        now = now_ms() if now is None else now
        review_days = sorted({r.timestamp // MS_PER_DAY for r in reviews}, reverse=True)
        today = now // MS_PER_DAY

        if review_days[0] < today - 1:
            return 0

        streak = 1
        for newer, older in zip(review_days, review_days[1:]):
            if newer - older != 1:
                break
            streak += 1
        return streak

    def _local_day_start(self, now: int) -> int:
        """Epoch milliseconds of local midnight on the day containing `now`."""
        day = datetime.fromtimestamp(now / 1000).replace(
            hour=0, minute=0, second=0, microsecond=0
        )
        return int(day.timestamp() * 1000)
