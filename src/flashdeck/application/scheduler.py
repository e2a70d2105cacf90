"""
SM-2 scheduler.

Computes the next review parameters for a card from a quality rating,
classifies cards as due or new, and interleaves them into a session queue.

This is a pure computation module with no I/O. The only input besides the
arguments is the wall clock, read when ``now`` is not supplied.
"""

import math
from collections.abc import Iterable, Sequence
from typing import Protocol, TypeVar

from flashdeck.application.utils.common import now_ms
from flashdeck.domain.constants import (
    DUE_CARDS_PER_NEW_CARD,
    FIRST_INTERVAL,
    LAPSE_INTERVAL,
    MAX_QUALITY,
    MIN_EASE_FACTOR,
    MIN_QUALITY,
    MS_PER_DAY,
    PASSING_QUALITY,
    SECOND_INTERVAL,
)
from flashdeck.domain.models import Card, Quality, ScheduleResult

T = TypeVar("T")


class SchedulingState(Protocol):
    ease_factor: float
    interval: int
    repetitions: int


def clamp_quality(quality: int) -> Quality:
    """Clamp any integer rating into the 0-5 range."""
    return Quality(max(MIN_QUALITY, min(MAX_QUALITY, int(quality))))


def _round_half_up(value: float) -> int:
    # Builtin round() is half-to-even; intervals round .5 upwards.
    return math.floor(value + 0.5)


def compute_review(
    state: SchedulingState, quality: int, now: int | None = None
) -> ScheduleResult:
    """
    Apply one SM-2 review to a card's scheduling state.

    Args:
        state: Current ease factor, interval and repetitions.
        quality: Recall rating; values outside 0-5 are clamped.
        now: Review time in epoch milliseconds (defaults to the wall clock).

    Returns:
        The new scheduling fields. The caller stores them and stamps
        last_review_date.
    """
    q = clamp_quality(quality)
    ease_factor = state.ease_factor
    interval = state.interval
    repetitions = state.repetitions

    if q < PASSING_QUALITY:
        repetitions = 0
        interval = LAPSE_INTERVAL
    else:
        if repetitions == 0:
            interval = FIRST_INTERVAL
        elif repetitions == 1:
            interval = SECOND_INTERVAL
        else:
            interval = _round_half_up(interval * ease_factor)
        repetitions += 1

    # EF' = EF + (0.1 - (5 - q) * (0.08 + (5 - q) * 0.02)), from the pre-review EF
    miss = MAX_QUALITY - q
    ease_factor = ease_factor + (0.1 - miss * (0.08 + miss * 0.02))
    ease_factor = max(MIN_EASE_FACTOR, ease_factor)

    if now is None:
        now = now_ms()

    return ScheduleResult(
        ease_factor=ease_factor,
        interval=interval,
        repetitions=repetitions,
        next_review_date=now + interval * MS_PER_DAY,
    )


def is_due(card: Card, now: int | None = None) -> bool:
    """True when the card's scheduled review time has been reached."""
    if now is None:
        now = now_ms()
    return now >= card.next_review_date


def select_due(
    cards: Iterable[Card], now: int | None = None, deck_id: str | None = None
) -> list[Card]:
    """
    Cards that are due, earliest scheduled first.

    Cards with equal review times keep their collection order.
    """
    if now is None:
        now = now_ms()
    due = [
        card
        for card in cards
        if (not deck_id or card.deck_id == deck_id) and is_due(card, now)
    ]
    return sorted(due, key=lambda card: card.next_review_date)


def select_new(cards: Iterable[Card], deck_id: str | None = None) -> list[Card]:
    """Cards that have never been reviewed, oldest first."""
    new = [
        card
        for card in cards
        if (not deck_id or card.deck_id == deck_id) and card.last_review_date is None
    ]
    return sorted(new, key=lambda card: card.created_at)


def build_session_queue(due_cards: Sequence[T], new_cards: Sequence[T]) -> list[T]:
    """
    Interleave due and new cards: three due cards, then one new card.

    Whichever list runs out first, the rest of the other is appended in order.
    """
    queue: list[T] = []
    due_idx = 0
    new_idx = 0

    while due_idx < len(due_cards) or new_idx < len(new_cards):
        batch = due_cards[due_idx : due_idx + DUE_CARDS_PER_NEW_CARD]
        queue.extend(batch)
        due_idx += len(batch)
        if new_idx < len(new_cards):
            queue.append(new_cards[new_idx])
            new_idx += 1

    return queue
