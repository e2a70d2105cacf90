"""Tests for ReviewSession queue walking."""

import pytest

from flashdeck.application.session import ANSWER_BUTTONS, ReviewSession
from flashdeck.domain.constants import MS_PER_DAY
from flashdeck.domain.models import Quality

NOW = 1_700_000_000_000


@pytest.fixture
def deck(service):
    return service.add_deck("Deck")


def _age(service, card_id, reviews=1):
    """Give a card review history and make it due again."""
    for _ in range(reviews):
        service.review_card(card_id, 5, now=NOW - 30 * MS_PER_DAY)


def test_empty_session(service, deck):
    session = ReviewSession(service, deck.id, now=NOW)

    assert session.total == 0
    assert session.current is None
    assert session.is_finished
    assert session.progress == 100.0
    assert session.answer(5) is None


def test_interleaves_due_and_new(service, deck):
    due_ids = []
    for i in range(4):
        card = service.add_card(deck.id, f"due {i}", "a")
        _age(service, card.id)
        due_ids.append(card.id)
    new_card = service.add_card(deck.id, "new", "a")

    session = ReviewSession(service, deck.id, now=NOW)

    # The new card is also due, so it sits among the due cards and again in the new slot.
    assert [c.id for c in session.queue] == due_ids[:3] + [new_card.id] + [due_ids[3], new_card.id]


def test_each_card_answered_once(service, deck):
    card = service.add_card(deck.id, "only", "a")
    session = ReviewSession(service, deck.id, now=NOW)
    assert session.total == 2

    record = session.answer(Quality.PERFECT)

    assert record.card_id == card.id
    assert session.reviewed_count == 1
    assert session.is_finished
    assert len(service.collection.review_history) == 1


def test_remaining_counts_each_card_once(service, deck):
    service.add_card(deck.id, "first", "a")
    service.add_card(deck.id, "second", "a")
    session = ReviewSession(service, deck.id, now=NOW)

    # Both new cards are queued twice, once as due and once as new.
    assert session.total == 4
    assert session.remaining == 2

    session.answer(Quality.PERFECT)
    assert session.remaining == 1

    session.answer(Quality.PERFECT)
    assert session.remaining == 0
    assert session.is_finished


def test_current_reflects_edits(service, deck):
    card = service.add_card(deck.id, "old front", "a")
    session = ReviewSession(service, deck.id, now=NOW)

    service.update_card(card.id, front="new front")

    assert session.current.front == "new front"


def test_deleted_cards_are_skipped(service, deck):
    gone = service.add_card(deck.id, "gone", "a")
    kept = service.add_card(deck.id, "kept", "a")
    session = ReviewSession(service, deck.id, now=NOW)

    service.delete_card(gone.id)

    assert session.current.id == kept.id


def test_skip_and_progress(service, deck):
    for i in range(2):
        _age(service, service.add_card(deck.id, f"q{i}", "a").id)
    session = ReviewSession(service, deck.id, now=NOW)

    assert session.progress == 0
    session.skip()
    assert session.progress == 50
    session.answer(ANSWER_BUTTONS["good"])
    assert session.is_finished
    assert session.reviewed_count == 1


def test_session_without_deck_covers_all(service, deck):
    other = service.add_deck("Other")
    service.add_card(deck.id, "q1", "a")
    service.add_card(other.id, "q2", "a")

    assert {c.deck_id for c in ReviewSession(service, now=NOW).queue} == {deck.id, other.id}


def test_answer_buttons_map_to_quality():
    assert ANSWER_BUTTONS == {
        "again": Quality.COMPLETE_BLACKOUT,
        "hard": Quality.INCORRECT_BUT_EASY,
        "good": Quality.CORRECT_WITH_DIFFICULTY,
        "easy": Quality.PERFECT,
    }
