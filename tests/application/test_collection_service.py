"""Tests for CollectionService: deck/card CRUD, reviews and persistence."""

from unittest.mock import MagicMock

import pytest

from flashdeck.application.collection_service import CollectionService
from flashdeck.domain.constants import MS_PER_DAY
from flashdeck.domain.models import Collection
from flashdeck.domain.ports import CollectionRepository

NOW = 1_700_000_000_000


@pytest.fixture
def deck(service):
    return service.add_deck("Spanish", "Basic vocabulary")


def test_add_deck_persists(service, repo):
    deck = service.add_deck("Spanish")

    assert deck.name == "Spanish"
    assert deck.description == ""
    assert deck.created_at == deck.updated_at == NOW
    assert [d.id for d in repo.load().decks] == [deck.id]


def test_add_card_starts_at_defaults(service, deck):
    card = service.add_card(deck.id, "el perro", "the dog")

    assert card.ease_factor == 2.5
    assert card.interval == 0
    assert card.repetitions == 0
    assert card.next_review_date == card.created_at == NOW
    assert card.last_review_date is None
    assert card.is_new


def test_add_card_unknown_deck(service):
    assert service.add_card("missing", "q", "a") is None
    assert service.collection.cards == []


def test_update_deck(service, deck):
    service._clock = lambda: NOW + 5
    updated = service.update_deck(deck.id, name="Español")

    assert updated.name == "Español"
    assert updated.description == "Basic vocabulary"
    assert updated.updated_at == NOW + 5
    assert service.get_deck(deck.id).name == "Español"


def test_update_unknown_deck(service):
    assert service.update_deck("nope", name="x") is None


def test_delete_deck_cascades(service, deck):
    other = service.add_deck("French")
    c1 = service.add_card(deck.id, "q1", "a1")
    c2 = service.add_card(other.id, "q2", "a2")
    service.review_card(c1.id, 4)
    service.review_card(c2.id, 4)

    assert service.delete_deck(deck.id)

    assert [d.id for d in service.collection.decks] == [other.id]
    assert [c.id for c in service.collection.cards] == [c2.id]
    assert [r.card_id for r in service.collection.review_history] == [c2.id]
    assert not service.delete_deck(deck.id)


def test_update_card_leaves_scheduling_alone(service, deck):
    card = service.add_card(deck.id, "q", "a")
    service.review_card(card.id, 5)
    reviewed = service.get_card(card.id)

    updated = service.update_card(card.id, back="answer")

    assert updated.front == "q"
    assert updated.back == "answer"
    assert (updated.ease_factor, updated.interval, updated.repetitions) == (
        reviewed.ease_factor,
        reviewed.interval,
        reviewed.repetitions,
    )
    assert updated.next_review_date == reviewed.next_review_date
    assert updated.last_review_date == reviewed.last_review_date


def test_delete_card_removes_its_reviews(service, deck):
    keep = service.add_card(deck.id, "q1", "a1")
    drop = service.add_card(deck.id, "q2", "a2")
    service.review_card(keep.id, 3)
    service.review_card(drop.id, 3)

    assert service.delete_card(drop.id)
    assert service.get_card(drop.id) is None
    assert [r.card_id for r in service.collection.review_history] == [keep.id]
    assert not service.delete_card(drop.id)


def test_review_card_applies_schedule(service, deck):
    card = service.add_card(deck.id, "q", "a")

    record = service.review_card(card.id, 4, now=NOW + 10)
    reviewed = service.get_card(card.id)

    assert reviewed.interval == 1
    assert reviewed.repetitions == 1
    assert reviewed.ease_factor == pytest.approx(2.5)
    assert reviewed.last_review_date == NOW + 10
    assert reviewed.next_review_date == NOW + 10 + MS_PER_DAY
    assert not reviewed.is_new

    assert record.card_id == card.id
    assert record.deck_id == deck.id
    assert record.timestamp == NOW + 10
    assert record.quality == 4
    assert record.previous_interval == 0
    assert record.new_interval == 1
    assert service.collection.review_history == [record]


def test_review_sequence_follows_sm2(service, deck):
    card = service.add_card(deck.id, "q", "a")
    intervals = []
    for day in range(4):
        record = service.review_card(card.id, 5, now=NOW + day * MS_PER_DAY)
        intervals.append(record.new_interval)

    # 1, 6, round(6 * 2.7) = 16, round(16 * 2.8) = 45
    assert intervals == [1, 6, 16, 45]


def test_review_records_raw_quality(service, deck):
    card = service.add_card(deck.id, "q", "a")
    record = service.review_card(card.id, 9)

    assert record.quality == 9
    assert service.get_card(card.id).ease_factor == pytest.approx(2.6)


def test_review_unknown_card(service):
    assert service.review_card("ghost", 5) is None
    assert service.collection.review_history == []


def test_snapshots_are_not_mutated(service, deck):
    before = service.collection
    service.add_card(deck.id, "q", "a")
    assert before.cards == []


def test_due_and_new_queries(service, deck):
    other = service.add_deck("Other")
    first = service.add_card(deck.id, "q1", "a1")
    second = service.add_card(deck.id, "q2", "a2")
    service.add_card(other.id, "q3", "a3")
    service.review_card(first.id, 5)

    assert [c.id for c in service.new_cards(deck.id)] == [second.id]
    assert [c.id for c in service.due_cards(deck.id)] == [second.id]
    assert len(service.due_cards()) == 2
    assert [c.id for c in service.due_cards(deck.id, now=NOW + MS_PER_DAY)] == [
        second.id,
        first.id,
    ]


def test_review_history_for_deck(service, deck):
    other = service.add_deck("Other")
    a = service.add_card(deck.id, "q1", "a1")
    b = service.add_card(other.id, "q2", "a2")
    service.review_card(a.id, 3)
    service.review_card(b.id, 3)

    assert [r.card_id for r in service.review_history_for_deck(other.id)] == [b.id]
    assert [c.id for c in service.cards_for_deck(deck.id)] == [a.id]


def test_replace_collection(service, repo, deck):
    service.replace_collection(Collection())
    assert service.collection == Collection()
    assert repo.load() == Collection()


def test_loads_existing_collection(repo):
    first = CollectionService(repo, clock=lambda: NOW)
    deck = first.add_deck("Persisted")
    first.add_card(deck.id, "q", "a")

    second = CollectionService(repo)
    assert second.collection == first.collection


def test_save_failure_is_reported():
    repo = MagicMock(spec=CollectionRepository)
    repo.load.return_value = Collection()
    repo.save.return_value = False

    service = CollectionService(repo, clock=lambda: NOW)
    deck = service.add_deck("Unsaved")

    assert not service.last_save_ok
    assert service.get_deck(deck.id) is not None
    repo.save.assert_called_once()
