import pytest

from flashdeck.application.collection_service import CollectionService
from flashdeck.domain.models import Card
from flashdeck.infrastructure.json_store import JsonFileRepository

# 2023-11-14T22:13:20Z
NOW = 1_700_000_000_000


@pytest.fixture
def make_card():
    """Factory for cards with sensible defaults; override any field by keyword."""

    def _make(card_id: str = "c1", deck_id: str = "d1", **overrides) -> Card:
        fields = {
            "id": card_id,
            "deck_id": deck_id,
            "front": f"front {card_id}",
            "back": f"back {card_id}",
            "created_at": NOW,
            "updated_at": NOW,
            "next_review_date": NOW,
        }
        fields.update(overrides)
        return Card(**fields)

    return _make


@pytest.fixture
def repo(tmp_path):
    return JsonFileRepository(tmp_path / "data")


@pytest.fixture
def service(repo):
    """A collection service backed by a temp JSON store and a frozen clock."""
    return CollectionService(repo, clock=lambda: NOW)


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Mocking HOME to a temp directory to isolate config and data
    monkeypatch.setenv("HOME", str(home))
    for var in ("FLASHDECK_DATA_DIR", "FLASHDECK_STORAGE_KEY", "FLASHDECK_VERBOSE"):
        monkeypatch.delenv(var, raising=False)
    return home
