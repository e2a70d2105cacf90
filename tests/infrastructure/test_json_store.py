import json
from unittest.mock import patch

from flashdeck.domain.models import Collection, Deck
from flashdeck.infrastructure.json_store import JsonFileRepository

NOW = 1_700_000_000_000


def _collection():
    return Collection(decks=[Deck("d1", "Deck", "desc", NOW, NOW)])


def test_load_missing_file_returns_empty(tmp_path):
    repo = JsonFileRepository(tmp_path / "nowhere")
    assert repo.load() == Collection()


def test_save_creates_directory_and_file(tmp_path):
    repo = JsonFileRepository(tmp_path / "data", storage_key="my-cards")

    assert repo.save(_collection())
    assert repo.path == tmp_path / "data" / "my-cards.json"
    assert json.loads(repo.path.read_text())["decks"][0]["createdAt"] == NOW
    assert not repo.path.with_suffix(".json.tmp").exists()


def test_save_then_load(tmp_path):
    repo = JsonFileRepository(tmp_path)
    repo.save(_collection())
    assert repo.load() == _collection()


def test_malformed_json_falls_back_to_empty(tmp_path):
    repo = JsonFileRepository(tmp_path)
    repo.path.write_text("{oops")
    assert repo.load() == Collection()


def test_missing_collections_fall_back_to_empty(tmp_path):
    repo = JsonFileRepository(tmp_path)
    repo.path.write_text(json.dumps({"decks": [], "cards": []}))
    assert repo.load() == Collection()


def test_malformed_records_fall_back_to_empty(tmp_path):
    repo = JsonFileRepository(tmp_path)
    repo.path.write_text(json.dumps({"decks": [{"id": 1}], "cards": [], "reviewHistory": []}))
    assert repo.load() == Collection()


def test_save_failure_returns_false(tmp_path):
    repo = JsonFileRepository(tmp_path)
    with patch("pathlib.Path.write_text", side_effect=PermissionError("read-only")):
        assert repo.save(_collection()) is False
