"""Service for generating stable ids for decks and cards."""

from ulid import ULID


def generate_id() -> str:
    """Generate a sortable unique id using ULID."""
    return str(ULID())
