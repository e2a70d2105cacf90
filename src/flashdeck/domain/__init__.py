# Domain Package
from .models import Card, Collection, Deck, Quality, ReviewRecord, ScheduleResult
from .ports import CollectionRepository

__all__ = [
    "Card",
    "Collection",
    "CollectionRepository",
    "Deck",
    "Quality",
    "ReviewRecord",
    "ScheduleResult",
]
