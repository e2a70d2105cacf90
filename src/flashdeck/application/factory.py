"""
Collection Factory
Centralizes wiring of the repository and collection service from config.
"""

from flashdeck.application.collection_service import CollectionService
from flashdeck.application.config import AppConfig
from flashdeck.domain.ports import CollectionRepository
from flashdeck.infrastructure.json_store import JsonFileRepository


def get_collection_repository(config: AppConfig) -> CollectionRepository:
    """
    Returns the CollectionRepository implementation for the configured data dir.
    """
    return JsonFileRepository(data_dir=config.data_dir, storage_key=config.storage_key)


def get_collection_service(config: AppConfig) -> CollectionService:
    return CollectionService(get_collection_repository(config))
