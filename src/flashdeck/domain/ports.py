"""
Ports (interfaces) for collection persistence.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod

from .models import Collection


class CollectionRepository(ABC):
    """
    Port for loading and storing the card collection.

    Implementations:
        - JsonFileRepository: One JSON document per storage key on local disk.
    """

    @abstractmethod
    def load(self) -> Collection:
        """
        Load the stored collection.

        Returns:
            The stored collection, or an empty one if nothing usable is stored.
        """
        pass

    @abstractmethod
    def save(self, collection: Collection) -> bool:
        """
        Persist the collection.

        Returns:
            True on success, False if the store could not be written.
        """
        pass
