# Infrastructure Package
from .json_store import JsonFileRepository

__all__ = ["JsonFileRepository"]
