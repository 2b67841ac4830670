"""Item repositories package."""

from modules.items.repositories.django_repository import ItemDjangoRepository
from modules.items.repositories.interfaces import IItemRepository

__all__ = ["IItemRepository", "ItemDjangoRepository"]
