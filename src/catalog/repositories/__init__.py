"""
Repository layer: the abstraction between business logic and data access.

Usage:
    from catalog.repositories import CategoryRepository
"""

from .base_repository import BaseRepository
from .category_repository import CategoryRepository

__all__ = [
    "BaseRepository",
    "CategoryRepository",
]
