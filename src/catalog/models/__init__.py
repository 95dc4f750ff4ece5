"""
Single import point for the ORM models, so `Base.metadata` knows every table
once this package is imported.

    from catalog.models import Category
"""

from .category import Category

__all__ = [
    "Category",
]
