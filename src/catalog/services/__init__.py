from .category_service import CategoryService

__all__ = ["CategoryService"]
