from .category import CategoryDTO, CategoryResponse
from .error import ErrorResponse

__all__ = ["CategoryDTO", "CategoryResponse", "ErrorResponse"]
