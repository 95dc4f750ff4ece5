"""Category request/response shapes, decoupled from the ORM entity."""
from pydantic import BaseModel, ConfigDict, Field


class CategoryDTO(BaseModel):
    """Create-request body and create-response echo. Carries no id."""

    # Whitespace is stripped before the length checks, so "   " is rejected as blank.
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=100, description="Category name (required, unique)")
    description: str | None = Field(default=None, max_length=255)


class CategoryResponse(BaseModel):
    """Read-response shape."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None = None
