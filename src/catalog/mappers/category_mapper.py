"""
Field-by-field conversions between the Category entity and its API shapes.

Each function builds a new object; nothing is shared between the source and
the result beyond immutable field values.
"""

from catalog.models.category import Category
from catalog.schemas.category import CategoryDTO, CategoryResponse


def dto_to_entity(dto: CategoryDTO) -> Category:
    # id is left unset; the database assigns it on flush
    return Category(name=dto.name, description=dto.description)


def to_dto(category: Category | CategoryResponse) -> CategoryDTO:
    # entity or read response; the id is dropped either way
    return CategoryDTO(name=category.name, description=category.description)


def entity_to_response(entity: Category) -> CategoryResponse:
    return CategoryResponse(id=entity.id, name=entity.name, description=entity.description)
