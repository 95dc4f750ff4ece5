from .category_mapper import dto_to_entity, to_dto, entity_to_response

__all__ = ["dto_to_entity", "to_dto", "entity_to_response"]
