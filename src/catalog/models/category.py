from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from catalog.database.base import Base


class Category(Base):
    """
    SQLAlchemy model for Category.

    A product category of the catalog. `name` is unique across all categories;
    the database constraint is the source of truth for that rule.
    """
    __tablename__ = "categories"

    # Server-assigned identifier
    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    # unique=True yields the `uq_categories_name` constraint (and its index)
    name: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        nullable=False
    )

    description: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True
    )

    def __repr__(self) -> str:
        return f"<Category(id={self.id!r}, name={self.name!r})>"
