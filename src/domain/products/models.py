"""Product ORM model."""

from sqlalchemy import Boolean, CheckConstraint, Float, String, true
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.database.base import BaseModel

NAME_MAX_LENGTH = 100


class Product(BaseModel):
    """A sellable product.

    ``name`` is never empty and ``price`` is always strictly positive; both
    are enforced by check constraints as well as by the API validation rules.
    """

    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("price > 0", name="price_positive"),
        CheckConstraint("name <> ''", name="name_not_empty"),
    )

    name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    availability: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        server_default=true(),
        nullable=False,
    )

    def toggle_availability(self) -> bool:
        """Flip ``availability`` to its negation and return the new value."""
        self.availability = not self.availability
        return self.availability
