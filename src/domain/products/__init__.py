"""Product entity and repository."""

from src.domain.products.models import Product
from src.domain.products.repository import ProductRepository

__all__ = ["Product", "ProductRepository"]
