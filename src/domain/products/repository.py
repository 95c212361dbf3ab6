"""Repository for Product persistence."""

from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.products.models import Product
from src.infrastructure.database.repository import BaseRepository


class ProductRepository(BaseRepository[Product]):
    """CRUD access to the ``products`` table."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Product)

    async def list_newest_first(self) -> list[Product]:
        """Return every product ordered by ID, highest first."""
        return await self.get_all(descending=True)
