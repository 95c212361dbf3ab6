"""Unit tests for src/infrastructure/database/repository.py."""

import pytest
from pytest_mock import MockerFixture, MockType

from src.domain.products import Product, ProductRepository
from src.infrastructure.database.repository import BaseRepository


@pytest.fixture
def repository(mock_async_session: MockType) -> ProductRepository:
    """Provide a ProductRepository over the mocked session."""
    return ProductRepository(mock_async_session)


@pytest.fixture
def monitor() -> Product:
    """Provide a persisted-looking product."""
    return Product(id=1, name="Monitor Curvo", price=300.0, availability=True)


@pytest.mark.unit
class TestBaseRepository:
    """Test BaseRepository CRUD primitives against a mocked session."""

    def test_initialization(self, mock_async_session: MockType) -> None:
        """Test the repository keeps its session and model class."""
        repository = BaseRepository(mock_async_session, Product)

        assert repository.session is mock_async_session
        assert repository.model_class is Product

    async def test_get_by_id_found(
        self,
        repository: ProductRepository,
        mock_async_session: MockType,
        mock_query_result: MockType,
        monitor: Product,
    ) -> None:
        """Test an existing product is returned."""
        mock_query_result.scalar_one_or_none.return_value = monitor
        mock_async_session.execute.return_value = mock_query_result

        result = await repository.get_by_id(1)

        assert result is monitor
        mock_async_session.execute.assert_awaited_once()

    async def test_get_by_id_not_found(
        self,
        repository: ProductRepository,
        mock_async_session: MockType,
        mock_query_result: MockType,
    ) -> None:
        """Test a missing product yields None."""
        mock_query_result.scalar_one_or_none.return_value = None
        mock_async_session.execute.return_value = mock_query_result

        assert await repository.get_by_id(999) is None

    @pytest.mark.parametrize(
        ("descending", "expected_order"),
        [(True, "products.id DESC"), (False, "products.id ASC")],
    )
    async def test_get_all_orders_by_id(
        self,
        descending: bool,
        expected_order: str,
        repository: ProductRepository,
        mock_async_session: MockType,
        mock_query_result: MockType,
        monitor: Product,
    ) -> None:
        """Test the generated statement orders by id in the requested direction."""
        mock_query_result.scalars.return_value.all.return_value = [monitor]
        mock_async_session.execute.return_value = mock_query_result

        result = await repository.get_all(descending=descending)

        assert result == [monitor]
        stmt = mock_async_session.execute.call_args.args[0]
        assert expected_order in str(stmt)

    async def test_get_all_applies_limit(
        self,
        repository: ProductRepository,
        mock_async_session: MockType,
        mock_query_result: MockType,
    ) -> None:
        """Test skip and limit are added to the statement."""
        mock_query_result.scalars.return_value.all.return_value = []
        mock_async_session.execute.return_value = mock_query_result

        await repository.get_all(skip=10, limit=5)

        stmt = mock_async_session.execute.call_args.args[0]
        assert "LIMIT" in str(stmt)
        assert "OFFSET" in str(stmt)

    async def test_create_flushes_and_refreshes(
        self, repository: ProductRepository, mock_async_session: MockType
    ) -> None:
        """Test create adds the instance and loads server-generated values."""
        product = Product(name="Teclado", price=49.9)

        result = await repository.create(product)

        assert result is product
        mock_async_session.add.assert_called_once_with(product)
        mock_async_session.flush.assert_awaited_once()
        mock_async_session.refresh.assert_awaited_once_with(product)

    async def test_update_assigns_fields(
        self,
        repository: ProductRepository,
        mock_async_session: MockType,
        monitor: Product,
        mocker: MockerFixture,
    ) -> None:
        """Test update overwrites every given field and saves."""
        mocker.patch.object(repository, "get_by_id", return_value=monitor)

        result = await repository.update(
            1, {"name": "Monitor Plano", "price": 250.0, "availability": False}
        )

        assert result is monitor
        assert monitor.name == "Monitor Plano"
        assert monitor.price == 250.0
        assert monitor.availability is False
        mock_async_session.flush.assert_awaited_once()
        mock_async_session.refresh.assert_awaited_once_with(monitor)

    async def test_update_ignores_unknown_fields(
        self,
        repository: ProductRepository,
        monitor: Product,
        mocker: MockerFixture,
    ) -> None:
        """Test unknown fields are logged and skipped."""
        mocker.patch.object(repository, "get_by_id", return_value=monitor)
        mock_logger = mocker.patch("src.infrastructure.database.repository.logger")

        await repository.update(1, {"colour": "black"})

        assert not hasattr(monitor, "colour")
        mock_logger.warning.assert_called_once()

    async def test_update_missing_returns_none(
        self,
        repository: ProductRepository,
        mock_async_session: MockType,
        mocker: MockerFixture,
    ) -> None:
        """Test updating a missing product changes nothing."""
        mocker.patch.object(repository, "get_by_id", return_value=None)

        assert await repository.update(5, {"name": "X"}) is None
        mock_async_session.flush.assert_not_awaited()

    @pytest.mark.parametrize(("rowcount", "expected"), [(1, True), (0, False)])
    async def test_delete_uses_rowcount(
        self,
        rowcount: int,
        expected: bool,
        repository: ProductRepository,
        mock_async_session: MockType,
        mock_query_result: MockType,
    ) -> None:
        """Test delete reports whether a row was removed."""
        mock_query_result.rowcount = rowcount
        mock_async_session.execute.return_value = mock_query_result

        assert await repository.delete(3) is expected
        stmt = mock_async_session.execute.call_args.args[0]
        assert str(stmt).startswith("DELETE FROM products")


@pytest.mark.unit
class TestProductRepository:
    """Test product-specific queries."""

    async def test_list_newest_first(
        self, repository: ProductRepository, mocker: MockerFixture
    ) -> None:
        """Test products are listed with the highest id first."""
        mock_get_all = mocker.patch.object(repository, "get_all", return_value=[])

        await repository.list_newest_first()

        mock_get_all.assert_awaited_once_with(descending=True)


@pytest.mark.unit
class TestIdRange:
    """Test IDs outside the 64-bit key range never reach the database."""

    @pytest.mark.parametrize("entity_id", [2**63, -(2**63) - 1, 10**20])
    async def test_get_by_id_skips_query(
        self,
        entity_id: int,
        repository: ProductRepository,
        mock_async_session: MockType,
    ) -> None:
        """Test out-of-range IDs are reported as missing."""
        assert await repository.get_by_id(entity_id) is None
        mock_async_session.execute.assert_not_awaited()

    async def test_update_skips_query(
        self, repository: ProductRepository, mock_async_session: MockType
    ) -> None:
        """Test updating an out-of-range ID changes nothing."""
        assert await repository.update(10**20, {"name": "X"}) is None
        mock_async_session.execute.assert_not_awaited()
        mock_async_session.flush.assert_not_awaited()

    async def test_delete_skips_query(
        self, repository: ProductRepository, mock_async_session: MockType
    ) -> None:
        """Test deleting an out-of-range ID reports nothing deleted."""
        assert await repository.delete(10**20) is False
        mock_async_session.execute.assert_not_awaited()

    @pytest.mark.parametrize("entity_id", [2**63 - 1, -(2**63)])
    async def test_boundary_ids_are_queried(
        self,
        entity_id: int,
        repository: ProductRepository,
        mock_async_session: MockType,
        mock_query_result: MockType,
    ) -> None:
        """Test the extreme storable IDs are still looked up."""
        mock_query_result.scalar_one_or_none.return_value = None
        mock_async_session.execute.return_value = mock_query_result

        await repository.get_by_id(entity_id)

        mock_async_session.execute.assert_awaited_once()
