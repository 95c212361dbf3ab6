"""Unit tests for src/api/middleware/error_handler.py."""

from typing import Any

import orjson
import pytest
from fastapi import FastAPI, status
from fastapi.exceptions import RequestValidationError
from pytest_mock import MockerFixture, MockType
from starlette.exceptions import HTTPException
from starlette.responses import Response

from src.api.middleware.error_handler import (
    catalog_error_handler,
    field_errors_from_pydantic,
    generic_exception_handler,
    get_service_info,
    http_exception_handler,
    register_exception_handlers,
    request_validation_error_handler,
)
from src.api.schemas.errors import ServiceInfo
from src.core.config import Settings
from src.core.context import RequestContext
from src.core.exceptions import (
    CatalogError,
    ErrorCode,
    NotFoundError,
    Severity,
    ValidationError,
)


def response_json(response: Response) -> Any:
    """Decode a rendered JSON response body."""
    return orjson.loads(response.body)


@pytest.fixture
def mock_request(mocker: MockerFixture) -> MockType:
    """Provide a request mock with method and path."""
    request = mocker.Mock()
    request.method = "GET"
    request.url.path = "/api/products/1"
    return request


@pytest.mark.unit
class TestCatalogErrorHandler:
    """Test handling of application errors."""

    async def test_validation_error_returns_errors_body(
        self, mock_request: MockType
    ) -> None:
        """Test ValidationError becomes a 400 with the field errors."""
        field_error = {
            "type": "field",
            "value": "abc",
            "msg": "ID no valido",
            "path": "id",
            "location": "params",
        }
        error = ValidationError("Request validation failed", errors=[field_error])

        response = await catalog_error_handler(mock_request, error)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response_json(response) == {"errors": [field_error]}

    async def test_not_found_error_returns_error_body(
        self, mock_request: MockType
    ) -> None:
        """Test NotFoundError becomes a 404 with the message only."""
        error = NotFoundError("Producto no Encontrado", context={"product_id": 1})

        response = await catalog_error_handler(mock_request, error)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response_json(response) == {"error": "Producto no Encontrado"}

    async def test_other_errors_use_envelope(self, mock_request: MockType) -> None:
        """Test other application errors become a 500 envelope."""
        RequestContext.set_correlation_id("corr-1")
        RequestContext.set_request_id("req-1")
        error = CatalogError(
            ErrorCode.INTERNAL_ERROR,
            "Price feed unavailable",
            Severity.HIGH,
            context={"feed": "supplier", "api_key": "sk-1"},
        )

        response = await catalog_error_handler(mock_request, error)

        body = response_json(response)
        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert body["error_code"] == "INTERNAL_ERROR"
        assert body["message"] == "Price feed unavailable"
        assert body["severity"] == "HIGH"
        assert body["correlation_id"] == "corr-1"
        assert body["request_id"] == "req-1"
        assert body["details"] == {"feed": "supplier", "api_key": "[REDACTED]"}
        assert body["service_info"]["name"] == "Product Catalog API"

    async def test_logs_expected_errors_at_info(
        self, mock_request: MockType, mocker: MockerFixture
    ) -> None:
        """Test LOW severity errors are logged at info, not error."""
        mock_logger = mocker.patch("src.api.middleware.error_handler.logger")

        error = NotFoundError("Producto no Encontrado")

        await catalog_error_handler(mock_request, error)

        mock_logger.info.assert_called_once()
        mock_logger.error.assert_not_called()

    async def test_rejects_other_exceptions(self, mock_request: MockType) -> None:
        """Test a non-CatalogError raises TypeError."""
        with pytest.raises(TypeError, match="Expected CatalogError"):
            await catalog_error_handler(mock_request, ValueError("nope"))


@pytest.mark.unit
class TestRequestValidationErrorHandler:
    """Test handling of schema-level request errors."""

    def test_field_errors_from_pydantic(self) -> None:
        """Test location, path and value are mapped from each error."""
        errors = [
            {
                "type": "float_parsing",
                "loc": ("body", "price"),
                "msg": "Input should be a valid number",
                "input": "abc",
            },
            {
                "type": "missing",
                "loc": ("body", "name"),
                "msg": "Field required",
                "input": {"price": "abc"},
            },
            {
                "type": "int_parsing",
                "loc": ("path", "id"),
                "msg": "Input should be a valid integer",
                "input": "x",
            },
            {
                "type": "json_invalid",
                "loc": ("body", 9),
                "msg": "JSON decode error",
                "input": {},
            },
        ]

        result = [error.model_dump() for error in field_errors_from_pydantic(errors)]

        assert result == [
            {
                "type": "field",
                "value": "abc",
                "msg": "Input should be a valid number",
                "path": "price",
                "location": "body",
            },
            {
                "type": "field",
                "value": None,
                "msg": "Field required",
                "path": "name",
                "location": "body",
            },
            {
                "type": "field",
                "value": "x",
                "msg": "Input should be a valid integer",
                "path": "id",
                "location": "params",
            },
            {
                "type": "field",
                "value": {},
                "msg": "JSON decode error",
                "path": "9",
                "location": "body",
            },
        ]

    def test_whole_body_error_uses_body_as_path(self) -> None:
        """Test errors located at the body root are reported against "body"."""
        [error] = field_errors_from_pydantic(
            [{"type": "model_type", "loc": ("body",), "msg": "Bad", "input": []}]
        )

        assert error.path == "body"
        assert error.location == "body"

    async def test_returns_400(self, mock_request: MockType) -> None:
        """Test the handler responds with the validation error contract."""
        exc = RequestValidationError(
            [
                {
                    "type": "bool_parsing",
                    "loc": ("body", "availability"),
                    "msg": "Input should be a valid boolean",
                    "input": "hola",
                }
            ]
        )

        response = await request_validation_error_handler(mock_request, exc)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        [error] = response_json(response)["errors"]
        assert error["path"] == "availability"
        assert error["value"] == "hola"

    async def test_rejects_other_exceptions(self, mock_request: MockType) -> None:
        """Test a non-RequestValidationError raises TypeError."""
        with pytest.raises(TypeError, match="Expected RequestValidationError"):
            await request_validation_error_handler(mock_request, ValueError())


@pytest.mark.unit
class TestHttpExceptionHandler:
    """Test handling of Starlette HTTP exceptions."""

    @pytest.mark.parametrize(
        ("status_code", "error_code"),
        [
            (status.HTTP_404_NOT_FOUND, "NOT_FOUND"),
            (status.HTTP_405_METHOD_NOT_ALLOWED, "VALIDATION_ERROR"),
            (status.HTTP_503_SERVICE_UNAVAILABLE, "INTERNAL_ERROR"),
        ],
    )
    async def test_maps_status_to_error_code(
        self, status_code: int, error_code: str, mock_request: MockType
    ) -> None:
        """Test the envelope error code follows the status class."""
        response = await http_exception_handler(
            mock_request, HTTPException(status_code=status_code, detail="Nope")
        )

        body = response_json(response)
        assert response.status_code == status_code
        assert body["error_code"] == error_code
        assert body["message"] == "Nope"
        assert body["request_id"].startswith("req-")

    async def test_preserves_headers(self, mock_request: MockType) -> None:
        """Test exception headers are copied to the response."""
        exc = HTTPException(
            status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
            detail="Method Not Allowed",
            headers={"Allow": "GET"},
        )

        response = await http_exception_handler(mock_request, exc)

        assert response.headers["allow"] == "GET"

    async def test_rejects_other_exceptions(self, mock_request: MockType) -> None:
        """Test a non-HTTPException raises TypeError."""
        with pytest.raises(TypeError, match="Expected HTTPException"):
            await http_exception_handler(mock_request, ValueError())


@pytest.mark.unit
class TestGenericExceptionHandler:
    """Test the catch-all handler."""

    async def test_development_includes_details(self, mock_request: MockType) -> None:
        """Test details and debug info are included outside production."""
        try:
            raise RuntimeError("database exploded")
        except RuntimeError as exc:
            response = await generic_exception_handler(mock_request, exc)

        body = response_json(response)
        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert body["error_code"] == "INTERNAL_ERROR"
        assert body["severity"] == "CRITICAL"
        assert body["message"] == "Internal server error: RuntimeError"
        assert body["details"] == {"error": "database exploded", "type": "RuntimeError"}
        assert body["debug_info"]["exception_type"] == "RuntimeError"
        assert body["debug_info"]["stack_trace"]

    async def test_production_hides_details(
        self, mock_request: MockType, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test production responses do not leak internals."""
        monkeypatch.setenv("ENVIRONMENT", "production")

        response = await generic_exception_handler(
            mock_request, RuntimeError("database exploded")
        )

        body = response_json(response)
        assert body["message"] == "An internal server error occurred"
        assert body["details"] is None
        assert body["debug_info"] is None
        assert "database exploded" not in response.body.decode()


@pytest.mark.unit
class TestRegistration:
    """Test helper functions and handler registration."""

    def test_get_service_info(self, mock_settings: Settings) -> None:
        """Test service metadata is taken from settings."""
        result = get_service_info(mock_settings)

        assert result == ServiceInfo(
            name="TestCatalog", version="1.0.0", environment="development"
        )

    def test_register_exception_handlers(self) -> None:
        """Test every handler is registered on the application."""
        app = FastAPI()

        register_exception_handlers(app)

        assert app.exception_handlers[CatalogError] is catalog_error_handler
        assert (
            app.exception_handlers[RequestValidationError]
            is request_validation_error_handler
        )
        assert app.exception_handlers[HTTPException] is http_exception_handler
        assert app.exception_handlers[Exception] is generic_exception_handler
