"""Product CRUD endpoints mounted under ``/api/products``.

Every route that reads a path ID or a body declares its validation rules as
a route dependency, so malformed input is rejected with a 400 before the
handler runs and before a database session is opened.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, status
from loguru import logger

from src.api.constants import PRODUCT_DELETED_MESSAGE, PRODUCT_NOT_FOUND_MESSAGE
from src.api.schemas.errors import NotFoundResponse, ValidationErrorResponse
from src.api.schemas.products import (
    MessageResponse,
    ProductCreate,
    ProductListResponse,
    ProductRead,
    ProductResponse,
    ProductUpdate,
)
from src.api.validation import body, is_positive, param, validate_request
from src.core.exceptions import NotFoundError
from src.core.observability import add_span_attributes
from src.domain.products import Product, ProductRepository
from src.infrastructure.database import DatabaseSession

ID_RULE = param("id").is_int("ID no valido")
NAME_RULE = body("name").not_empty("El nombre del Producto no puede ir vacio")
PRICE_RULE = (
    body("price")
    .is_numeric("Valor no válido")
    .not_empty("El precio del Producto no puede ir vacio")
    .custom(is_positive, "Precio no valido")
)
AVAILABILITY_RULE = body("availability").is_boolean(
    "Valor para disponibilidad no válido"
)

VALIDATION_ERROR_DOC = {
    status.HTTP_400_BAD_REQUEST: {
        "model": ValidationErrorResponse,
        "description": "Bad Request - Invalid input data",
    }
}
NOT_FOUND_DOC = {
    status.HTTP_404_NOT_FOUND: {
        "model": NotFoundResponse,
        "description": "Not Found",
    }
}

ProductId = Annotated[int, Path(alias="id", description="The ID of the product")]


def get_product_repository(db: DatabaseSession) -> ProductRepository:
    """Provide a ProductRepository bound to the request's session."""
    return ProductRepository(db)


ProductRepositoryDep = Annotated[ProductRepository, Depends(get_product_repository)]

router = APIRouter(prefix="/api/products", tags=["Products"])


async def _get_or_404(repo: ProductRepository, product_id: int) -> Product:
    product = await repo.get_by_id(product_id)
    if product is None:
        raise NotFoundError(
            PRODUCT_NOT_FOUND_MESSAGE, context={"product_id": product_id}
        )
    return product


@router.get(
    "",
    response_model=ProductListResponse,
    summary="Get a list of products",
)
async def list_products(repo: ProductRepositoryDep) -> ProductListResponse:
    """Return every product, the most recently created first."""
    products = await repo.list_newest_first()
    add_span_attributes(product_count=len(products))
    return ProductListResponse(
        data=[ProductRead.model_validate(product) for product in products]
    )


@router.get(
    "/{id}",
    response_model=ProductResponse,
    summary="Get a product by ID",
    responses={**VALIDATION_ERROR_DOC, **NOT_FOUND_DOC},
    dependencies=[Depends(validate_request(ID_RULE))],
)
async def get_product(
    product_id: ProductId, repo: ProductRepositoryDep
) -> ProductResponse:
    """Return a single product."""
    add_span_attributes(product_id=product_id)
    product = await _get_or_404(repo, product_id)
    return ProductResponse(data=ProductRead.model_validate(product))


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Creates a new product",
    responses=VALIDATION_ERROR_DOC,
    dependencies=[Depends(validate_request(NAME_RULE, PRICE_RULE))],
)
async def create_product(
    payload: ProductCreate, repo: ProductRepositoryDep
) -> ProductResponse:
    """Create a product; new products are available."""
    product = await repo.create(Product(name=payload.name, price=payload.price))
    add_span_attributes(product_id=product.id)
    logger.info("Product created", product_id=product.id)
    return ProductResponse(data=ProductRead.model_validate(product))


@router.put(
    "/{id}",
    response_model=ProductResponse,
    summary="Updates a product with user input",
    responses={**VALIDATION_ERROR_DOC, **NOT_FOUND_DOC},
    dependencies=[
        Depends(
            validate_request(ID_RULE, NAME_RULE, PRICE_RULE, AVAILABILITY_RULE)
        )
    ],
)
async def update_product(
    product_id: ProductId, payload: ProductUpdate, repo: ProductRepositoryDep
) -> ProductResponse:
    """Replace the name, price and availability of a product."""
    add_span_attributes(product_id=product_id)
    product = await repo.update(product_id, payload.model_dump())
    if product is None:
        raise NotFoundError(
            PRODUCT_NOT_FOUND_MESSAGE, context={"product_id": product_id}
        )
    logger.info("Product updated", product_id=product_id)
    return ProductResponse(data=ProductRead.model_validate(product))


@router.patch(
    "/{id}",
    response_model=ProductResponse,
    summary="Update Product availability",
    responses={**VALIDATION_ERROR_DOC, **NOT_FOUND_DOC},
    dependencies=[Depends(validate_request(ID_RULE))],
)
async def toggle_product_availability(
    product_id: ProductId, repo: ProductRepositoryDep
) -> ProductResponse:
    """Flip the availability of a product."""
    add_span_attributes(product_id=product_id)
    product = await _get_or_404(repo, product_id)
    availability = product.toggle_availability()
    product = await repo.save(product)
    logger.info(
        "Product availability toggled",
        product_id=product_id,
        availability=availability,
    )
    return ProductResponse(data=ProductRead.model_validate(product))


@router.delete(
    "/{id}",
    response_model=MessageResponse,
    summary="Deletes a product by a given ID",
    responses={**VALIDATION_ERROR_DOC, **NOT_FOUND_DOC},
    dependencies=[Depends(validate_request(ID_RULE))],
)
async def delete_product(
    product_id: ProductId, repo: ProductRepositoryDep
) -> MessageResponse:
    """Delete a product."""
    add_span_attributes(product_id=product_id)
    if not await repo.delete(product_id):
        raise NotFoundError(
            PRODUCT_NOT_FOUND_MESSAGE, context={"product_id": product_id}
        )
    logger.info("Product deleted", product_id=product_id)
    return MessageResponse(data=PRODUCT_DELETED_MESSAGE)
