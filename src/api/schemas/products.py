"""Product request and response schemas.

Request payloads are only parsed after the route's validation rules have
passed, so they carry types and coercion, not the business constraints.
"""

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class ProductCreate(BaseModel):
    """Body of ``POST /api/products``."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    name: str = Field(
        ..., description="The Product name", examples=["Monitor Curvo 49 Pulgadas"]
    )
    price: float = Field(..., description="The Product price", examples=[399])


class ProductUpdate(ProductCreate):
    """Body of ``PUT /api/products/{id}``."""

    availability: bool = Field(
        ..., description="The Product availability", examples=[True]
    )


class ProductRead(BaseModel):
    """Public representation of a product."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="The Product ID", examples=[1])
    name: str = Field(
        ..., description="The Product name", examples=["Monitor Curvo de 49 Pulgadas"]
    )
    price: float = Field(..., description="The Product price", examples=[300])
    availability: bool = Field(
        ..., description="The Product availability", examples=[True]
    )

    @field_serializer("price")
    def serialize_price(self, price: float) -> int | float:
        """Render whole prices as integers, so 300.0 is sent as 300."""
        return int(price) if price.is_integer() else price


class ProductResponse(BaseModel):
    """Envelope for a single product."""

    data: ProductRead


class ProductListResponse(BaseModel):
    """Envelope for a list of products."""

    data: list[ProductRead]


class MessageResponse(BaseModel):
    """Envelope for a plain confirmation message."""

    data: str = Field(..., examples=["Producto Eliminado"])
