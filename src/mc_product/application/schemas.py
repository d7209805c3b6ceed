"""Pydantic schemas for mc_product input validation and output shaping.

Validation happens here, before anything reaches the store.
"""

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from src.mc_common.errors import InvalidProductError
from src.mc_common.money import format_currency
from src.mc_product.domain.models import NewProduct, Product


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    price: Decimal = Field(..., ge=0, max_digits=18, decimal_places=2)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    def to_domain(self) -> NewProduct:
        return NewProduct(name=self.name, price=self.price)


def parse_product(data: dict[str, Any]) -> ProductCreate:
    """Validate raw input; pydantic errors surface as InvalidProductError."""
    try:
        return ProductCreate.model_validate(data)
    except ValidationError as exc:
        detail = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
            for err in exc.errors()
        )
        raise InvalidProductError(detail) from exc


class ProductOut(BaseModel):
    id: int
    name: str
    price: Decimal
    price_display: str
    last_updated: str

    @classmethod
    def from_domain(cls, p: Product) -> "ProductOut":
        return cls(
            id=p.id,
            name=p.name,
            price=p.price,
            price_display=format_currency(p.price),
            last_updated=p.last_updated.isoformat(),
        )


class ProductListResponse(BaseModel):
    items: list[ProductOut]
    count: int
