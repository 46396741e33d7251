from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CartLineAddRequest(_ApiModel):
    product_id: str = Field(..., min_length=1)
    quantity: int = Field(1, ge=1)


class CartLineOut(_ApiModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    customer_username: str
    product_id: str
    quantity: int
    created_at: datetime


class CartOut(_ApiModel):
    username: str
    lines: list[CartLineOut]
    total_quantity: int


class CheckoutPreviewLine(_ApiModel):
    line_id: int
    product_id: str
    quantity: int

    # None when the product is no longer in the catalog.
    product_name: str | None = None
    unit_price: float | None = None
    stock_available: int | None = None
    line_total: float | None = None


class CheckoutPreview(_ApiModel):
    username: str
    lines: list[CheckoutPreviewLine]
    estimated_total: float
    warnings: list[str] = Field(default_factory=list)
