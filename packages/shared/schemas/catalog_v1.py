"""Catalog service record schemas (v1).

These mirror the JSON the remote catalog/customer/order service speaks. Keys are camelCase
on the wire; Python code uses the snake_case attribute names.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CatalogModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OrderStatusV1(str, Enum):
    SUBMITTED = "Submitted"
    PROCESSING = "Processing"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class CustomerV1(_CatalogModel):
    id: str = ""
    # Records created before sign-up was linked have no username; they never match a user.
    username: str | None = None
    name: str = ""
    surname: str = ""
    email: str = ""
    shipping_address: str = ""


class ProductV1(_CatalogModel):
    id: str
    name: str = Field(alias="productName")
    description: str = ""
    price: float = 0.0
    stock_available: int = 0
    image_url: str = ""


class OrderV1(_CatalogModel):
    id: str
    customer_id: str
    product_id: str
    product_name: str = ""
    quantity: int

    # Snapshotted by the service when the order is created.
    unit_price: float = 0.0
    total_price: float = 0.0

    status: OrderStatusV1 = OrderStatusV1.SUBMITTED
    order_date_utc: datetime


class CreateOrderRequestV1(_CatalogModel):
    customer_id: str
    product_id: str
    quantity: int = Field(..., ge=1)


class UpdateOrderStatusRequestV1(_CatalogModel):
    status: OrderStatusV1
