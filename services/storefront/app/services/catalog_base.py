from __future__ import annotations

from typing import Protocol

from packages.shared.schemas.catalog_v1 import CustomerV1, OrderStatusV1, OrderV1, ProductV1


class CatalogClientError(Exception):
    """Base class for catalog service client errors."""


class CatalogTransportError(CatalogClientError):
    """The catalog service could not be reached, or the call timed out."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class CatalogServiceError(CatalogClientError):
    """The catalog service answered, but rejected the call."""

    def __init__(self, status_code: int, detail: str) -> None:
        super().__init__(f"Catalog service returned {status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


class CatalogClient(Protocol):
    name: str

    def get_customers(self) -> list[CustomerV1]: ...

    def get_customer(self, customer_id: str) -> CustomerV1 | None: ...

    def get_products(self) -> list[ProductV1]: ...

    def get_product(self, product_id: str) -> ProductV1 | None: ...

    def create_order(self, customer_id: str, product_id: str, quantity: int) -> OrderV1: ...

    def get_orders(self) -> list[OrderV1]: ...

    def get_order(self, order_id: str) -> OrderV1 | None: ...

    def update_order_status(self, order_id: str, status: OrderStatusV1) -> OrderV1: ...
