from __future__ import annotations

import threading
from datetime import datetime, timezone
from uuid import uuid4

from packages.shared.schemas.catalog_v1 import CustomerV1, OrderStatusV1, OrderV1, ProductV1
from services.storefront.app.services.catalog_base import CatalogServiceError


class InMemoryCatalogClient:
    """Catalog service stand-in that keeps every record in process memory.

    Order creation behaves like the real service: it snapshots the unit price and decrements
    stock, rejecting the order when stock ran out since the caller last looked.
    """

    name = "CATALOG_MOCK"

    def __init__(
        self,
        *,
        customers: list[CustomerV1] | None = None,
        products: list[ProductV1] | None = None,
    ) -> None:
        self._lock = threading.Lock()
        self._customers: dict[str, CustomerV1] = {c.id: c for c in customers or []}
        self._products: dict[str, ProductV1] = {p.id: p for p in products or []}
        self._orders: dict[str, OrderV1] = {}

    @classmethod
    def seeded(cls) -> InMemoryCatalogClient:
        return cls(
            customers=[
                CustomerV1(
                    id="cust-1",
                    username="alice",
                    name="Alice",
                    surname="Smith",
                    email="alice@example.com",
                    shipping_address="1 Main Road, Cape Town",
                ),
            ],
            products=[
                ProductV1(
                    id="prod-1",
                    name="Wireless Mouse",
                    description="2.4GHz optical mouse",
                    price=249.99,
                    stock_available=25,
                ),
                ProductV1(
                    id="prod-2",
                    name="Mechanical Keyboard",
                    description="Tenkeyless, brown switches",
                    price=1299.0,
                    stock_available=5,
                ),
                ProductV1(
                    id="prod-3",
                    name="USB-C Hub",
                    description="7-in-1 hub",
                    price=499.5,
                    stock_available=0,
                ),
            ],
        )

    def add_customer(self, customer: CustomerV1) -> CustomerV1:
        with self._lock:
            self._customers[customer.id] = customer
        return customer

    def add_product(self, product: ProductV1) -> ProductV1:
        with self._lock:
            self._products[product.id] = product
        return product

    def remove_product(self, product_id: str) -> None:
        with self._lock:
            self._products.pop(product_id, None)

    def get_customers(self) -> list[CustomerV1]:
        return list(self._customers.values())

    def get_customer(self, customer_id: str) -> CustomerV1 | None:
        return self._customers.get(customer_id)

    def get_products(self) -> list[ProductV1]:
        return list(self._products.values())

    def get_product(self, product_id: str) -> ProductV1 | None:
        return self._products.get(product_id)

    def create_order(self, customer_id: str, product_id: str, quantity: int) -> OrderV1:
        with self._lock:
            if customer_id not in self._customers:
                raise CatalogServiceError(404, "Customer not found")

            product = self._products.get(product_id)
            if product is None:
                raise CatalogServiceError(404, "Product not found")

            if product.stock_available < quantity:
                raise CatalogServiceError(
                    409,
                    f"Insufficient stock. Available: {product.stock_available}",
                )

            self._products[product_id] = product.model_copy(
                update={"stock_available": product.stock_available - quantity}
            )

            order = OrderV1(
                id=uuid4().hex,
                customer_id=customer_id,
                product_id=product_id,
                product_name=product.name,
                quantity=quantity,
                unit_price=product.price,
                total_price=round(product.price * quantity, 2),
                status=OrderStatusV1.SUBMITTED,
                order_date_utc=datetime.now(timezone.utc),
            )
            self._orders[order.id] = order
            return order

    def get_orders(self) -> list[OrderV1]:
        return list(self._orders.values())

    def get_order(self, order_id: str) -> OrderV1 | None:
        return self._orders.get(order_id)

    def update_order_status(self, order_id: str, status: OrderStatusV1) -> OrderV1:
        with self._lock:
            order = self._orders.get(order_id)
            if order is None:
                raise CatalogServiceError(404, "Order not found")

            updated = order.model_copy(update={"status": status})
            self._orders[order_id] = updated
            return updated
