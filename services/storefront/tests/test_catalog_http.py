from __future__ import annotations

import json
from collections.abc import Generator

import httpx
import pytest
from packages.shared.schemas.catalog_v1 import OrderStatusV1
from packages.shared.schemas.notice_v1 import CheckoutStatusV1
from services.storefront.app.db.models import Base
from services.storefront.app.services.cart_store import CartStore
from services.storefront.app.services.catalog_base import (
    CatalogServiceError,
    CatalogTransportError,
)
from services.storefront.app.services.catalog_http import HttpCatalogClient
from services.storefront.app.services.checkout import place_orders
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

_ORDER = {
    "id": "ord-1",
    "customerId": "cust-1",
    "productId": "prod-1",
    "productName": "Wireless Mouse",
    "quantity": 2,
    "unitPrice": 249.99,
    "totalPrice": 499.98,
    "status": "Submitted",
    "orderDateUtc": "2026-03-01T10:15:00Z",
}


def _client(handler) -> HttpCatalogClient:
    return HttpCatalogClient(
        base_url="http://catalog.test/",
        timeout_seconds=5,
        transport=httpx.MockTransport(handler),
    )


def test_get_product_reads_camel_case_payload() -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(
            200,
            json={
                "id": "prod-1",
                "productName": "Wireless Mouse",
                "description": "2.4GHz",
                "price": 249.99,
                "stockAvailable": 7,
                "imageUrl": "",
            },
        )

    product = _client(handler).get_product("prod-1")

    assert seen == ["http://catalog.test/api/products/prod-1"]
    assert product is not None
    assert product.name == "Wireless Mouse"
    assert product.stock_available == 7


def test_missing_product_is_none() -> None:
    client = _client(lambda request: httpx.Response(404, json={"error": "Product not found"}))

    assert client.get_product("gone") is None


def test_create_order_posts_ids_and_quantity() -> None:
    bodies: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "POST"
        assert request.url.path == "/api/orders"
        bodies.append(json.loads(request.content))
        return httpx.Response(201, json=_ORDER)

    order = _client(handler).create_order("cust-1", "prod-1", 2)

    assert bodies == [{"customerId": "cust-1", "productId": "prod-1", "quantity": 2}]
    assert order.id == "ord-1"
    assert order.unit_price == 249.99
    assert order.status == OrderStatusV1.SUBMITTED


def test_create_order_rejection_raises_service_error() -> None:
    client = _client(
        lambda request: httpx.Response(409, json={"error": "Insufficient stock. Available: 1"})
    )

    with pytest.raises(CatalogServiceError) as exc:
        client.create_order("cust-1", "prod-1", 5)

    assert exc.value.status_code == 409
    assert exc.value.detail == "Insufficient stock. Available: 1"


def test_404_on_create_is_not_treated_as_missing() -> None:
    client = _client(lambda request: httpx.Response(404, text="Customer not found"))

    with pytest.raises(CatalogServiceError, match="404: Customer not found"):
        client.create_order("nobody", "prod-1", 1)


@pytest.mark.parametrize(
    "exc",
    [
        httpx.ReadTimeout("timed out"),
        httpx.ConnectError("connection refused"),
    ],
)
def test_transport_failures_raise_transport_error(exc: Exception) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise exc

    with pytest.raises(CatalogTransportError):
        _client(handler).create_order("cust-1", "prod-1", 1)


def test_update_order_status_patches_status() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "PATCH"
        assert request.url.path == "/api/orders/ord-1/status"
        assert json.loads(request.content) == {"status": "Processing"}
        return httpx.Response(200, json={**_ORDER, "status": "Processing"})

    order = _client(handler).update_order_status("ord-1", OrderStatusV1.PROCESSING)

    assert order.status == OrderStatusV1.PROCESSING


def test_get_customers_lists_all() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json=[
                {"id": "c-1", "username": "alice", "shippingAddress": "1 Main Road"},
                {"id": "c-2", "username": "bob"},
            ],
        )

    customers = _client(handler).get_customers()

    assert [c.username for c in customers] == ["alice", "bob"]
    assert customers[0].shipping_address == "1 Main Road"


def test_from_env_requires_base_url(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("STOREFRONT_API_BASE_URL", raising=False)

    with pytest.raises(ValueError, match="STOREFRONT_API_BASE_URL is required"):
        HttpCatalogClient.from_env()


def test_from_env_rejects_bad_timeout(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STOREFRONT_API_BASE_URL", "http://catalog.test")
    monkeypatch.setenv("STOREFRONT_API_TIMEOUT_SECONDS", "soon")

    with pytest.raises(ValueError, match="Invalid STOREFRONT_API_TIMEOUT_SECONDS"):
        HttpCatalogClient.from_env()


def test_get_customer_and_products() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/customers/c-1":
            return httpx.Response(200, json={"id": "c-1", "username": "alice"})
        if request.url.path == "/api/products":
            return httpx.Response(
                200, json=[{"id": "p-1", "productName": "Mouse", "stockAvailable": 2}]
            )
        return httpx.Response(404)

    client = _client(handler)

    assert client.get_customer("c-1").username == "alice"
    assert client.get_customer("c-404") is None
    assert [p.name for p in client.get_products()] == ["Mouse"]


def test_customers_without_username_are_kept_but_never_match() -> None:
    client = _client(
        lambda request: httpx.Response(
            200,
            json=[{"id": "c-0", "username": None}, {"id": "c-1", "username": "alice"}],
        )
    )

    customers = client.get_customers()

    assert [(c.id, c.username) for c in customers] == [("c-0", None), ("c-1", "alice")]


def test_malformed_product_payload_raises_service_error() -> None:
    client = _client(lambda request: httpx.Response(200, json={"id": "prod-1", "price": "cheap"}))

    with pytest.raises(CatalogServiceError, match="Unexpected product payload"):
        client.get_product("prod-1")


def test_list_endpoint_returning_an_object_raises_service_error() -> None:
    client = _client(lambda request: httpx.Response(200, json={"id": "prod-1"}))

    with pytest.raises(CatalogServiceError, match="Expected a list"):
        client.get_products()


@pytest.mark.parametrize(
    ("product_id", "raw_path"),
    [
        ("a/b?x=1", b"/api/products/a%2Fb%3Fx%3D1"),
        ("../customers", b"/api/products/..%2Fcustomers"),
        ("..", b"/api/products/%2E%2E"),
        ("mouse 2", b"/api/products/mouse%202"),
    ],
)
def test_ids_stay_inside_their_path_segment(product_id: str, raw_path: bytes) -> None:
    seen: list[tuple[bytes, bytes]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.url.raw_path, request.url.query))
        return httpx.Response(404)

    assert _client(handler).get_product(product_id) is None
    assert seen == [(raw_path, b"")]


@pytest.fixture()
def cart() -> Generator[CartStore, None, None]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    Base.metadata.create_all(bind=engine)
    session = Session(engine)
    try:
        yield CartStore(session)
    finally:
        session.close()
        engine.dispose()


def test_checkout_over_http_tolerates_odd_remote_records(cart: CartStore) -> None:
    products = {
        "/api/products/prod-bad": {"id": "prod-bad", "stockAvailable": "plenty"},
        "/api/products/prod-1": {
            "id": "prod-1",
            "productName": "Wireless Mouse",
            "price": 249.99,
            "stockAvailable": 10,
        },
    }
    created: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path == "/api/customers":
            return httpx.Response(
                200,
                json=[{"id": "c-0", "username": None}, {"id": "cust-1", "username": "alice"}],
            )
        if path in products:
            return httpx.Response(200, json=products[path])
        if path == "/api/orders" and request.method == "POST":
            created.append(json.loads(request.content)["productId"])
            return httpx.Response(201, json=_ORDER)
        return httpx.Response(404)

    cart.add_or_increment("alice", "prod-bad", 1)
    cart.add_or_increment("alice", "prod-1", 2)

    result = place_orders("alice", cart=cart, catalog=_client(handler))

    assert result.status == CheckoutStatusV1.PARTIAL
    assert result.succeeded_count == 1
    assert len(result.failed_messages) == 1
    assert result.failed_messages[0].startswith("Failed to create order for product prod-bad: ")
    assert "Unexpected product payload" in result.failed_messages[0]
    assert created == ["prod-1"]
    assert [line.product_id for line in cart.list_lines("alice")] == ["prod-bad"]
