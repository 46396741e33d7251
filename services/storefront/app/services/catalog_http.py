from __future__ import annotations

import logging
import os
from typing import Any, TypeVar
from urllib.parse import quote

import httpx
from packages.shared.schemas.catalog_v1 import (
    CreateOrderRequestV1,
    CustomerV1,
    OrderStatusV1,
    OrderV1,
    ProductV1,
    UpdateOrderStatusRequestV1,
)
from pydantic import ValidationError
from services.storefront.app.services.catalog_base import (
    CatalogServiceError,
    CatalogTransportError,
)

logger = logging.getLogger(__name__)

_RecordT = TypeVar("_RecordT", CustomerV1, ProductV1, OrderV1)

DEFAULT_TIMEOUT_SECONDS = 100.0


class HttpCatalogClient:
    """Catalog client for the remote service's JSON API.

    Every call shares one timeout. A 404 on a single-record read means the record is gone and
    is returned as None; every other failure surfaces as a CatalogClientError.
    """

    name = "CATALOG_HTTP"

    def __init__(
        self,
        *,
        base_url: str,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        # The service mounts its functions under /api/.
        api_root = base_url.rstrip("/") + "/api/"
        self._client = httpx.Client(base_url=api_root, timeout=timeout_seconds, transport=transport)

    @classmethod
    def from_env(cls) -> HttpCatalogClient:
        base_url = os.getenv("STOREFRONT_API_BASE_URL", "").strip()
        if not base_url:
            raise ValueError(
                "STOREFRONT_API_BASE_URL is required when STOREFRONT_CATALOG_CLIENT=http"
            )

        raw_timeout = os.getenv("STOREFRONT_API_TIMEOUT_SECONDS", str(DEFAULT_TIMEOUT_SECONDS))
        try:
            timeout = float(raw_timeout)
        except ValueError as e:
            raise ValueError(f"Invalid STOREFRONT_API_TIMEOUT_SECONDS={raw_timeout!r}") from e

        return cls(base_url=base_url, timeout_seconds=timeout)

    def close(self) -> None:
        self._client.close()

    def get_customers(self) -> list[CustomerV1]:
        data = self._request("GET", "customers")
        return [_parse(CustomerV1, c) for c in _as_list(data)]

    def get_customer(self, customer_id: str) -> CustomerV1 | None:
        data = self._request("GET", f"customers/{_segment(customer_id)}", missing_ok=True)
        return None if data is None else _parse(CustomerV1, data)

    def get_products(self) -> list[ProductV1]:
        data = self._request("GET", "products")
        return [_parse(ProductV1, p) for p in _as_list(data)]

    def get_product(self, product_id: str) -> ProductV1 | None:
        data = self._request("GET", f"products/{_segment(product_id)}", missing_ok=True)
        return None if data is None else _parse(ProductV1, data)

    def create_order(self, customer_id: str, product_id: str, quantity: int) -> OrderV1:
        body = CreateOrderRequestV1(
            customer_id=customer_id,
            product_id=product_id,
            quantity=quantity,
        )
        data = self._request("POST", "orders", json=body.model_dump(mode="json", by_alias=True))
        return _parse(OrderV1, data)

    def get_orders(self) -> list[OrderV1]:
        data = self._request("GET", "orders")
        return [_parse(OrderV1, o) for o in _as_list(data)]

    def get_order(self, order_id: str) -> OrderV1 | None:
        data = self._request("GET", f"orders/{_segment(order_id)}", missing_ok=True)
        return None if data is None else _parse(OrderV1, data)

    def update_order_status(self, order_id: str, status: OrderStatusV1) -> OrderV1:
        body = UpdateOrderStatusRequestV1(status=status)
        data = self._request(
            "PATCH",
            f"orders/{_segment(order_id)}/status",
            json=body.model_dump(mode="json", by_alias=True),
        )
        return _parse(OrderV1, data)

    def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        missing_ok: bool = False,
    ) -> Any:
        try:
            resp = self._client.request(method, path, json=json)
        except httpx.TimeoutException as e:
            logger.warning("Catalog %s %s timed out", method, path)
            raise CatalogTransportError(f"Request to catalog service timed out: {e}") from e
        except httpx.TransportError as e:
            logger.warning("Catalog %s %s failed: %s", method, path, e)
            raise CatalogTransportError(str(e) or type(e).__name__) from e

        if resp.status_code == 404 and missing_ok:
            return None

        if resp.is_error:
            raise CatalogServiceError(resp.status_code, _error_detail(resp))

        if not resp.content:
            return None

        try:
            return resp.json()
        except ValueError as e:
            raise CatalogServiceError(resp.status_code, "Response body is not valid JSON") from e


def _error_detail(resp: httpx.Response) -> str:
    try:
        payload = resp.json()
    except ValueError:
        return resp.text or resp.reason_phrase

    if isinstance(payload, dict):
        for key in ("error", "message", "detail"):
            if payload.get(key):
                return str(payload[key])
    return str(payload)


def _segment(record_id: str) -> str:
    # Ids come from users; keep each one inside its own path segment.
    segment = quote(record_id, safe="")
    if segment in {".", ".."}:
        segment = segment.replace(".", "%2E")
    return segment


def _as_list(data: Any) -> list[Any]:
    if data is None:
        return []
    if not isinstance(data, list):
        raise CatalogServiceError(200, f"Expected a list, got {type(data).__name__}")
    return data


def _parse(model: type[_RecordT], data: Any) -> _RecordT:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        name = model.__name__.removesuffix("V1").lower()
        raise CatalogServiceError(200, f"Unexpected {name} payload: {data!r}") from e
