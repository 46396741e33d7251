from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException
from packages.shared.schemas.catalog_v1 import OrderV1
from services.storefront.app.auth.deps import Principal, get_principal
from services.storefront.app.models.order import OrderStatusUpdateRequest
from services.storefront.app.services.catalog_base import (
    CatalogClient,
    CatalogClientError,
    CatalogServiceError,
    CatalogTransportError,
)
from services.storefront.app.services.catalog_factory import get_catalog_client
from services.storefront.app.services.identity import (
    CustomerProfileMissingError,
    resolve_customer,
)

router = APIRouter()


def _raise_catalog_http_error(e: Exception) -> None:
    if isinstance(e, CustomerProfileMissingError):
        raise HTTPException(status_code=404, detail=e.message) from e

    if isinstance(e, CatalogTransportError):
        raise HTTPException(status_code=504, detail=str(e)) from e

    if isinstance(e, CatalogServiceError) and e.status_code == 404:
        raise HTTPException(status_code=404, detail=e.detail) from e

    if isinstance(e, CatalogClientError):
        raise HTTPException(status_code=502, detail=str(e)) from e

    raise HTTPException(status_code=500, detail="Internal Server Error") from e


def _catalog() -> CatalogClient:
    try:
        return get_catalog_client()
    except ValueError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e


def _newest_first(orders: list[OrderV1]) -> list[OrderV1]:
    def key(order: OrderV1) -> datetime:
        placed = order.order_date_utc
        return placed if placed.tzinfo else placed.replace(tzinfo=timezone.utc)

    return sorted(orders, key=key, reverse=True)


@router.get("/v1/orders", response_model=list[OrderV1])
def list_orders(principal: Principal = Depends(get_principal)) -> list[OrderV1]:
    catalog = _catalog()

    try:
        orders = catalog.get_orders()
        if principal.is_admin:
            return _newest_first(orders)

        customer = resolve_customer(catalog, principal.username)
    except Exception as e:
        _raise_catalog_http_error(e)

    return _newest_first([o for o in orders if o.customer_id == customer.id])


@router.get("/v1/orders/{order_id}", response_model=OrderV1)
def get_order(order_id: str, principal: Principal = Depends(get_principal)) -> OrderV1:
    catalog = _catalog()

    try:
        order = catalog.get_order(order_id)
        if order is None:
            raise HTTPException(status_code=404, detail="Order not found")

        if not principal.is_admin:
            customer = resolve_customer(catalog, principal.username)
            if order.customer_id != customer.id:
                # Hide other customers' orders entirely.
                raise HTTPException(status_code=404, detail="Order not found")
    except HTTPException:
        raise
    except Exception as e:
        _raise_catalog_http_error(e)

    return order


@router.patch("/v1/orders/{order_id}/status", response_model=OrderV1)
def update_order_status(
    order_id: str,
    payload: OrderStatusUpdateRequest,
    principal: Principal = Depends(get_principal),
) -> OrderV1:
    if not principal.is_admin:
        raise HTTPException(status_code=403, detail="Access denied.")

    catalog = _catalog()
    try:
        return catalog.update_order_status(order_id, payload.status)
    except Exception as e:
        _raise_catalog_http_error(e)
