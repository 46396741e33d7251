from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from packages.shared.schemas.notice_v1 import CheckoutNoticeV1, CheckoutStatusV1, NoticeLevelV1
from services.storefront.app.auth.deps import Principal, get_principal
from services.storefront.app.db.deps import get_db
from services.storefront.app.models.cart import CheckoutPreview, CheckoutPreviewLine
from services.storefront.app.services.cart_store import CartStore
from services.storefront.app.services.catalog_base import CatalogClientError
from services.storefront.app.services.catalog_factory import get_catalog_client
from services.storefront.app.services.checkout import (
    EMPTY_CART_MESSAGE,
    CheckoutResult,
    place_orders,
)
from sqlalchemy.orm import Session

router = APIRouter()

_NOTICE_ROUTING: dict[CheckoutStatusV1, tuple[NoticeLevelV1, str]] = {
    CheckoutStatusV1.SUCCEEDED: (NoticeLevelV1.SUCCESS, "/v1/orders"),
    CheckoutStatusV1.PARTIAL: (NoticeLevelV1.WARNING, "/v1/orders"),
    CheckoutStatusV1.FAILED: (NoticeLevelV1.ERROR, "/v1/checkout"),
    CheckoutStatusV1.EMPTY_CART: (NoticeLevelV1.INFO, "/v1/cart"),
    CheckoutStatusV1.PROFILE_MISSING: (NoticeLevelV1.ERROR, "/v1/customers/profile"),
    CheckoutStatusV1.ERROR: (NoticeLevelV1.ERROR, "/v1/checkout"),
}


@router.get("/v1/checkout", response_model=CheckoutPreview)
def preview_checkout(
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
) -> CheckoutPreview:
    lines = CartStore(db).list_lines(principal.username)
    if not lines:
        return CheckoutPreview(
            username=principal.username,
            lines=[],
            estimated_total=0.0,
            warnings=[EMPTY_CART_MESSAGE],
        )

    try:
        catalog = get_catalog_client()
    except ValueError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e

    preview_lines: list[CheckoutPreviewLine] = []
    warnings: list[str] = []
    total = 0.0
    for line in lines:
        item = CheckoutPreviewLine(
            line_id=line.id,
            product_id=line.product_id,
            quantity=line.quantity,
        )
        try:
            product = catalog.get_product(line.product_id)
        except CatalogClientError as e:
            warnings.append(f"Could not load product {line.product_id}: {e}")
            preview_lines.append(item)
            continue

        if product is None:
            warnings.append(f"Product {line.product_id} not found")
        else:
            item.product_name = product.name
            item.unit_price = product.price
            item.stock_available = product.stock_available
            item.line_total = round(product.price * line.quantity, 2)
            total += item.line_total
            if product.stock_available < line.quantity:
                warnings.append(
                    f"Insufficient stock for {product.name}. "
                    f"Available: {product.stock_available}, Requested: {line.quantity}"
                )
        preview_lines.append(item)

    return CheckoutPreview(
        username=principal.username,
        lines=preview_lines,
        estimated_total=round(total, 2),
        warnings=warnings,
    )


@router.post("/v1/checkout/confirm", response_model=CheckoutNoticeV1)
def confirm_checkout(
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
) -> CheckoutNoticeV1:
    try:
        catalog = get_catalog_client()
    except ValueError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e

    result = place_orders(principal.username, cart=CartStore(db), catalog=catalog)
    return _result_to_notice(result)


def _result_to_notice(result: CheckoutResult) -> CheckoutNoticeV1:
    level, redirect_to = _NOTICE_ROUTING[result.status]
    return CheckoutNoticeV1(
        status=result.status,
        level=level,
        message=result.message,
        redirect_to=redirect_to,
        succeeded_count=result.succeeded_count,
        failed_messages=list(result.failed_messages),
        order_ids=[order.id for order in result.orders],
    )
