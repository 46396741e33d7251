from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from services.storefront.app.auth.deps import Principal, get_principal
from services.storefront.app.db.deps import get_db
from services.storefront.app.models.cart import CartLineAddRequest, CartLineOut, CartOut
from services.storefront.app.services.cart_store import CartStore
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/v1/cart", response_model=CartOut)
def get_cart(
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
) -> CartOut:
    lines = CartStore(db).list_lines(principal.username)
    return CartOut(
        username=principal.username,
        lines=[CartLineOut.model_validate(line) for line in lines],
        total_quantity=sum(line.quantity for line in lines),
    )


@router.post("/v1/cart/lines", response_model=CartLineOut)
def add_cart_line(
    payload: CartLineAddRequest,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
) -> CartLineOut:
    try:
        line = CartStore(db).add_or_increment(
            principal.username, payload.product_id, payload.quantity
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    logger.info(
        "Cart line %d for user=%s now product=%s quantity=%d",
        line.id,
        principal.username,
        line.product_id,
        line.quantity,
    )
    return CartLineOut.model_validate(line)


@router.delete("/v1/cart/lines/{line_id}", status_code=204)
def remove_cart_line(
    line_id: int,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
) -> None:
    if not CartStore(db).remove_line(principal.username, line_id):
        raise HTTPException(status_code=404, detail="Cart line not found")
