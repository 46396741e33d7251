"""Order placement from a customer's cart.

Each cart line is validated against current stock and submitted to the catalog service on its
own. A failing line never stops the others; it stays in the cart so the customer can retry or
adjust it, while every line that became an order is removed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from packages.shared.schemas.catalog_v1 import OrderV1, ProductV1
from packages.shared.schemas.notice_v1 import CheckoutStatusV1
from services.storefront.app.db.models import CartLine
from services.storefront.app.services.cart_store import CartStore
from services.storefront.app.services.catalog_base import CatalogClient, CatalogClientError
from services.storefront.app.services.identity import (
    CustomerProfileMissingError,
    resolve_customer,
)

logger = logging.getLogger(__name__)

EMPTY_CART_MESSAGE = "Your cart is empty."
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred. Please try again."


@dataclass(frozen=True, slots=True)
class CheckoutLine:
    line_id: int
    product_id: str
    quantity: int

    @classmethod
    def from_row(cls, row: CartLine) -> CheckoutLine:
        return cls(line_id=row.id, product_id=row.product_id, quantity=row.quantity)


@dataclass(frozen=True, slots=True)
class Validated:
    line: CheckoutLine
    product: ProductV1


@dataclass(frozen=True, slots=True)
class Succeeded:
    line: CheckoutLine
    order: OrderV1


@dataclass(frozen=True, slots=True)
class ProductNotFound:
    line: CheckoutLine

    @property
    def message(self) -> str:
        return f"Product {self.line.product_id} not found"


@dataclass(frozen=True, slots=True)
class InsufficientStock:
    line: CheckoutLine
    product_name: str
    available: int

    @property
    def message(self) -> str:
        return (
            f"Insufficient stock for {self.product_name}. "
            f"Available: {self.available}, Requested: {self.line.quantity}"
        )


@dataclass(frozen=True, slots=True)
class SubmissionFailed:
    line: CheckoutLine
    reason: str

    @property
    def message(self) -> str:
        return f"Failed to create order for product {self.line.product_id}: {self.reason}"


LineFailure = ProductNotFound | InsufficientStock | SubmissionFailed
LineOutcome = Succeeded | LineFailure


@dataclass(frozen=True, slots=True)
class CheckoutResult:
    status: CheckoutStatusV1
    message: str
    succeeded_count: int = 0
    failed_messages: list[str] = field(default_factory=list)
    orders: list[OrderV1] = field(default_factory=list)


def validate_line(catalog: CatalogClient, line: CheckoutLine) -> Validated | LineFailure:
    """Check the line against the product as the catalog sees it right now.

    Advisory only: stock can still run out before the order is created, and the catalog
    service rejects the order in that case.
    """

    try:
        product = catalog.get_product(line.product_id)
    except CatalogClientError as e:
        return SubmissionFailed(line=line, reason=str(e))

    if product is None:
        return ProductNotFound(line=line)

    if product.stock_available < line.quantity:
        return InsufficientStock(
            line=line,
            product_name=product.name,
            available=product.stock_available,
        )

    return Validated(line=line, product=product)


def submit_order(
    catalog: CatalogClient, customer_id: str, validated: Validated
) -> Succeeded | SubmissionFailed:
    line = validated.line
    try:
        order = catalog.create_order(customer_id, line.product_id, line.quantity)
    except CatalogClientError as e:
        return SubmissionFailed(line=line, reason=str(e))

    return Succeeded(line=line, order=order)


def process_line(catalog: CatalogClient, customer_id: str, line: CheckoutLine) -> LineOutcome:
    checked = validate_line(catalog, line)
    if not isinstance(checked, Validated):
        return checked
    return submit_order(catalog, customer_id, checked)


def summarize(outcomes: list[LineOutcome]) -> CheckoutResult:
    orders = [o.order for o in outcomes if isinstance(o, Succeeded)]
    failed = [o.message for o in outcomes if not isinstance(o, Succeeded)]
    count = len(orders)

    if not failed:
        status = CheckoutStatusV1.SUCCEEDED
        message = f"Successfully placed {count} order(s)!"
    elif count:
        status = CheckoutStatusV1.PARTIAL
        message = (
            f"{count} order(s) placed successfully, but {len(failed)} failed: "
            f"{'; '.join(failed)}"
        )
    else:
        status = CheckoutStatusV1.FAILED
        message = f"All orders failed: {'; '.join(failed)}"

    return CheckoutResult(
        status=status,
        message=message,
        succeeded_count=count,
        failed_messages=failed,
        orders=orders,
    )


def place_orders(username: str, *, cart: CartStore, catalog: CatalogClient) -> CheckoutResult:
    """Turn every line in `username`'s cart into an order.

    Never raises: whatever goes wrong is reported through the returned result.
    """

    try:
        return _place_orders(username, cart=cart, catalog=catalog)
    except Exception:
        logger.exception("Checkout failed unexpectedly for user=%s", username)
        return CheckoutResult(status=CheckoutStatusV1.ERROR, message=UNEXPECTED_ERROR_MESSAGE)


def _place_orders(username: str, *, cart: CartStore, catalog: CatalogClient) -> CheckoutResult:
    lines = [CheckoutLine.from_row(row) for row in cart.list_lines(username)]
    if not lines:
        return CheckoutResult(status=CheckoutStatusV1.EMPTY_CART, message=EMPTY_CART_MESSAGE)

    try:
        customer = resolve_customer(catalog, username)
    except CustomerProfileMissingError as e:
        logger.info("Checkout blocked for user=%s: %s", username, e.message)
        return CheckoutResult(status=CheckoutStatusV1.PROFILE_MISSING, message=e.message)
    except CatalogClientError as e:
        logger.warning("Customer lookup failed for user=%s: %s", username, e)
        return CheckoutResult(
            status=CheckoutStatusV1.ERROR,
            message=f"Failed to create order: {e}",
        )

    logger.info(
        "Checkout started user=%s customer=%s lines=%d", username, customer.id, len(lines)
    )

    outcomes: list[LineOutcome] = []
    try:
        for line in lines:
            outcome = process_line(catalog, customer.id, line)
            if not isinstance(outcome, Succeeded):
                logger.warning("Cart line %d not ordered: %s", line.line_id, outcome.message)
            outcomes.append(outcome)
    except Exception:
        logger.exception(
            "Checkout aborted for user=%s after %d of %d lines", username, len(outcomes), len(lines)
        )
        _reconcile(cart, outcomes)
        partial = summarize(outcomes)
        return CheckoutResult(
            status=CheckoutStatusV1.ERROR,
            message=UNEXPECTED_ERROR_MESSAGE,
            succeeded_count=partial.succeeded_count,
            failed_messages=partial.failed_messages,
            orders=partial.orders,
        )

    _reconcile(cart, outcomes)

    result = summarize(outcomes)
    logger.info(
        "Checkout finished user=%s status=%s succeeded=%d failed=%d",
        username,
        result.status.value,
        result.succeeded_count,
        len(result.failed_messages),
    )
    return result


def _reconcile(cart: CartStore, outcomes: list[LineOutcome]) -> None:
    # Only lines that became orders leave the cart.
    succeeded_ids = [o.line.line_id for o in outcomes if isinstance(o, Succeeded)]
    if succeeded_ids:
        cart.remove_lines(succeeded_ids)
