from __future__ import annotations

import argparse

from services.storefront.app.db.database import db_session
from services.storefront.app.db.init_db import init_db
from services.storefront.app.services.cart_store import CartStore


def _parse_line(raw: str) -> tuple[str, int]:
    product_id, _, qty = raw.partition(":")
    product_id = product_id.strip()
    if not product_id:
        raise argparse.ArgumentTypeError(f"Expected PRODUCT_ID[:QTY], got {raw!r}")
    try:
        quantity = int(qty) if qty else 1
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"Quantity must be an integer in {raw!r}") from e
    if quantity < 1:
        raise argparse.ArgumentTypeError(f"Quantity must be at least 1 in {raw!r}")
    return product_id, quantity


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed cart lines for a storefront user")
    parser.add_argument("--username", default="alice")
    parser.add_argument(
        "lines",
        nargs="*",
        type=_parse_line,
        metavar="PRODUCT_ID[:QTY]",
        help="Cart lines to add (default: prod-1:2 prod-2:1)",
    )
    args = parser.parse_args()

    lines = args.lines or [("prod-1", 2), ("prod-2", 1)]

    init_db()

    db = db_session()
    try:
        cart = CartStore(db)
        existing = {line.product_id for line in cart.list_lines(args.username)}

        added = 0
        for product_id, quantity in lines:
            # Re-running the seed must not keep growing quantities.
            if product_id in existing:
                continue
            cart.add_or_increment(args.username, product_id, quantity)
            existing.add(product_id)
            added += 1

        print(f"Seeded {added} cart line(s) for username={args.username}")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    raise SystemExit(main())
