from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from services.storefront.app.db.models import CartLine
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session


class CartStore:
    """Per-user cart lines persisted in the local database.

    A user holds at most one line per product; adding a product that is already in the cart
    increments that line instead of inserting a second one.
    """

    def __init__(self, db: Session) -> None:
        self._db = db

    def list_lines(self, username: str) -> list[CartLine]:
        stmt = (
            select(CartLine)
            .where(CartLine.customer_username == username)
            .order_by(CartLine.id)
        )
        return list(self._db.scalars(stmt))

    def get_line(self, username: str, line_id: int) -> CartLine | None:
        line = self._db.get(CartLine, line_id)
        if line is None or line.customer_username != username:
            return None
        return line

    def add_or_increment(self, username: str, product_id: str, quantity: int) -> CartLine:
        product_id = product_id.strip()
        if not username:
            raise ValueError("Username is required.")
        if not product_id or quantity < 1:
            raise ValueError("Invalid product or quantity.")

        line = self._find_line(username, product_id)
        if line is not None:
            _increment(line, quantity)
            self._db.commit()
        else:
            line = CartLine(customer_username=username, product_id=product_id, quantity=quantity)
            self._db.add(line)
            try:
                self._db.commit()
            except IntegrityError:
                # A concurrent add inserted the same product first; merge into its line.
                self._db.rollback()
                line = self._find_line(username, product_id)
                if line is None:
                    raise
                _increment(line, quantity)
                self._db.commit()

        self._db.refresh(line)
        return line

    def _find_line(self, username: str, product_id: str) -> CartLine | None:
        stmt = select(CartLine).where(
            CartLine.customer_username == username,
            CartLine.product_id == product_id,
        )
        return self._db.scalars(stmt).first()

    def remove_line(self, username: str, line_id: int) -> bool:
        line = self.get_line(username, line_id)
        if line is None:
            return False

        self._db.delete(line)
        self._db.commit()
        return True

    def remove_lines(self, line_ids: Iterable[int]) -> int:
        ids = list(line_ids)
        if not ids:
            return 0

        result = self._db.execute(delete(CartLine).where(CartLine.id.in_(ids)))
        self._db.commit()
        return result.rowcount or 0


def _increment(line: CartLine, quantity: int) -> None:
    line.quantity += quantity
    line.updated_at = datetime.utcnow()
