from __future__ import annotations

from packages.shared.schemas.catalog_v1 import CustomerV1
from services.storefront.app.services.catalog_base import CatalogClient


class CustomerProfileMissingError(Exception):
    """The signed-in user has no usable customer record in the catalog service."""

    def __init__(self, username: str, message: str) -> None:
        super().__init__(message)
        self.username = username
        self.message = message


def resolve_customer(catalog: CatalogClient, username: str) -> CustomerV1:
    """Return the catalog customer whose username matches exactly.

    Looked up on every call: profiles can be created or edited between sessions.
    """

    customer = next((c for c in catalog.get_customers() if c.username == username), None)

    if customer is None:
        raise CustomerProfileMissingError(
            username, "Please complete your customer profile before checkout."
        )

    if not customer.id:
        raise CustomerProfileMissingError(
            username, "Could not find customer profile in the system."
        )

    return customer
