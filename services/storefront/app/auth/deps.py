from __future__ import annotations

from dataclasses import dataclass

from fastapi import Header, HTTPException

ROLE_ADMIN = "Admin"
ROLE_CUSTOMER = "Customer"


@dataclass(frozen=True, slots=True)
class Principal:
    """Who is calling, as vouched for by the upstream session provider."""

    username: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


def get_principal(
    x_storefront_user: str | None = Header(default=None),
    x_storefront_role: str | None = Header(default=None),
) -> Principal:
    username = (x_storefront_user or "").strip()
    if not username:
        raise HTTPException(status_code=401, detail="Sign in required")

    role = (x_storefront_role or ROLE_CUSTOMER).strip()
    if role not in {ROLE_ADMIN, ROLE_CUSTOMER}:
        raise HTTPException(status_code=403, detail=f"Unknown role: {role}")

    return Principal(username=username, role=role)
