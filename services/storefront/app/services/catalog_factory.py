from __future__ import annotations

import os
from typing import TYPE_CHECKING

from services.storefront.app.services.catalog_base import CatalogClient
from services.storefront.app.services.catalog_mock import InMemoryCatalogClient

if TYPE_CHECKING:
    from services.storefront.app.services.catalog_http import HttpCatalogClient

# The mock keeps its records in memory, so every request in the process must share one.
_MOCK_CLIENT: InMemoryCatalogClient | None = None

# The HTTP client pools connections; reuse it until the target configuration changes.
_HTTP_CLIENT: HttpCatalogClient | None = None
_HTTP_CONFIG: tuple[str, str] | None = None


def get_catalog_client() -> CatalogClient:
    """Select a catalog client based on env vars.

    Defaults to the in-memory mock so tests and local dev are deterministic unless explicitly
    configured otherwise.
    """

    global _MOCK_CLIENT, _HTTP_CLIENT, _HTTP_CONFIG

    mode = os.getenv("STOREFRONT_CATALOG_CLIENT", "mock").strip().lower()

    if mode == "mock":
        if _MOCK_CLIENT is None:
            _MOCK_CLIENT = InMemoryCatalogClient.seeded()
        return _MOCK_CLIENT

    if mode == "http":
        from services.storefront.app.services.catalog_http import HttpCatalogClient

        config = (
            os.getenv("STOREFRONT_API_BASE_URL", ""),
            os.getenv("STOREFRONT_API_TIMEOUT_SECONDS", ""),
        )
        if _HTTP_CLIENT is None or _HTTP_CONFIG != config:
            client = HttpCatalogClient.from_env()
            if _HTTP_CLIENT is not None:
                _HTTP_CLIENT.close()
            _HTTP_CLIENT = client
            _HTTP_CONFIG = config
        return _HTTP_CLIENT

    raise ValueError(f"Unknown STOREFRONT_CATALOG_CLIENT={mode!r}. Expected mock or http.")
