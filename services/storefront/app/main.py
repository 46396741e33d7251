"""Storefront API service entrypoint."""

from fastapi import FastAPI

from services.storefront.app.db.init_db import init_db
from services.storefront.app.logging_config import configure_logging
from services.storefront.app.routers.cart import router as cart_router
from services.storefront.app.routers.checkout import router as checkout_router
from services.storefront.app.routers.orders import router as orders_router

configure_logging()

app = FastAPI(title="Storefront API")

app.include_router(cart_router)
app.include_router(checkout_router)
app.include_router(orders_router)


@app.on_event("startup")
def _startup() -> None:
    init_db()


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}
