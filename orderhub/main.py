# orderhub/main.py
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from orderhub.api import register_error_handlers
from orderhub.api.routers import carts, orders, health
from orderhub.data.database import init_db
from orderhub.services.product_client import ProductClient
from orderhub.services.user_client import UserClient
from orderhub.utils.logging import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("Order service ready")
    yield


def create_app(
    product_client: ProductClient | None = None,
    user_client: UserClient | None = None,
    lifespan=lifespan,
) -> FastAPI:
    """
    Composition root: HTTP clients are built once here and shared by
    every request through app.state.
    """
    app = FastAPI(
        title="Order Service",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state.product_client = product_client or ProductClient()
    app.state.user_client = user_client or UserClient()

    register_error_handlers(app)

    # Include routers
    app.include_router(health.router)
    app.include_router(carts.router)
    app.include_router(orders.router)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
