import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from bikeshop.api.routes import router
from bikeshop.core.config import settings
from bikeshop.data_access.database import create_db_and_tables


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Configures logging and makes sure the store tables exist before serving."""
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[logging.StreamHandler()],
    )
    create_db_and_tables()
    yield


app = FastAPI(
    title="Bike Shop Commissions API",
    description="Customers, products, salespersons, sales and quarterly commission reports for a bicycle shop",
    version="0.1.0",
    lifespan=lifespan,
)

# Everything except the landing page lives under /api
app.include_router(router)


@app.get("/")
def read_root() -> dict[str, str]:
    """Landing endpoint with a welcome message."""
    return {"message": "Welcome to the Bike Shop Commissions API"}
