# storefront/main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI
import uvicorn

from storefront.api import ROUTERS
from storefront.data.database import init_db
from storefront.utils.logging import get_logger
from storefront.utils.settings import SEED_DEMO_DATA

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Initializing database")
    try:
        init_db()
    except Exception as e:
        logger.error(f"Failed to create tables: {e}")
        raise
    if SEED_DEMO_DATA:
        from storefront.data.seed import seed

        seed()
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="Storefront Order Service",
        version="1.0.0",
        lifespan=lifespan,
    )

    for router in ROUTERS:
        app.include_router(router)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
