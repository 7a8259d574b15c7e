from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqlalchemy import text
from starlette.middleware.authentication import AuthenticationMiddleware

from inventory_api.db.session import shutdown
from inventory_api.dependencies import DB
from inventory_api.handlers.chain import register_exception_handlers
from inventory_api.logging import get_logger
from inventory_api.middleware import RequestIDMiddleware
from inventory_api.routers import inventory, stock_history, supplier
from inventory_api.security import TokenAuthBackend

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup and shutdown hooks: code before yield runs on startup, after yield on shutdown.

    Shutdown: close database connections gracefully.
    """
    logger.info("application_started")
    yield
    await shutdown()


app = FastAPI(title="Inventory API", lifespan=lifespan)

# Last added runs first: request ids are bound before authentication runs
app.add_middleware(AuthenticationMiddleware, backend=TokenAuthBackend())
app.add_middleware(RequestIDMiddleware)

# Business handlers take precedence over the framework catch-alls
register_exception_handlers(app)

app.include_router(supplier.router)
app.include_router(inventory.router)
app.include_router(stock_history.router)


@app.get("/health")
async def health(db: DB) -> dict[str, str]:
    """Liveness check that also pings the database.

    Returns 200 OK only if the database responds to a ping query.
    """
    await db.execute(text("SELECT 1"))
    return {"status": "ok"}
