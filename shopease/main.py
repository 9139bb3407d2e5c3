from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging

from shopease.config import get_settings
from shopease.database import engine, Base
from shopease.api import products, sales, health
from shopease.api.errors import register_exception_handlers
# Register every table (including foreign key targets) on Base.metadata
from shopease.models import customer, ordering, product, sale  # noqa: F401

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    """
    logger.info("Starting up application...")

    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created successfully")

    yield

    logger.info("Shutting down application...")
    engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    description="""
    API for managing the products and sales of the ShopEase store.

    - **Products**: Full CRUD; deleting a product still referenced by sales is rejected (409)
    - **Sales**: Full CRUD; creating a sale atomically consumes product stock

    ## Inventory consistency
    A sale's stock decrement is a conditional UPDATE executed in the same
    transaction as the sale insert, so concurrent sales can never oversell a
    product and stock never goes negative. Updating or deleting a sale does
    not touch inventory.

    ## Errors
    400 invalid input, 404 missing product/customer/sale, 409 insufficient
    stock or referential conflict, 500 storage unavailable (retryable).
    """,
    version=settings.APP_VERSION,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(health.router, prefix="/api/v1")
app.include_router(products.router, prefix="/api/v1")
app.include_router(sales.router, prefix="/api/v1")


@app.get("/", tags=["Root"])
def root():
    """Root endpoint with API information."""
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": "/docs",
        "redoc": "/redoc",
        "health": "/api/v1/health"
    }
