"""FastAPI application entry point."""

import uuid
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from grocerygo.config import get_settings
from grocerygo.database import Base, async_engine
from grocerygo.logging_config import LoggingContext, configure_logging, get_logger
from grocerygo.routers import ingredients_router, meal_plans_router, recipes_router

settings = get_settings()

# Configure logging on module load
configure_logging(settings.log_level, json_format=not settings.is_development)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup and shutdown events."""
    logger.info("Starting GroceryGo API")

    # Create database tables if they don't exist
    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables initialized")

    yield

    logger.info("Shutting down GroceryGo API")
    await async_engine.dispose()


app = FastAPI(
    title="GroceryGo API",
    description="Weekly meal plans and consolidated grocery lists",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Tag log records of a request with its request id."""
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    with LoggingContext(request_id=request_id):
        response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


app.include_router(meal_plans_router)
app.include_router(recipes_router)
app.include_router(ingredients_router)


@app.get("/health")
async def health_check() -> dict:
    """Basic health check endpoint."""
    return {"status": "ok", "service": "grocerygo-api"}


@app.get("/")
async def root() -> dict:
    """Root endpoint with API information."""
    return {
        "name": "GroceryGo API",
        "version": "0.1.0",
        "docs": "/docs",
        "health": "/health",
    }
