"""FastAPI application entry point."""

from collections.abc import Iterable
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from helix.api.router import api_router
from helix.core.config import settings
from helix.core.logging import get_logger, setup_logging
from helix.db.session import init_db
from helix.settings.registry import AllowListFilter

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan events."""
    logger.info(
        "starting_application",
        app_name=settings.app_name,
        version=settings.version,
        host=settings.host,
        port=settings.port,
    )
    await init_db()
    if settings.admin_token is None:
        logger.warning("admin_token_not_configured", hint="set HELIX_ADMIN_TOKEN")
    yield
    logger.info("shutting_down_application")


def create_app(allow_list_filters: Iterable[AllowListFilter] = ()) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        allow_list_filters: Functions applied in order to the set of keys
            the settings API may read and write.
    """
    app = FastAPI(
        title=settings.app_name,
        description="Typed, validated settings over the site's options table",
        version=settings.version,
        lifespan=lifespan,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )

    app.state.allow_list_filters = tuple(allow_list_filters)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)

    return app


# Create the application instance
app = create_app()


def main() -> None:
    """Run the application with uvicorn."""
    import uvicorn

    uvicorn.run(
        "helix.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
