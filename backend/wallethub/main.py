"""Main FastAPI application."""
import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from .config import InfrastructureConfig, Settings, get_database_url
from .database import close_db, create_engine, create_session_factory, init_db
from .routers import users_router
from .services.app_service import AppService

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings):
    """Configure process-wide logging from settings."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown."""
    settings: Settings = app.state.settings
    logger.info(f"Starting WalletHub Core API ({settings.node_env})")

    await init_db(app.state.engine)
    logger.info("Database initialized")

    yield

    await close_db(app.state.engine)
    logger.info("Shutdown complete")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Components are built here and stored on app.state; request handlers
    reach them through dependencies.
    """
    # Invalid environment fails here, before the server starts
    settings = settings or Settings()
    configure_logging(settings)

    app = FastAPI(
        title="WalletHub Core API",
        description="User accounts and their wallets, sessions and push tokens",
        version="1.0.0",
        lifespan=lifespan,
    )

    engine = create_engine(get_database_url(settings))
    infrastructure = InfrastructureConfig(settings)

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.infrastructure = infrastructure
    app.state.app_service = AppService(infrastructure)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        client = request.client.host if request.client else "-"
        logger.info(f"[REQUEST] {request.method} {request.url.path} from {client}")
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(
            f"[RESPONSE] {request.method} {request.url.path} "
            f"{response.status_code} - {duration_ms:.0f}ms"
        )
        return response

    app.include_router(users_router)

    # Health check endpoint
    @app.get("/health")
    async def health_check():
        return app.state.app_service.get_health()

    return app


if __name__ == "__main__":
    import uvicorn

    settings = Settings()
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.port)
