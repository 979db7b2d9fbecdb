"""
Pastr - Main FastAPI application.
"""
import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from limits.storage import MemoryStorage

from pastr.config import Settings
from pastr.database import PasteStore, connect_redis
from pastr.keys import get_generator
from pastr.notifier import Notifier
from pastr.rate_limit import (
    CREATE_SCOPE,
    RETRIEVE_SCOPE,
    RateLimiter,
    connect_rate_limit_storage,
)
from pastr.routes import health, pastes
from pastr.service import PasteService

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[PasteStore] = None,
    limiter: Optional[RateLimiter] = None,
    notifier: Optional[Notifier] = None,
) -> FastAPI:
    """
    Build the application and its collaborators.

    Collaborators that are not passed in are constructed from settings.
    Everything is created once here and shared by all requests through
    app.state.
    """
    settings = settings or Settings()
    if settings.DEBUG:
        logging.getLogger().setLevel(logging.DEBUG)

    if store is None:
        client, using_fallback = connect_redis(
            settings.REDIS_URL,
            settings.REDIS_SOCKET_TIMEOUT,
            settings.ALLOW_MEMORY_FALLBACK,
        )
        store = PasteStore(client, using_fallback=using_fallback)

    if limiter is None:
        if store.using_fallback and settings.rate_limit_redis_url == settings.REDIS_URL:
            # Same Redis already found unreachable; skip a second connect attempt.
            storage, limiter_fallback = MemoryStorage(), True
        else:
            storage, limiter_fallback = connect_rate_limit_storage(
                settings.rate_limit_redis_url,
                settings.REDIS_SOCKET_TIMEOUT,
                settings.ALLOW_MEMORY_FALLBACK,
            )
        limiter = RateLimiter(
            storage,
            limits={
                CREATE_SCOPE: settings.CREATE_RATE_LIMIT,
                RETRIEVE_SCOPE: settings.RETRIEVE_RATE_LIMIT,
            },
            window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
            using_fallback=limiter_fallback,
        )

    if notifier is None:
        notifier = Notifier(
            webhook_url=settings.NOTIFY_WEBHOOK_URL,
            token=settings.NOTIFY_WEBHOOK_TOKEN,
            timeout=settings.NOTIFY_TIMEOUT,
        )

    service = PasteService(
        store=store,
        limiter=limiter,
        generate_key=get_generator(settings.KEY_STRATEGY),
        max_key_attempts=settings.MAX_KEY_ATTEMPTS,
        max_paste_bytes=settings.MAX_PASTE_BYTES,
        prefix_length=settings.RATE_LIMIT_PREFIX_LENGTH,
        fail_open=settings.RATE_LIMIT_FAIL_OPEN,
    )

    app = FastAPI(
        title="Pastr",
        description="A minimal paste-storage service for plain text",
        version="1.0.0",
    )
    app.state.settings = settings
    app.state.store = store
    app.state.limiter = limiter
    app.state.notifier = notifier
    app.state.service = service

    # Add CORS middleware (optional, for cross-origin requests)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include route modules
    app.include_router(health.router)
    app.include_router(pastes.router)

    @app.on_event("startup")
    async def startup_event():
        """Startup event handler."""
        logger.info("Pastr application starting...")

        if store.using_fallback:
            logger.warning("DATABASE: Using IN-MEMORY storage (Redis not available)")
            logger.warning("   Data will NOT persist across server restarts!")
        else:
            logger.info("DATABASE: Connected to Redis")

        if limiter.using_fallback:
            logger.warning("RATE LIMITER: Using IN-MEMORY counters (Redis not available)")

        if not notifier.enabled:
            logger.info("NOTIFIER: No webhook configured, failures are logged only")

    @app.on_event("shutdown")
    async def shutdown_event():
        """Shutdown event handler."""
        logger.info("Pastr application shutting down...")
        await notifier.aclose()

    return app


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "pastr.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
