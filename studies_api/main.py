import asyncio
import logging
from contextlib import asynccontextmanager, suppress

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from studies_api.config.settings import settings
from studies_api.database.client import close_db, init_db
from studies_api.features.auth.cleanup import periodic_cleanup
from studies_api.features.auth.dependencies import get_current_principal
from studies_api.features.auth.exceptions import AuthError, StoreError, render_auth_error
from studies_api.features.auth.router import router as auth_router
from studies_api.features.note.router import router as note_router
from studies_api.features.tag.router import router as tag_router
from studies_api.features.task.router import router as task_router
from studies_api.features.user.router import router as user_router

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize rate limiter
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.rate_limit_default],
    enabled=settings.rate_limit_enabled,
)


async def rate_limit_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle rate limit exceeded errors."""
    return JSONResponse(
        status_code=429,
        content={"detail": "Rate limit exceeded"},
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle startup and shutdown events."""
    # Startup
    await init_db()
    cleanup_task = None
    if settings.session_cleanup_interval_seconds > 0:
        cleanup_task = asyncio.create_task(periodic_cleanup(settings.session_cleanup_interval_seconds))
    yield
    # Shutdown
    if cleanup_task is not None:
        cleanup_task.cancel()
        with suppress(asyncio.CancelledError):
            await cleanup_task
    await close_db()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    debug=settings.debug,
    lifespan=lifespan,
)

# Add rate limiting middleware
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_handler)
app.add_middleware(SlowAPIMiddleware)

# Auth and session store failures share one renderer
app.add_exception_handler(AuthError, render_auth_error)
app.add_exception_handler(StoreError, render_auth_error)

# Router Registration
routers: list[APIRouter] = [
    auth_router,
    user_router,
    tag_router,
    task_router,
    note_router,
]

for router in routers:
    app.include_router(router, prefix=settings.api_prefix)


@app.get("/ping")
async def ping():
    return "Pong!"


@app.get("/safe-ping", dependencies=[Depends(get_current_principal)])
async def safe_ping():
    """Same as ``/ping``, but only for callers with a valid access token."""
    return "Pong!"


@app.get("/health")
async def health():
    return {"status": "healthy"}
