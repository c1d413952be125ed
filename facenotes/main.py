# main.py
import logging
import os
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .config import (
    CORS_ORIGINS,
    ENVIRONMENT,
    LOG_LEVEL,
    RATE_LIMIT_MAX_REQUESTS,
    RATE_LIMIT_WINDOW_SECONDS,
)
from .database import build_storage
from .errors import FaceNotesError
from .ratelimit import RateLimiter
from .routes.note_routes import router as note_router
from .routes.user_routes import router as user_router
from .storage import Storage

# ==============================================================================
# SECTION 1: LOGGING
# ==============================================================================
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)

_started_at = time.monotonic()


# ==============================================================================
# SECTION 2: ERROR HANDLERS
# ==============================================================================
async def facenotes_error_handler(request: Request, exc: FaceNotesError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg')}" if field else first.get("msg")
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content={"success": False, "message": message})


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    # unknown routes, wrong methods
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500, content={"success": False, "message": "Internal server error"}
    )


# ==============================================================================
# SECTION 3: FASTAPI APPLICATION
# ==============================================================================
def create_app(
    storage: Optional[Storage] = None, rate_limiter: Optional[RateLimiter] = None
) -> FastAPI:
    """
    Build the API. The storage backend is created here once (unless one is
    passed in) and lives on ``app.state`` for the handlers to use.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        app.state.storage.close()

    app = FastAPI(title="Facial Recognition Todo API", version=__version__, lifespan=lifespan)
    if storage is None:
        storage = build_storage()
    if rate_limiter is None:
        rate_limiter = RateLimiter(RATE_LIMIT_MAX_REQUESTS, RATE_LIMIT_WINDOW_SECONDS)
    app.state.storage = storage
    app.state.rate_limiter = rate_limiter

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.middleware("http")
    async def rate_limit_and_log(request: Request, call_next):
        client = request.client.host if request.client else "anonymous"
        allowed, retry_after = request.app.state.rate_limiter.hit(client)
        if not allowed:
            logger.warning(f"Rate limit exceeded for {client}")
            return JSONResponse(
                status_code=429,
                content={
                    "success": False,
                    "message": "Too many requests. Please try again later.",
                    "retryAfter": round(retry_after),
                },
            )
        response = await call_next(request)
        logger.info(f"{request.method} {request.url.path} -> {response.status_code}")
        return response

    app.add_exception_handler(FaceNotesError, facenotes_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(user_router)
    app.include_router(note_router)

    @app.get("/api/health", tags=["System"])
    def health_check(request: Request):
        storage = request.app.state.storage
        try:
            stats = storage.stats()
        except Exception as e:
            logger.error(f"Health check failed: {e}")
            return JSONResponse(
                status_code=503,
                content={"status": "unhealthy", "database": storage.name, "error": str(e)},
            )
        return {
            "status": "healthy",
            "database": storage.name,
            "stats": stats,
            "environment": ENVIRONMENT,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "uptime": round(time.monotonic() - _started_at, 3),
            "version": __version__,
        }

    @app.get("/api/test", tags=["System"])
    def test_endpoint():
        return {
            "message": "Backend is working!",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "status": "OK",
        }

    return app


app = create_app()


def run():
    import uvicorn

    uvicorn.run(
        "facenotes.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "5000")),
    )
