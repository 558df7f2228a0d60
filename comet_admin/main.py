from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from comet_admin import __version__
from comet_admin.config import settings
from comet_admin.database import init_db, close_db, async_session_maker
from comet_admin.api import api_router
from comet_admin.exceptions import AppError
from comet_admin.schemas.common import ErrorResponse
from comet_admin.middleware.security import RateLimitMiddleware, SecurityHeadersMiddleware
from comet_admin.services.bootstrap import ensure_admin


logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    await init_db()
    if settings.admin_password:
        async with async_session_maker() as db:
            await ensure_admin(db, settings.admin_username, settings.admin_password)
    logger.info("Comet admin panel started (%s)", settings.environment)
    yield
    # Shutdown
    await close_db()


app = FastAPI(
    title="Comet Admin",
    description="Comet Admin Panel - users, licenses and subscriptions",
    version=__version__,
    lifespan=lifespan,
    docs_url=None,
    redoc_url=None,
    openapi_url=None,
)

# Rate limiting (per client IP)
app.add_middleware(RateLimitMiddleware)

# Hardening headers
app.add_middleware(SecurityHeadersMiddleware)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in settings.cors_origins.split(",") if origin.strip()],
    allow_credentials=settings.cors_origins.strip() != "*",
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH"],
    allow_headers=["Authorization", "Content-Type"],
)

# Include API router
app.include_router(api_router, prefix="/api")


def _error_response(status_code: int, message: str, headers=None, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={**ErrorResponse(message=message).model_dump(), **extra},
        headers=headers
    )


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return _error_response(exc.status_code, exc.message)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # Unmatched path, as opposed to a NotFound raised by a route
    if exc.status_code == 404 and exc.detail == "Not Found":
        return _error_response(404, "Route not found")
    return _error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "Validation error"
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    return _error_response(400, message)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    if settings.is_development:
        return _error_response(500, "Internal server error", error=str(exc))
    return _error_response(500, "Internal server error")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


def run() -> None:
    """Console entry point."""
    import uvicorn

    configure_logging()
    uvicorn.run(
        "comet_admin.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower()
    )


if __name__ == "__main__":
    run()
