"""
ClubTable - FastAPI booking gateway
"""

import logging
from contextlib import asynccontextmanager

import httpx
import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from clubtable import __version__
from clubtable.api import auth, booking, floor, kitchen, reservations
from clubtable.config import settings
from clubtable.errors import HttpError, NetworkError, UnauthorizedError, ValidationError
from clubtable.notifications import ToastQueue

# Configure structured logging
logging.basicConfig(format="%(message)s", level=settings.log_level.upper())

structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
        if settings.log_format == "json"
        else structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    logger.info("Starting ClubTable gateway", version=__version__, upstream=settings.api_base_url)
    app.state.http = httpx.AsyncClient(
        base_url=settings.api_base_url,
        timeout=settings.api_timeout_seconds,
    )
    yield
    await app.state.http.aclose()
    logger.info("Shutting down ClubTable gateway")


# Create FastAPI application
app = FastAPI(
    title="ClubTable",
    description="Booking gateway for club dining reservations",
    version=__version__,
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error_body(exc: Exception) -> dict:
    toast = ToastQueue().add_error(exc)
    return {"detail": str(exc), "toast": toast.model_dump(exclude={"created_at"})}


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content=_error_body(exc))


@app.exception_handler(UnauthorizedError)
async def unauthorized_handler(request: Request, exc: UnauthorizedError):
    body = _error_body(exc)
    body["redirect"] = settings.login_path
    return JSONResponse(
        status_code=401,
        content=body,
        headers={"WWW-Authenticate": "Bearer"},
    )


@app.exception_handler(HttpError)
async def upstream_http_error_handler(request: Request, exc: HttpError):
    status_code = exc.status if exc.status < 500 else 502
    return JSONResponse(status_code=status_code, content=_error_body(exc))


@app.exception_handler(NetworkError)
async def upstream_unreachable_handler(request: Request, exc: NetworkError):
    return JSONResponse(status_code=503, content=_error_body(exc))


# Health check endpoints
@app.get("/health")
async def health():
    """Basic health check"""
    return {"status": "healthy", "service": "gateway", "version": __version__}


# Include API routers
app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
app.include_router(booking.router, prefix="/booking", tags=["Booking"])
app.include_router(floor.router, prefix="/floor", tags=["Floor Plan"])
app.include_router(reservations.router, prefix="/reservations", tags=["Reservations"])
app.include_router(kitchen.router, prefix="/kitchen", tags=["Kitchen"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "clubtable.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_debug,
    )
