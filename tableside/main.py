"""
Tableside - FastAPI Backend Application
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
import structlog

from tableside.config import settings
from tableside.database import SessionLocal, init_db
from tableside.api import (
    auth,
    orders,
    call_requests,
    tables,
    menu,
    customizations,
    customers,
    users,
    realtime,
)
from tableside.api import settings as branding
from tableside.services.errors import ServiceError
from tableside.services.notifier import manager

VERSION = "1.0.0"

logging.basicConfig(format="%(message)s", level=settings.log_level.upper())

# Configure structured logging
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
        structlog.dev.ConsoleRenderer()
        if settings.log_format == "console"
        else structlog.processors.JSONRenderer(),
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
    logger.info("Starting Tableside API", version=VERSION)
    await init_db()
    yield
    logger.info("Shutting down Tableside API")


# Create FastAPI application
app = FastAPI(
    title="Tableside",
    description="Table ordering and service requests for restaurants",
    version=VERSION,
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


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    """Map domain errors to JSON responses"""
    log = logger.error if exc.status_code >= 500 else logger.info
    log(
        "Request failed",
        method=request.method,
        path=request.url.path,
        status_code=exc.status_code,
        error=exc.detail,
    )
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


# Health check endpoints
@app.get("/health")
async def health():
    """Basic health check"""
    return {"status": "healthy", "service": "api", "version": VERSION}


@app.get("/health/ready")
async def ready():
    """Readiness check with dependency verification"""
    checks = {}

    # Check database
    try:
        async with SessionLocal() as db:
            await db.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except Exception as e:
        checks["database"] = f"failed: {str(e)}"

    all_ok = all(v == "ok" for v in checks.values())

    return {
        "status": "ready" if all_ok else "not_ready",
        "checks": checks,
        "websocket": manager.get_stats(),
    }


# Include API routers
app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
app.include_router(users.router, prefix="/users", tags=["Users"])
app.include_router(orders.router, prefix="/orders", tags=["Orders"])
app.include_router(call_requests.router, prefix="/call-requests", tags=["Call Requests"])
app.include_router(tables.router, prefix="/tables", tags=["Tables"])
app.include_router(menu.router, prefix="/menu-items", tags=["Menu"])
app.include_router(customizations.router, prefix="/customizations", tags=["Menu"])
app.include_router(customers.router, prefix="/customers", tags=["Customers"])
app.include_router(branding.router, prefix="/settings", tags=["Settings"])

# Real-time subscriptions
app.include_router(realtime.router, tags=["Realtime"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "tableside.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_debug,
    )
