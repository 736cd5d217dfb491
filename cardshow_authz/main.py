"""ASGI entry point for the card show authorization service."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cardshow_authz.audit.emitter import get_audit_emitter
from cardshow_authz.config.database import close_redis, create_tables, dispose_engine, get_redis
from cardshow_authz.config.settings import settings
from cardshow_authz.middleware.exception_handler import register_exception_handlers
from cardshow_authz.middleware.logging_middleware import RequestLoggingMiddleware
from cardshow_authz.routers import decisions, entities, principal
from cardshow_authz.schemas.common import HealthResponse

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Prepare storage and the audit worker; drain audit events on shutdown."""
    if settings.CREATE_TABLES:
        await create_tables()
    if settings.AUDIT_SINK == "redis":
        await (await get_redis()).ping()
    emitter = get_audit_emitter()
    await emitter.start()
    logger.info("Authorization service started", extra={"audit_sink": settings.AUDIT_SINK})

    yield

    await emitter.stop()
    await close_redis()
    await dispose_engine()
    logger.info("Authorization service stopped", extra={"audit_dropped": emitter.dropped})


app = FastAPI(
    title=settings.API_TITLE,
    version=settings.API_VERSION,
    description=settings.API_DESCRIPTION,
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    docs_url=f"{settings.API_PREFIX}/docs",
    redoc_url=f"{settings.API_PREFIX}/redoc",
    lifespan=lifespan,
)

register_exception_handlers(app)

# Browser clients only need the bearer header and the guarded verbs
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE"],
    allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
)

app.add_middleware(
    RequestLoggingMiddleware,
    log_headers=settings.ENVIRONMENT == "development",
)


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """Liveness probe. Touches neither the database nor Redis."""
    return {
        "status": "healthy",
        "version": settings.API_VERSION,
        "environment": settings.ENVIRONMENT,
    }


app.include_router(
    decisions.router,
    prefix=settings.API_PREFIX,
    tags=["Decisions"],
)

app.include_router(
    principal.router,
    prefix=f"{settings.API_PREFIX}/principal",
    tags=["Principal"],
)

app.include_router(
    entities.router,
    prefix=f"{settings.API_PREFIX}/entities",
    tags=["Entities"],
)
