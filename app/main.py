from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.httpsredirect import HTTPSRedirectMiddleware
from starlette.middleware.trustedhost import TrustedHostMiddleware

from app.api.router import api_router
from app.api.v1.routes import realtime
from app.core.config import get_settings
from app.core.db import close_engine, initialize_database, init_engine
from app.core.request_id import RequestIdMiddleware
from app.infra.realtime import BroadcastHub

settings = get_settings()
settings.validate_security_settings()
logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Initialize infrastructure
    engine = init_engine()
    app.state.db_engine = engine
    app.state.realtime_hub = BroadcastHub(
        send_timeout=settings.realtime_send_timeout_seconds
    )
    await initialize_database()
    logger.info("app.started", environment=settings.app_env)

    yield

    # Graceful shutdown
    logger.info("app.shutdown", open_sessions=app.state.realtime_hub.session_count)
    await close_engine(engine)


app = FastAPI(
    title="Portfolio & Order Intake API",
    version="0.1.0",
    docs_url="/docs" if settings.app_env != "production" else None,
    redoc_url="/redoc" if settings.app_env != "production" else None,
    lifespan=lifespan,
)

if settings.trusted_hosts:
    app.add_middleware(
        TrustedHostMiddleware,
        allowed_hosts=settings.trusted_hosts,
    )

if settings.force_https:
    app.add_middleware(HTTPSRedirectMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "X-Request-ID"],
)
app.add_middleware(RequestIdMiddleware)


@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers.setdefault("X-Content-Type-Options", "nosniff")
    response.headers.setdefault("X-Frame-Options", "DENY")
    response.headers.setdefault(
        "Referrer-Policy",
        "strict-origin-when-cross-origin",
    )
    response.headers.setdefault(
        "Permissions-Policy",
        "camera=(), microphone=(), geolocation=()",
    )
    if settings.force_https:
        response.headers.setdefault(
            "Strict-Transport-Security",
            "max-age=31536000; includeSubDomains",
        )
    return response


app.include_router(api_router, prefix="/api")
app.include_router(realtime.router, tags=["realtime"])


@app.get("/", tags=["meta"])
async def root() -> dict[str, str]:
    return {"service": "portfolio-order-intake", "status": "ok"}
