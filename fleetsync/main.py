# fleetsync/main.py
"""
FastAPI application entry point.
Includes security middleware, global error handlers, all routers,
and the startup wiring of storage → vehicle store → sync hub.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from fleetsync.routers import vehicles, groups, audit, operators, health, sync
from fleetsync.config import settings
from fleetsync.services.fleet_seed import DEFAULT_FLEET
from fleetsync.services.storage import build_storage
from fleetsync.services.sync_hub import build_hub
from fleetsync.utils.logger import get_logger
import time

logger = get_logger(__name__)

app = FastAPI(
    title="FleetSync API",
    description="Shared fleet status board — live sync over WebSocket, read-only REST, audit trail.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS (dashboard origin) ─────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── API Key Middleware ───────────────────────────────────────────────────────
class APIKeyMiddleware(BaseHTTPMiddleware):
    """
    Optional lightweight API key auth for the REST endpoints.
    Only HTTP requests pass through here; the WebSocket channel is not affected.
    Set API_KEY in .env. Leave empty to disable auth.
    """
    async def dispatch(self, request: Request, call_next):
        open_paths = {"/api/v1/health", "/docs", "/redoc", "/openapi.json"}
        if request.url.path in open_paths or not settings.API_KEY:
            return await call_next(request)

        api_key = request.headers.get("X-API-Key") or request.query_params.get("api_key")
        if api_key != settings.API_KEY:
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={"detail": "Invalid or missing API key"},
            )
        return await call_next(request)


if settings.API_KEY:
    app.add_middleware(APIKeyMiddleware)


# ── Request Timing Middleware ────────────────────────────────────────────────
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 2)
    logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
    return response


# ── Global Exception Handler ─────────────────────────────────────────────────
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(vehicles.router,  prefix="/api/v1", tags=["🚜 Vehicles"])
app.include_router(groups.router,    prefix="/api/v1", tags=["📦 Groups"])
app.include_router(audit.router,     prefix="/api/v1", tags=["📝 Audit"])
app.include_router(operators.router, prefix="/api/v1", tags=["👷 Operators"])
app.include_router(health.router,    prefix="/api/v1", tags=["💚 Health"])
app.include_router(sync.router,      prefix="/api/v1", tags=["🔄 Live Sync"])


# ── Startup ───────────────────────────────────────────────────────────────────
@app.on_event("startup")
async def startup():
    logger.info("🚀 FleetSync backend starting up...")
    hub = build_hub(build_storage())
    hub.start()
    if settings.SEED_DEFAULT_FLEET:
        await hub.store.seed_if_empty(DEFAULT_FLEET)
    app.state.hub = hub
    logger.info("✅ Storage ready")
    logger.info(f"🔄 Live sync at ws://{settings.BACKEND_IP}:{settings.BACKEND_PORT}/api/v1/ws")
    logger.info("📖 API docs at /docs")


@app.on_event("shutdown")
async def shutdown():
    logger.info("🛑 FleetSync backend shutting down...")
