# app/main.py
"""
FastAPI application entry point.
Includes middleware, error handlers, all routers, and the passcode
expiry sweep started at startup.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from app.routers import auth, malls, bookings, health
from app.database import create_tables
from app.config import settings
from app.services.errors import ParkingError, SessionExpired, SessionInvalid
from app.services.passcode_registry import passcode_registry, run_expiry_sweep
from app.utils.logger import get_logger
import time
import asyncio

logger = get_logger(__name__)

app = FastAPI(
    title="Mall Parking API",
    description="Two-factor login and parking slot reservation for malls.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_background_tasks: list[asyncio.Task] = []


# ── Request Timing Middleware ────────────────────────────────────────────────
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 2)
    logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
    return response


# ── Exception Handlers ───────────────────────────────────────────────────────
@app.exception_handler(ParkingError)
async def parking_error_handler(request: Request, exc: ParkingError):
    logger.info(f"{request.method} {request.url.path} rejected: {exc.code} ({exc.message})")
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, (SessionExpired, SessionInvalid)) else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error": exc.code},
        headers=headers,
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(auth.router,     prefix="/api/v1", tags=["🔐 Auth"])
app.include_router(malls.router,    prefix="/api/v1", tags=["🏬 Malls"])
app.include_router(bookings.router, prefix="/api/v1", tags=["🅿️  Bookings"])
app.include_router(health.router,   prefix="/api/v1", tags=["💚 Health"])


# ── Startup ───────────────────────────────────────────────────────────────────
@app.on_event("startup")
async def startup():
    logger.info("🚀 Mall Parking backend starting up...")
    create_tables()
    logger.info("✅ Database tables ready")
    logger.info(f"✉️  OTP delivery channel: {settings.OTP_DELIVERY}")

    _background_tasks.append(asyncio.create_task(run_expiry_sweep(passcode_registry)))
    logger.info(f"🌐 Listening on http://{settings.BACKEND_IP}:{settings.BACKEND_PORT}")
    logger.info("📖 API docs at /docs")


@app.on_event("shutdown")
async def shutdown():
    logger.info("🛑 Mall Parking backend shutting down...")
    for task in _background_tasks:
        task.cancel()
    _background_tasks.clear()
