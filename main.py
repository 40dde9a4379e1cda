"""
Portero Residencial - Backend API
FastAPI + SQLModel: residential invitations, visitor QR codes and gate validation
"""
from dotenv import load_dotenv
load_dotenv()  # Load .env before any other imports

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import settings
from infrastructure.database import init_db, dispose_engine
from infrastructure.identity import IdentityChange, identity_events
from api.v1 import (
    auth,
    residentials,
    invitations,
    residents,
    qr_codes,
    qr_validate,
    access_logs,
    dashboard,
)

# Setup structured logging
structlog.configure(
    processors=[
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer()
    ]
)

logger = structlog.get_logger()


def _log_identity_change(change: IdentityChange) -> None:
    logger.info("identity_changed", event_type=change.event, identity_id=change.identity_id)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    await init_db()
    unsubscribe = identity_events.subscribe(_log_identity_change)
    logger.info("backend_started")

    yield

    # Shutdown
    unsubscribe()
    await dispose_engine()
    logger.info("backend_stopped")

app = FastAPI(
    title="Portero Residencial API",
    description="Visitor access for residential complexes: invitations, QR codes and gate validation",
    version="0.1.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(auth.router, prefix="/api/v1/auth", tags=["auth"])
app.include_router(residentials.router, prefix="/api/v1/residentials", tags=["residentials"])
app.include_router(invitations.router, prefix="/api/v1/invitations", tags=["invitations"])
app.include_router(residents.router, prefix="/api/v1/residents", tags=["residents"])
app.include_router(qr_codes.router, prefix="/api/v1/qr-codes", tags=["qr-codes"])
app.include_router(access_logs.router, prefix="/api/v1/access-logs", tags=["access-logs"])
app.include_router(dashboard.router, prefix="/api/v1/dashboard", tags=["dashboard"])
# Scanner-facing path kept outside /api/v1 for existing gate devices
app.include_router(qr_validate.router, prefix="/api/qr", tags=["qr-validate"])

@app.get("/health")
async def health_check():
    return {"status": "healthy", "service": "portero-residencial-backend"}

@app.get("/")
async def root():
    return {"message": "Portero Residencial API", "docs": "/docs"}
