"""
FastAPI Main Application
Obligation ledger with exact-payment settlement
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator
from sqlalchemy import text

from payledger.config import settings
from payledger.core.logging import setup_logging
from payledger.infrastructure.db.database import init_db, close_db
from payledger.api.routes import obligations, payments

setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan manager
    Handles startup and shutdown of the database
    """
    logger.info("=" * 60)
    logger.info("🚀 Starting PayLedger (%s)", settings.APP_ENV)
    logger.info("=" * 60)

    await init_db()
    logger.info("✅ Database initialized")

    logger.info(f"   ✅ API Server: http://{settings.API_HOST}:{settings.API_PORT}")
    logger.info(f"   ✅ API Docs: http://{settings.API_HOST}:{settings.API_PORT}/docs")

    yield

    logger.info("🛑 Shutting down PayLedger...")
    await close_db()
    logger.info("✅ Database connections closed")


# Create FastAPI app
app = FastAPI(
    title="PayLedger",
    description="Outstanding obligations settled by exact, oldest-first payments",
    version=VERSION,
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check():
    """Service and database health"""
    db_status = "disconnected"
    db_error = None
    try:
        from payledger.infrastructure.db.database import engine
        if engine is None:
            db_status = "not_initialized"
        else:
            async with engine.begin() as conn:
                await conn.execute(text("SELECT 1"))
            db_status = "connected"
    except Exception as exc:
        db_status = "error"
        db_error = str(exc)

    return {
        "status": "healthy" if db_status == "connected" else "degraded",
        "service": "PayLedger",
        "version": VERSION,
        "database": db_status,
        "database_error": db_error,
    }


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "PayLedger",
        "version": VERSION,
        "docs": "/docs"
    }


app.include_router(obligations.router, prefix="/api/v1/obligations", tags=["Obligations"])
app.include_router(payments.router, prefix="/api/v1/payments", tags=["Payments"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("payledger.main:app", host=settings.API_HOST, port=settings.API_PORT, reload=settings.DEBUG)
