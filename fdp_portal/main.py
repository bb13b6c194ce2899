"""
FastAPI Application Entry Point
Main application setup and route registration
"""

import logging
import os

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from slowapi.errors import RateLimitExceeded

from fdp_portal.config import settings
from fdp_portal.database import connect_db, disconnect_db
from fdp_portal.rate_limit import limiter, rate_limit_exceeded_handler
from fdp_portal.routes import auth, events, registrations, payments, certificates, communications, coupons

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    description="Faculty development program registration, payments and certificates",
    version="1.0.0",
    debug=settings.DEBUG
)

# Login rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure this in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(404)
async def not_found_handler(request: Request, exc):
    detail = getattr(exc, "detail", None) or "Not Found"
    return JSONResponse(status_code=404, content={"detail": detail})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# Generated certificates and uploaded logos
os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")


# Startup event
@app.on_event("startup")
async def startup():
    """Run on application startup"""
    await connect_db()
    logger.info(f"[START] {settings.APP_NAME} started in {settings.APP_ENV} mode")


# Shutdown event
@app.on_event("shutdown")
async def shutdown():
    """Run on application shutdown"""
    await disconnect_db()
    logger.info("[OK] Shutdown complete")


# Health check endpoint
@app.get("/api/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "app": settings.APP_NAME,
        "version": "1.0.0"
    }


# API routers
app.include_router(auth.router, prefix="/api", tags=["Admin"])
app.include_router(events.router, prefix="/api", tags=["FDP Events"])
app.include_router(registrations.router, prefix="/api", tags=["Registrations"])
app.include_router(payments.router, prefix="/api", tags=["Payments"])
app.include_router(certificates.router, prefix="/api", tags=["Certificates"])
app.include_router(communications.router, prefix="/api", tags=["Communications"])
app.include_router(coupons.router, prefix="/api", tags=["Coupons"])
