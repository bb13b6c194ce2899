"""
Authentication Routes
Admin login and dashboard summary
"""

import logging

from fastapi import APIRouter, HTTPException, Request, status, Depends
from pydantic import BaseModel, EmailStr

from fdp_portal.auth import authenticate_admin, create_admin_token, get_current_admin
from fdp_portal.config import settings
from fdp_portal.dependencies import get_event_service
from fdp_portal.rate_limit import LOGIN_LIMIT_MESSAGE, limiter
from fdp_portal.schemas.event import DashboardSummaryResponse
from fdp_portal.services.event_service import EventService

logger = logging.getLogger(__name__)

router = APIRouter()


# Request/Response Models
class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    email: str


class AdminProfileResponse(BaseModel):
    email: str
    role: str


@router.post("/admin/login", response_model=LoginResponse)
@limiter.limit(settings.LOGIN_RATE_LIMIT, error_message=LOGIN_LIMIT_MESSAGE)
async def login(request: Request, credentials: LoginRequest):
    """
    Admin login
    
    The single admin account is configured through ADMIN_EMAIL and
    ADMIN_PASSWORD_HASH. Attempts are limited per client address
    (LOGIN_RATE_LIMIT), successful or not.
    """
    if not settings.ADMIN_EMAIL or not settings.ADMIN_PASSWORD_HASH:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Admin account is not configured"
        )

    if not authenticate_admin(
        credentials.email,
        credentials.password,
        settings.ADMIN_EMAIL,
        settings.ADMIN_PASSWORD_HASH
    ):
        logger.warning(f"Failed admin login for {credentials.email}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password"
        )

    token = create_admin_token(settings.ADMIN_EMAIL)
    logger.info(f"Admin logged in: {settings.ADMIN_EMAIL}")

    return LoginResponse(access_token=token, email=settings.ADMIN_EMAIL)


@router.get("/admin/me", response_model=AdminProfileResponse)
async def get_me(current_admin: dict = Depends(get_current_admin)):
    """Current admin from the bearer token"""
    return current_admin


@router.get("/admin/dashboard", response_model=DashboardSummaryResponse)
async def get_dashboard(
    current_admin: dict = Depends(get_current_admin),
    events: EventService = Depends(get_event_service)
):
    """Totals across all events"""
    return await events.get_dashboard()
