"""
Payment Routes
Client verification, gateway webhook, status lookup and refunds
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Header, Request

from fdp_portal.auth import get_current_admin
from fdp_portal.dependencies import get_event_service, get_registration_service
from fdp_portal.schemas.payment import (
    PaymentVerifyRequest,
    PaymentVerifyResponse,
    PaymentStatusResponse,
    PaymentDetailResponse,
    RefundRequest,
    RefundResponse,
    WebhookAck,
)
from fdp_portal.services.event_service import EventService
from fdp_portal.services.registration_service import RegistrationService

router = APIRouter()


@router.post("/payments/verify", response_model=PaymentVerifyResponse)
async def verify_payment(
    request: PaymentVerifyRequest,
    registrations: RegistrationService = Depends(get_registration_service)
):
    """
    Confirm a payment reported by the client
    
    The signature is checked locally before the gateway is asked for the
    payment status.
    """
    payment = await registrations.verify_payment(
        request.order_id,
        request.payment_id,
        request.signature,
        request.payment_method
    )
    return {"success": True, "message": "Payment verified successfully", "payment": payment}


@router.post("/payments/webhook", response_model=WebhookAck)
async def payment_webhook(
    request: Request,
    x_webhook_signature: Optional[str] = Header(None),
    x_webhook_timestamp: Optional[str] = Header(None),
    registrations: RegistrationService = Depends(get_registration_service)
):
    """Gateway notification; the raw body is what the signature covers"""
    raw_body = await request.body()
    updated = await registrations.handle_webhook(raw_body, x_webhook_signature, x_webhook_timestamp)
    return {"success": updated}


@router.get("/payments/{order_id}", response_model=PaymentStatusResponse)
async def get_payment_status(
    order_id: str,
    registrations: RegistrationService = Depends(get_registration_service)
):
    return await registrations.get_payment_or_404(order_id)


@router.post("/payments/{order_id}/refund", response_model=RefundResponse)
async def refund_payment(
    order_id: str,
    request: RefundRequest,
    current_admin: dict = Depends(get_current_admin),
    registrations: RegistrationService = Depends(get_registration_service)
):
    """Refund a successful payment (Admin only)"""
    return await registrations.refund_payment(order_id, request)


@router.get("/fdp-events/{event_id}/payments", response_model=List[PaymentDetailResponse])
async def list_payments(
    event_id: str,
    current_admin: dict = Depends(get_current_admin),
    events: EventService = Depends(get_event_service)
):
    return await events.list_payments(event_id)
