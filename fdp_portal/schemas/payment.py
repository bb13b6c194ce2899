"""
Payment Request/Response Models
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Any
from datetime import datetime
from decimal import Decimal


class CustomerDetails(BaseModel):
    """Payer details forwarded to the gateway"""
    customer_id: str
    email: Optional[str] = None
    phone: Optional[str] = None
    name: Optional[str] = None


class PaymentVerifyRequest(BaseModel):
    """Client-side confirmation after completing payment"""
    order_id: str = Field(..., min_length=1)
    payment_id: str = Field(..., min_length=1)
    signature: str = Field(..., min_length=1)
    payment_method: Optional[str] = Field(default=None, max_length=50)


class PaymentResponse(BaseModel):
    """Payment record"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    order_id: str
    payment_id: Optional[str] = None
    entity_type: str
    entity_id: str
    fdp_id: str
    amount: Decimal
    currency: str
    status: str
    payment_method: Optional[str] = None
    payment_gateway: str
    created_at: datetime
    updated_at: datetime


class PaymentDetailResponse(PaymentResponse):
    """Payment record with the stored gateway payload (admin)"""
    gateway_response: Optional[Any] = None


class PaymentVerifyResponse(BaseModel):
    """Verification outcome"""
    success: bool
    message: str
    payment: Optional[PaymentResponse] = None


class PaymentStatusResponse(BaseModel):
    """Public status lookup for the payment callback page"""
    order_id: str
    status: str
    amount: Decimal
    currency: str
    entity_type: str
    entity_id: str
    fdp_id: str


class RefundRequest(BaseModel):
    """Admin refund request; amount defaults to the full payment"""
    amount: Optional[Decimal] = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    reason: str = Field(..., min_length=1, max_length=255)


class RefundResponse(BaseModel):
    """Refund outcome"""
    success: bool
    payment: PaymentResponse
    gateway_response: Optional[Any] = None


class WebhookAck(BaseModel):
    """Acknowledgement returned to the gateway"""
    success: bool
