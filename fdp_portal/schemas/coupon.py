"""
Coupon Request/Response Models
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Optional
from datetime import datetime
from decimal import Decimal
from enum import Enum

from fdp_portal.schemas.validators import reject_nulls, to_naive_utc


class DiscountType(str, Enum):
    """How a coupon reduces the fee"""
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class CouponCreate(BaseModel):
    """Request to create a coupon"""
    model_config = ConfigDict(use_enum_values=True)

    code: str = Field(..., min_length=1, max_length=100)
    fdp_id: Optional[str] = None
    discount_type: DiscountType
    discount_value: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    max_uses: Optional[int] = Field(default=None, ge=1)
    valid_from: Optional[datetime] = None
    valid_until: Optional[datetime] = None
    is_active: bool = True
    description: Optional[str] = None

    @field_validator("valid_from", "valid_until")
    @classmethod
    def naive_window(cls, value):
        return to_naive_utc(value)

    @model_validator(mode="after")
    def check_window(self):
        if self.discount_type == DiscountType.PERCENTAGE and self.discount_value > 100:
            raise ValueError("percentage discount cannot exceed 100")
        if self.valid_from and self.valid_until and self.valid_until < self.valid_from:
            raise ValueError("valid_until must not be before valid_from")
        return self


class CouponUpdate(BaseModel):
    """Partial coupon update"""
    max_uses: Optional[int] = Field(default=None, ge=1)
    valid_from: Optional[datetime] = None
    valid_until: Optional[datetime] = None
    is_active: Optional[bool] = None
    description: Optional[str] = None

    @field_validator("valid_from", "valid_until")
    @classmethod
    def naive_window(cls, value):
        return to_naive_utc(value)

    @model_validator(mode="before")
    @classmethod
    def check_nulls(cls, data):
        return reject_nulls(data, ("is_active",))


class CouponResponse(BaseModel):
    """Coupon details"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    code: str
    fdp_id: Optional[str] = None
    discount_type: str
    discount_value: Decimal
    max_uses: Optional[int] = None
    used_count: int
    valid_from: Optional[datetime] = None
    valid_until: Optional[datetime] = None
    is_active: bool
    description: Optional[str] = None
    created_at: datetime


class CouponValidateRequest(BaseModel):
    """Check a code, optionally against an event and an amount"""
    code: str = Field(..., min_length=1, max_length=100)
    fdp_id: Optional[str] = None
    amount: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)


class CouponValidateResponse(BaseModel):
    """Validation outcome with the discount applied when an amount was given"""
    valid: bool
    coupon: CouponResponse
    discount_amount: Optional[Decimal] = None
    final_amount: Optional[Decimal] = None
