"""
Coupon Routes
Public validation and admin coupon management
"""

from typing import List

from fastapi import APIRouter, Depends, status

from fdp_portal.auth import get_current_admin
from fdp_portal.dependencies import get_coupon_service
from fdp_portal.schemas.coupon import (
    CouponCreate,
    CouponUpdate,
    CouponResponse,
    CouponValidateRequest,
    CouponValidateResponse,
)
from fdp_portal.services.coupon_service import CouponService

router = APIRouter()


@router.post("/coupons/validate", response_model=CouponValidateResponse)
async def validate_coupon(
    request: CouponValidateRequest,
    coupons: CouponService = Depends(get_coupon_service)
):
    """
    Check a coupon code
    
    With **amount**, the response also carries the discount and final amount.
    """
    coupon = await coupons.validate_coupon(request.code, request.fdp_id)

    result = {"valid": True, "coupon": coupon}
    if request.amount is not None:
        discount, final_amount = coupons.calculate_discount(coupon, request.amount)
        result["discount_amount"] = discount
        result["final_amount"] = final_amount
    return result


@router.get("/coupons", response_model=List[CouponResponse])
async def list_coupons(
    current_admin: dict = Depends(get_current_admin),
    coupons: CouponService = Depends(get_coupon_service)
):
    return await coupons.list_coupons()


@router.post("/coupons", response_model=CouponResponse, status_code=status.HTTP_201_CREATED)
async def create_coupon(
    request: CouponCreate,
    current_admin: dict = Depends(get_current_admin),
    coupons: CouponService = Depends(get_coupon_service)
):
    return await coupons.create_coupon(request)


@router.put("/coupons/{coupon_id}", response_model=CouponResponse)
async def update_coupon(
    coupon_id: str,
    request: CouponUpdate,
    current_admin: dict = Depends(get_current_admin),
    coupons: CouponService = Depends(get_coupon_service)
):
    return await coupons.update_coupon(coupon_id, request)


@router.delete("/coupons/{coupon_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_coupon(
    coupon_id: str,
    current_admin: dict = Depends(get_current_admin),
    coupons: CouponService = Depends(get_coupon_service)
):
    await coupons.delete_coupon(coupon_id)
