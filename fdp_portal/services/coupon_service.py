"""
Coupon Service
Coupon administration, validation and discount calculation
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Tuple

from fastapi import HTTPException, status

from fdp_portal.schemas.coupon import CouponCreate, CouponUpdate
from fdp_portal.services.entity_store import EntityStore, to_money

logger = logging.getLogger(__name__)


class CouponService:
    """Service for coupon operations"""

    def __init__(self, store: EntityStore):
        self.store = store

    async def create_coupon(self, data: CouponCreate) -> dict:
        """
        Create a coupon

        Raises:
            HTTPException: 404 for an unknown event, 409 for a duplicate code
        """
        code = data.code.strip()

        if data.fdp_id and not await self.store.get_event(data.fdp_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="FDP event not found"
            )

        if await self.store.coupon_code_exists(code):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Coupon code '{code}' already exists"
            )

        values = data.model_dump()
        values["code"] = code
        values["used_count"] = 0
        coupon = await self.store.create_coupon(values)
        logger.info(f"Coupon {code} created")
        return coupon

    async def list_coupons(self) -> List[dict]:
        return await self.store.list_coupons()

    async def update_coupon(self, coupon_id: str, data: CouponUpdate) -> dict:
        coupon = await self.store.update_coupon(coupon_id, data.model_dump(exclude_unset=True))
        if not coupon:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Coupon not found")
        return coupon

    async def delete_coupon(self, coupon_id: str) -> None:
        if not await self.store.delete_coupon(coupon_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Coupon not found")

    async def validate_coupon(
        self,
        code: str,
        fdp_id: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> dict:
        """
        Check that a code can be used right now

        Each rule is checked on its own, so an exhausted code and an expired
        code fail with their own reason.

        Raises:
            HTTPException: 404 unknown or inactive code, 400 otherwise
        """
        coupon = await self.store.get_coupon_by_code(code.strip())
        if not coupon:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Invalid coupon code"
            )

        now = now or datetime.utcnow()

        if coupon["max_uses"] is not None and (coupon["used_count"] or 0) >= coupon["max_uses"]:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Coupon usage limit exceeded"
            )

        if coupon["valid_until"] is not None and now > coupon["valid_until"]:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Coupon has expired"
            )

        if coupon["valid_from"] is not None and now < coupon["valid_from"]:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Coupon is not yet valid"
            )

        if coupon["fdp_id"] and fdp_id and coupon["fdp_id"] != fdp_id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Coupon is not valid for this FDP"
            )

        return coupon

    @staticmethod
    def calculate_discount(coupon: dict, amount) -> Tuple[Decimal, Decimal]:
        """
        Returns:
            (discount, final amount), the final amount never below zero
        """
        amount = to_money(amount)
        value = to_money(coupon["discount_value"])

        if coupon["discount_type"] == "percentage":
            percent = min(value, Decimal("100"))
            discount = to_money(amount * percent / Decimal("100"))
        else:
            discount = min(value, amount)

        return discount, to_money(amount - discount)
