"""
Payment Gateway Service
Cashfree order creation, payment verification, webhook signatures and refunds
"""

import base64
import hashlib
import hmac
import logging
import time
import uuid
from decimal import Decimal
from typing import Optional

import httpx
from fastapi import HTTPException, status

from fdp_portal.config import Settings
from fdp_portal.schemas.payment import CustomerDetails
from fdp_portal.services.entity_store import EntityStore, to_money

logger = logging.getLogger(__name__)

# Customer fields the gateway insists on
DEFAULT_CUSTOMER_EMAIL = "user@example.com"
DEFAULT_CUSTOMER_PHONE = "9999999999"
DEFAULT_CUSTOMER_NAME = "User"


class CashfreeGateway:
    """Cashfree PG adapter; local signature checks come before any network call"""

    def __init__(
        self,
        settings: Settings,
        store: EntityStore,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.settings = settings
        self.store = store
        self.transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self.settings.CASHFREE_APP_ID and self.settings.CASHFREE_SECRET_KEY)

    def _ensure_config(self):
        if not self.is_configured:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Payment gateway credentials not configured"
            )

    def _headers(self) -> dict:
        return {
            "x-client-id": self.settings.CASHFREE_APP_ID or "",
            "x-client-secret": self.settings.CASHFREE_SECRET_KEY or "",
            "x-api-version": self.settings.CASHFREE_API_VERSION,
            "Accept": "application/json",
        }

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.settings.CASHFREE_API_URL.rstrip("/"),
            headers=self._headers(),
            timeout=self.settings.HTTP_TIMEOUT_SECONDS,
            transport=self.transport,
        )

    async def _request(self, method: str, path: str, **kwargs) -> dict:
        """Call the gateway; unreachable or non-2xx becomes a 502"""
        async with self._client() as client:
            try:
                response = await client.request(method, path, **kwargs)
            except httpx.HTTPError as e:
                logger.error(f"Cashfree {method} {path} failed: {e}")
                raise HTTPException(
                    status_code=status.HTTP_502_BAD_GATEWAY,
                    detail="Payment gateway unreachable"
                )

        if not response.is_success:
            logger.error(f"Cashfree {method} {path} returned {response.status_code}: {response.text}")
            try:
                message = response.json().get("message")
            except ValueError:
                message = None
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail=f"Payment gateway error: {message or response.status_code}"
            )

        return response.json()

    @staticmethod
    def generate_order_id() -> str:
        """ORDER_<unix millis>_<random suffix>"""
        return f"ORDER_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"

    def compute_signature(self, order_id: str, payment_id: str) -> str:
        """Hex HMAC-SHA256 over order id followed by payment id"""
        return hmac.new(
            (self.settings.CASHFREE_SECRET_KEY or "").encode(),
            f"{order_id}{payment_id}".encode(),
            hashlib.sha256
        ).hexdigest()

    def compute_webhook_signature(self, raw_body: bytes, timestamp: str) -> str:
        """Base64 HMAC-SHA256 over the timestamp header followed by the raw body"""
        digest = hmac.new(
            (self.settings.CASHFREE_SECRET_KEY or "").encode(),
            timestamp.encode() + raw_body,
            hashlib.sha256
        ).digest()
        return base64.b64encode(digest).decode()

    async def create_order(
        self,
        amount: Decimal,
        entity_type: str,
        entity_id: str,
        fdp_id: str,
        customer: CustomerDetails
    ) -> dict:
        """
        Open a gateway order for a registration

        The Payment row is written with status `created` before the gateway
        call and moves to `pending` once the gateway accepts the order.

        Returns:
            dict with order_id, payment_session_id and payment_link

        Raises:
            HTTPException: 500 without credentials, 502 if the gateway refuses
        """
        self._ensure_config()

        amount = to_money(amount)
        order_id = self.generate_order_id()

        payment = await self.store.create_payment({
            "order_id": order_id,
            "entity_type": entity_type,
            "entity_id": entity_id,
            "fdp_id": fdp_id,
            "amount": amount,
            "currency": self.settings.CURRENCY,
            "status": "created",
            "payment_gateway": "cashfree",
        })

        payload = {
            "order_id": order_id,
            "order_amount": float(amount),
            "order_currency": self.settings.CURRENCY,
            "customer_details": {
                "customer_id": customer.customer_id,
                "customer_email": customer.email or DEFAULT_CUSTOMER_EMAIL,
                "customer_phone": customer.phone or DEFAULT_CUSTOMER_PHONE,
                "customer_name": customer.name or DEFAULT_CUSTOMER_NAME,
            },
            "order_meta": {
                "return_url": f"{self.settings.APP_URL}/payment/callback?orderId={order_id}",
                "notify_url": f"{self.settings.API_URL}/api/payments/webhook",
            },
        }

        result = await self._request("POST", "/orders", json=payload)

        await self.store.update_payment(payment["id"], {
            "status": "pending",
            "gateway_response": result,
        })

        logger.info(f"Payment order {order_id} created for {entity_type} {entity_id} ({amount})")

        return {
            "order_id": order_id,
            "payment_session_id": result.get("payment_session_id"),
            "payment_link": result.get("payment_link"),
        }

    async def verify_payment(self, order_id: str, payment_id: str, signature: str) -> bool:
        """
        Check a client-reported payment

        Returns False on a signature mismatch without touching the network;
        otherwise asks the gateway and accepts only payment_status SUCCESS.
        """
        self._ensure_config()

        expected = self.compute_signature(order_id, payment_id)
        if not hmac.compare_digest(expected.encode(), (signature or "").encode()):
            logger.warning(f"Payment signature mismatch for order {order_id}")
            return False

        try:
            payment_data = await self._request("GET", f"/orders/{order_id}/payments/{payment_id}")
        except HTTPException:
            return False

        payment_status = payment_data.get("payment_status")
        if payment_status == "SUCCESS":
            logger.info(f"Payment {payment_id} for order {order_id} verified")
            return True

        logger.warning(f"Payment {payment_id} for order {order_id} has status {payment_status}")
        return False

    def verify_webhook_signature(
        self,
        raw_body: bytes,
        signature: Optional[str],
        timestamp: Optional[str]
    ) -> bool:
        """Validate x-webhook-signature against the raw request body"""
        if not signature or not timestamp:
            return False
        if not self.settings.CASHFREE_SECRET_KEY:
            logger.warning("Webhook received but the gateway secret is not configured")
            return False

        expected = self.compute_webhook_signature(raw_body, timestamp)
        return hmac.compare_digest(expected.encode(), signature.encode())

    async def initiate_refund(self, order_id: str, amount: Decimal, reason: str) -> dict:
        """
        Ask the gateway to refund an order

        Raises:
            HTTPException: 500 without credentials, 502 if the gateway refuses
        """
        self._ensure_config()

        payload = {
            "refund_amount": float(to_money(amount)),
            "refund_id": f"REFUND_{int(time.time() * 1000)}",
            "refund_note": reason,
        }

        result = await self._request("POST", f"/orders/{order_id}/refunds", json=payload)
        logger.info(f"Refund initiated for order {order_id}: {result.get('refund_status')}")
        return result
