"""
Registration Service
Registration -> payment -> confirmation -> feedback -> certificate pipeline
"""

import json
import logging
from typing import List, Optional, Tuple

from fastapi import HTTPException, status

from fdp_portal.config import Settings
from fdp_portal.schemas.payment import CustomerDetails, RefundRequest
from fdp_portal.schemas.registration import HostCollegeCreate, FacultyRegistrationCreate
from fdp_portal.services.certificate_service import CertificateService
from fdp_portal.services.entity_store import EntityStore, to_money
from fdp_portal.services.notification_service import NotificationService
from fdp_portal.services.payment_service import CashfreeGateway
from fdp_portal.services.storage_service import StorageService

logger = logging.getLogger(__name__)

# Events that no longer accept registrations
CLOSED_EVENT_STATUSES = ("completed", "cancelled")


def parse_webhook_payload(payload: dict) -> Tuple[Optional[str], Optional[str], Optional[str]]:
    """
    Pull (order id, payment status, payment id) out of a gateway webhook

    Accepts the nested `data.order` / `data.payment` shape as well as the
    flat `orderId` / `paymentStatus` / `paymentId` shape.
    """
    data = payload.get("data") or {}
    order = data.get("order") or {}
    payment = data.get("payment") or {}

    order_id = payload.get("orderId") or order.get("order_id")
    payment_status = payload.get("paymentStatus") or payment.get("payment_status")
    payment_id = payload.get("paymentId") or payment.get("cf_payment_id")

    return (
        str(order_id) if order_id else None,
        str(payment_status) if payment_status else None,
        str(payment_id) if payment_id else None,
    )


class RegistrationService:
    """Orchestrates registrations, payment confirmation and certificate issuance"""

    def __init__(
        self,
        store: EntityStore,
        gateway: CashfreeGateway,
        notifications: NotificationService,
        certificates: CertificateService,
        storage: StorageService,
        settings: Settings
    ):
        self.store = store
        self.gateway = gateway
        self.notifications = notifications
        self.certificates = certificates
        self.storage = storage
        self.settings = settings

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    async def _get_open_event(self, fdp_id: str) -> dict:
        event = await self.store.get_event(fdp_id)
        if not event:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="FDP event not found"
            )
        if event["status"] in CLOSED_EVENT_STATUSES:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Registrations are closed for this FDP ({event['status']})"
            )
        return event

    async def _get_entity(self, entity_type: str, entity_id: str) -> Optional[dict]:
        if entity_type == "host_college":
            return await self.store.get_host_college(entity_id)
        return await self.store.get_faculty_registration(entity_id)

    async def _update_entity(self, entity_type: str, entity_id: str, values: dict) -> Optional[dict]:
        if entity_type == "host_college":
            return await self.store.update_host_college(entity_id, values)
        return await self.store.update_faculty_registration(entity_id, values)

    async def get_faculty_or_404(self, faculty_id: str) -> dict:
        faculty = await self.store.get_faculty_registration(faculty_id)
        if not faculty:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Faculty registration not found"
            )
        return faculty

    async def get_host_college_or_404(self, college_id: str) -> dict:
        college = await self.store.get_host_college(college_id)
        if not college:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Host college not found"
            )
        return college

    async def list_host_college_faculty(self, college_id: str) -> List[dict]:
        await self.get_host_college_or_404(college_id)
        return await self.store.list_faculty_by_host_college(college_id)

    async def get_payment_or_404(self, order_id: str) -> dict:
        payment = await self.store.get_payment_by_order_id(order_id)
        if not payment:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Payment not found"
            )
        return payment

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    async def register_host_college(
        self,
        data: HostCollegeCreate,
        logo: Optional[Tuple[bytes, str]] = None
    ) -> dict:
        """
        Persist a host college and open its payment order

        Args:
            data: Validated registration form
            logo: Optional (bytes, content type) of the college logo

        Returns:
            dict with the created `college` and its `payment_order`
        """
        event = await self._get_open_event(data.fdp_id)

        logo_url = None
        if logo:
            logo_url = self.storage.save_logo(*logo)

        college = await self.store.create_host_college({
            **data.model_dump(),
            "logo_url": logo_url,
            "payment_status": "pending",
        })
        logger.info(f"Host college registered: {college['college_name']} for FDP {event['id']}")

        payment_order = await self.gateway.create_order(
            amount=to_money(event["host_fee"]),
            entity_type="host_college",
            entity_id=college["id"],
            fdp_id=event["id"],
            customer=CustomerDetails(
                customer_id=college["id"],
                email=college["email"],
                phone=college["phone"],
                name=college["contact_person"],
            )
        )

        return {"college": college, "payment_order": payment_order}

    async def register_faculty(self, data: FacultyRegistrationCreate) -> dict:
        """
        Persist a faculty registration and open its payment order

        Raises:
            HTTPException: 404 unknown event or host college, 400 when the
                event is closed or full, or the host college belongs elsewhere
        """
        event = await self._get_open_event(data.fdp_id)

        if data.host_college_id:
            college = await self.get_host_college_or_404(data.host_college_id)
            if college["fdp_id"] != event["id"]:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Host college is not registered for this FDP"
                )

        if event["max_participants"]:
            registrations = await self.store.list_faculty_by_event(event["id"])
            paid = [r for r in registrations if r["payment_status"] == "completed"]
            if len(paid) >= event["max_participants"]:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="This FDP is full"
                )

        faculty = await self.store.create_faculty_registration({
            **data.model_dump(),
            "registration_type": "host_college" if data.host_college_id else "individual",
            "payment_status": "pending",
            "feedback_submitted": False,
            "certificate_generated": False,
        })
        logger.info(f"Faculty registered: {faculty['email']} for FDP {event['id']}")

        payment_order = await self.gateway.create_order(
            amount=to_money(event["faculty_fee"]),
            entity_type="faculty",
            entity_id=faculty["id"],
            fdp_id=event["id"],
            customer=CustomerDetails(
                customer_id=faculty["id"],
                email=faculty["email"],
                phone=faculty["phone"],
                name=faculty["name"],
            )
        )

        return {"registration": faculty, "payment_order": payment_order}

    # ------------------------------------------------------------------
    # Payment confirmation
    # ------------------------------------------------------------------

    async def confirm_payment(
        self,
        payment: dict,
        success: bool,
        payment_id: Optional[str] = None,
        gateway_response: Optional[dict] = None,
        payment_method: Optional[str] = None,
        notify_failure: bool = False
    ) -> dict:
        """
        Record the outcome of a payment on the Payment row and its registrant

        Confirmation notifications go out only on the first move into
        `completed`; repeated confirmations rewrite the same status values
        without sending again. A refunded payment is final, and a late
        failure report never downgrades a successful one.
        """
        if payment["status"] == "refunded" or (payment["status"] == "success" and not success):
            logger.warning(
                f"Ignoring {'success' if success else 'failure'} report for "
                f"{payment['status']} payment {payment['order_id']}"
            )
            return payment

        entity_type = payment["entity_type"]
        entity = await self._get_entity(entity_type, payment["entity_id"])
        event = await self.store.get_event(payment["fdp_id"])
        payment_id = payment_id or payment.get("payment_id")

        updates = {"status": "success" if success else "failed", "payment_id": payment_id}
        if gateway_response is not None:
            updates["gateway_response"] = gateway_response
        if payment_method:
            updates["payment_method"] = payment_method
        payment = await self.store.update_payment(payment["id"], updates)

        if entity is None:
            logger.warning(
                f"Payment {payment['order_id']} references missing {entity_type} {payment['entity_id']}"
            )
            return payment

        previous_status = entity["payment_status"]

        if success:
            entity = await self._update_entity(entity_type, entity["id"], {
                "payment_status": "completed",
                "payment_id": payment_id,
                "amount_paid": payment["amount"],
            })
            logger.info(f"Payment {payment['order_id']} confirmed for {entity_type} {entity['id']}")

            if previous_status != "completed" and event:
                await self.notifications.send_payment_confirmation(event, entity_type, entity, payment)
            return payment

        if previous_status != "completed":
            entity = await self._update_entity(entity_type, entity["id"], {
                "payment_status": "failed",
            })
        logger.info(f"Payment {payment['order_id']} failed for {entity_type} {entity['id']}")

        if notify_failure and previous_status not in ("completed", "failed") and event:
            await self.notifications.send_payment_failure(event, entity_type, entity, payment["order_id"])
        return payment

    async def verify_payment(
        self,
        order_id: str,
        payment_id: str,
        signature: str,
        payment_method: Optional[str] = None
    ) -> dict:
        """
        Client-reported payment confirmation

        Raises:
            HTTPException: 404 unknown order, 400 when verification fails
        """
        payment = await self.get_payment_or_404(order_id)

        if not await self.gateway.verify_payment(order_id, payment_id, signature):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Payment verification failed"
            )

        return await self.confirm_payment(
            payment,
            success=True,
            payment_id=payment_id,
            payment_method=payment_method
        )

    async def handle_webhook(
        self,
        raw_body: bytes,
        signature: Optional[str],
        timestamp: Optional[str]
    ) -> bool:
        """
        Apply a gateway webhook

        The signature is checked before the body is even parsed.

        Returns:
            True if a known payment was updated

        Raises:
            HTTPException: 401 bad signature, 400 unreadable payload
        """
        if not self.gateway.verify_webhook_signature(raw_body, signature, timestamp):
            logger.warning("Webhook signature verification failed - rejecting request")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid webhook signature"
            )

        try:
            payload = json.loads(raw_body)
        except ValueError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Webhook body is not valid JSON"
            )
        if not isinstance(payload, dict):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Webhook body must be a JSON object"
            )

        order_id, payment_status, payment_id = parse_webhook_payload(payload)
        if not order_id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Webhook payload has no order id"
            )

        payment = await self.store.get_payment_by_order_id(order_id)
        if not payment:
            logger.warning(f"Webhook for unknown order {order_id}")
            return False

        await self.confirm_payment(
            payment,
            success=payment_status == "SUCCESS",
            payment_id=payment_id,
            gateway_response=payload,
            notify_failure=True
        )
        return True

    async def refund_payment(self, order_id: str, data: RefundRequest) -> dict:
        """
        Refund a successful payment through the gateway

        Raises:
            HTTPException: 404 unknown order, 400 not refundable or amount too
                large, 502 gateway refusal
        """
        payment = await self.get_payment_or_404(order_id)

        if payment["status"] != "success":
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Only successful payments can be refunded"
            )

        amount = to_money(data.amount if data.amount is not None else payment["amount"])
        if amount > to_money(payment["amount"]):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Refund amount exceeds the amount paid"
            )

        result = await self.gateway.initiate_refund(order_id, amount, data.reason)

        previous = payment["gateway_response"]
        audit = dict(previous) if isinstance(previous, dict) else {"payment": previous}
        audit["refund"] = result

        payment = await self.store.update_payment(payment["id"], {
            "status": "refunded",
            "gateway_response": audit,
        })
        await self._update_entity(payment["entity_type"], payment["entity_id"], {
            "payment_status": "refunded",
        })

        logger.info(f"Payment {order_id} refunded ({amount})")
        return {"success": True, "payment": payment, "gateway_response": result}

    # ------------------------------------------------------------------
    # Feedback and certificates
    # ------------------------------------------------------------------

    async def _issue_and_notify(self, faculty: dict, event: dict) -> dict:
        certificate = await self.certificates.issue_certificate(faculty, event)
        await self.notifications.send_certificate_ready(event, faculty, certificate["certificate_url"])
        return certificate

    async def submit_feedback(self, faculty_id: str) -> dict:
        """
        Mark feedback as submitted and issue the certificate when eligible

        Returns:
            dict with `registration`, `certificate` and `certificate_status`
            (generated, already_exists or not_eligible)
        """
        faculty = await self.get_faculty_or_404(faculty_id)

        if not faculty["feedback_submitted"]:
            faculty = await self.store.update_faculty_registration(faculty_id, {
                "feedback_submitted": True,
            })

        if faculty["payment_status"] != "completed":
            return {"registration": faculty, "certificate": None, "certificate_status": "not_eligible"}

        existing = await self.store.get_certificate_by_faculty_id(faculty_id)
        if existing:
            return {"registration": faculty, "certificate": existing, "certificate_status": "already_exists"}

        event = await self.store.get_event(faculty["fdp_id"])
        if not event:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="FDP event not found"
            )

        try:
            certificate = await self._issue_and_notify(faculty, event)
        except HTTPException as e:
            if e.status_code != status.HTTP_409_CONFLICT:
                raise
            certificate = await self.store.get_certificate_by_faculty_id(faculty_id)
            faculty = await self.store.get_faculty_registration(faculty_id)
            return {"registration": faculty, "certificate": certificate, "certificate_status": "already_exists"}

        faculty = await self.store.get_faculty_registration(faculty_id)
        return {"registration": faculty, "certificate": certificate, "certificate_status": "generated"}

    async def generate_certificate(self, faculty_id: str) -> dict:
        """
        Admin issuance for one registration

        Raises:
            HTTPException: 404 unknown registration or event, 400 unpaid,
                409 already issued
        """
        faculty = await self.get_faculty_or_404(faculty_id)

        event = await self.store.get_event(faculty["fdp_id"])
        if not event:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="FDP event not found"
            )

        if faculty["payment_status"] != "completed":
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Certificate requires a completed payment"
            )

        return await self._issue_and_notify(faculty, event)

    async def bulk_generate_certificates(self, fdp_id: str) -> dict:
        """
        Issue certificates for every eligible registration of an event

        Registrations are processed one after another; a failure is reported
        in that registration's result and the batch carries on.
        """
        event = await self.store.get_event(fdp_id)
        if not event:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="FDP event not found"
            )

        registrations = await self.store.list_faculty_by_event(fdp_id)
        eligible = [
            r for r in registrations
            if r["payment_status"] == "completed"
            and r["feedback_submitted"]
            and not r["certificate_generated"]
        ]

        results: List[dict] = []
        for faculty in eligible:
            existing = await self.store.get_certificate_by_faculty_id(faculty["id"])
            if existing:
                results.append({
                    "faculty_id": faculty["id"],
                    "status": "already_exists",
                    "certificate_id": existing["certificate_id"],
                })
                continue

            try:
                certificate = await self._issue_and_notify(faculty, event)
            except HTTPException as e:
                if e.status_code == status.HTTP_409_CONFLICT:
                    results.append({"faculty_id": faculty["id"], "status": "already_exists"})
                else:
                    logger.error(f"Certificate for faculty {faculty['id']} failed: {e.detail}")
                    results.append({"faculty_id": faculty["id"], "status": "error", "error": str(e.detail)})
                continue
            except Exception as e:
                logger.exception(f"Certificate for faculty {faculty['id']} failed")
                results.append({"faculty_id": faculty["id"], "status": "error", "error": str(e)})
                continue

            results.append({
                "faculty_id": faculty["id"],
                "status": "generated",
                "certificate_id": certificate["certificate_id"],
            })

        generated = sum(1 for r in results if r["status"] == "generated")
        logger.info(f"Bulk certificates for FDP {fdp_id}: {generated}/{len(results)} generated")

        return {
            "fdp_id": fdp_id,
            "total": len(results),
            "generated": generated,
            "results": results,
        }

    async def get_certificate_for_faculty(self, faculty_id: str) -> dict:
        certificate = await self.store.get_certificate_by_faculty_id(faculty_id)
        if not certificate:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Certificate not found"
            )
        return certificate

    async def verify_certificate(self, certificate_id: str) -> dict:
        certificate = await self.store.get_certificate_by_certificate_id(certificate_id)
        if not certificate:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Certificate not found"
            )
        return {"valid": True, **certificate}
