"""
Entity Store
Typed CRUD access to every record kind, one method per (entity, operation)

Reads return None (or an empty list) when nothing matches; writes are
single-row and auto-committed.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional, List

from databases import Database
from sqlalchemy import Table, select, insert, update, delete, func, and_

from fdp_portal.models import (
    FdpEvent,
    HostCollege,
    FacultyRegistration,
    Payment,
    Coupon,
    Certificate,
    CertificateTemplate,
    CommunicationLog,
)

EVENTS: Table = FdpEvent.__table__
HOST_COLLEGES: Table = HostCollege.__table__
FACULTY: Table = FacultyRegistration.__table__
PAYMENTS: Table = Payment.__table__
COUPONS: Table = Coupon.__table__
CERTIFICATES: Table = Certificate.__table__
TEMPLATES: Table = CertificateTemplate.__table__
COMMUNICATION_LOGS: Table = CommunicationLog.__table__

# Creation timestamps filled in when the caller leaves them out
_CREATED_COLUMNS = ("created_at", "updated_at", "registered_at", "generated_at")

TWO_PLACES = Decimal("0.01")


def to_money(value) -> Decimal:
    """Normalise a numeric value to a two-decimal Decimal"""
    if value is None:
        return Decimal("0.00")
    return Decimal(str(value)).quantize(TWO_PLACES)


class EntityStore:
    """Pass-through persistence for the registration pipeline"""

    def __init__(self, database: Database):
        self.database = database

    # ------------------------------------------------------------------
    # Generic helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _row_to_dict(table: Table, row) -> Optional[dict]:
        if row is None:
            return None
        return {column.name: row[column.name] for column in table.columns}

    async def _insert(self, table: Table, values: dict) -> dict:
        record = {key: value for key, value in values.items() if key in table.c}
        record.setdefault("id", str(uuid.uuid4()))
        now = datetime.utcnow()
        for column_name in _CREATED_COLUMNS:
            if column_name in table.c and record.get(column_name) is None:
                record[column_name] = now

        await self.database.execute(insert(table).values(**record))
        return await self._get(table, record["id"])

    async def _get(self, table: Table, entity_id: str) -> Optional[dict]:
        row = await self.database.fetch_one(
            select(table).where(table.c.id == str(entity_id))
        )
        return self._row_to_dict(table, row)

    async def _first(self, table: Table, *criteria) -> Optional[dict]:
        row = await self.database.fetch_one(select(table).where(*criteria).limit(1))
        return self._row_to_dict(table, row)

    async def _list(self, table: Table, *criteria, order_by=None) -> List[dict]:
        query = select(table)
        if criteria:
            query = query.where(*criteria)
        if order_by is not None:
            query = query.order_by(order_by)
        rows = await self.database.fetch_all(query)
        return [self._row_to_dict(table, row) for row in rows]

    async def _update(self, table: Table, entity_id: str, values: dict) -> Optional[dict]:
        changes = {
            key: value for key, value in values.items()
            if key in table.c and key != "id"
        }
        if "updated_at" in table.c:
            changes["updated_at"] = datetime.utcnow()

        if changes:
            await self.database.execute(
                update(table).where(table.c.id == str(entity_id)).values(**changes)
            )
        return await self._get(table, entity_id)

    async def _delete(self, table: Table, entity_id: str) -> bool:
        existing = await self._get(table, entity_id)
        if not existing:
            return False
        await self.database.execute(delete(table).where(table.c.id == str(entity_id)))
        return True

    async def _count(self, *criteria, table: Table) -> int:
        query = select(func.count().label("count")).select_from(table)
        if criteria:
            query = query.where(*criteria)
        row = await self.database.fetch_one(query)
        return int(row["count"] or 0) if row else 0

    # ------------------------------------------------------------------
    # FDP events
    # ------------------------------------------------------------------

    async def create_event(self, data: dict) -> dict:
        return await self._insert(EVENTS, data)

    async def get_event(self, event_id: str) -> Optional[dict]:
        return await self._get(EVENTS, event_id)

    async def list_events(self) -> List[dict]:
        return await self._list(EVENTS, order_by=EVENTS.c.created_at.desc())

    async def list_upcoming_events(self) -> List[dict]:
        return await self._list(
            EVENTS,
            EVENTS.c.status == "upcoming",
            order_by=EVENTS.c.start_date.asc()
        )

    async def update_event(self, event_id: str, data: dict) -> Optional[dict]:
        return await self._update(EVENTS, event_id, data)

    async def delete_event(self, event_id: str) -> bool:
        return await self._delete(EVENTS, event_id)

    # ------------------------------------------------------------------
    # Host colleges
    # ------------------------------------------------------------------

    async def create_host_college(self, data: dict) -> dict:
        return await self._insert(HOST_COLLEGES, data)

    async def get_host_college(self, college_id: str) -> Optional[dict]:
        return await self._get(HOST_COLLEGES, college_id)

    async def list_host_colleges(self, fdp_id: str) -> List[dict]:
        return await self._list(
            HOST_COLLEGES,
            HOST_COLLEGES.c.fdp_id == fdp_id,
            order_by=HOST_COLLEGES.c.registered_at.desc()
        )

    async def update_host_college(self, college_id: str, data: dict) -> Optional[dict]:
        return await self._update(HOST_COLLEGES, college_id, data)

    async def delete_host_college(self, college_id: str) -> bool:
        return await self._delete(HOST_COLLEGES, college_id)

    # ------------------------------------------------------------------
    # Faculty registrations
    # ------------------------------------------------------------------

    async def create_faculty_registration(self, data: dict) -> dict:
        return await self._insert(FACULTY, data)

    async def get_faculty_registration(self, faculty_id: str) -> Optional[dict]:
        return await self._get(FACULTY, faculty_id)

    async def list_faculty_by_event(self, fdp_id: str) -> List[dict]:
        return await self._list(
            FACULTY,
            FACULTY.c.fdp_id == fdp_id,
            order_by=FACULTY.c.registered_at.desc()
        )

    async def list_faculty_by_host_college(self, host_college_id: str) -> List[dict]:
        return await self._list(
            FACULTY,
            FACULTY.c.host_college_id == host_college_id,
            order_by=FACULTY.c.registered_at.desc()
        )

    async def update_faculty_registration(self, faculty_id: str, data: dict) -> Optional[dict]:
        return await self._update(FACULTY, faculty_id, data)

    async def delete_faculty_registration(self, faculty_id: str) -> bool:
        return await self._delete(FACULTY, faculty_id)

    # ------------------------------------------------------------------
    # Payments
    # ------------------------------------------------------------------

    async def create_payment(self, data: dict) -> dict:
        return await self._insert(PAYMENTS, data)

    async def get_payment(self, payment_row_id: str) -> Optional[dict]:
        return await self._get(PAYMENTS, payment_row_id)

    async def get_payment_by_order_id(self, order_id: str) -> Optional[dict]:
        return await self._first(PAYMENTS, PAYMENTS.c.order_id == order_id)

    async def list_payments(self, fdp_id: str) -> List[dict]:
        return await self._list(
            PAYMENTS,
            PAYMENTS.c.fdp_id == fdp_id,
            order_by=PAYMENTS.c.created_at.desc()
        )

    async def list_payments_for_entity(self, entity_type: str, entity_id: str) -> List[dict]:
        return await self._list(
            PAYMENTS,
            PAYMENTS.c.entity_type == entity_type,
            PAYMENTS.c.entity_id == entity_id,
            order_by=PAYMENTS.c.created_at.desc()
        )

    async def update_payment(self, payment_row_id: str, data: dict) -> Optional[dict]:
        return await self._update(PAYMENTS, payment_row_id, data)

    async def delete_payment(self, payment_row_id: str) -> bool:
        return await self._delete(PAYMENTS, payment_row_id)

    # ------------------------------------------------------------------
    # Certificates (never updated once issued)
    # ------------------------------------------------------------------

    async def create_certificate(self, data: dict) -> dict:
        return await self._insert(CERTIFICATES, data)

    async def get_certificate(self, certificate_row_id: str) -> Optional[dict]:
        return await self._get(CERTIFICATES, certificate_row_id)

    async def get_certificate_by_faculty_id(self, faculty_id: str) -> Optional[dict]:
        return await self._first(CERTIFICATES, CERTIFICATES.c.faculty_id == faculty_id)

    async def get_certificate_by_certificate_id(self, certificate_id: str) -> Optional[dict]:
        return await self._first(CERTIFICATES, CERTIFICATES.c.certificate_id == certificate_id)

    async def list_certificates(self, fdp_id: str) -> List[dict]:
        return await self._list(
            CERTIFICATES,
            CERTIFICATES.c.fdp_id == fdp_id,
            order_by=CERTIFICATES.c.generated_at.desc()
        )

    async def delete_certificate(self, certificate_row_id: str) -> bool:
        return await self._delete(CERTIFICATES, certificate_row_id)

    # ------------------------------------------------------------------
    # Certificate templates
    # ------------------------------------------------------------------

    async def _clear_default_templates(self, keep_id: Optional[str] = None) -> None:
        query = update(TEMPLATES).where(TEMPLATES.c.is_default.is_(True))
        if keep_id:
            query = query.where(TEMPLATES.c.id != keep_id)
        await self.database.execute(query.values(is_default=False))

    async def create_certificate_template(self, data: dict) -> dict:
        template = await self._insert(TEMPLATES, data)
        if template["is_default"]:
            await self._clear_default_templates(keep_id=template["id"])
        return template

    async def get_certificate_template(self, template_id: str) -> Optional[dict]:
        return await self._get(TEMPLATES, template_id)

    async def get_default_certificate_template(self) -> Optional[dict]:
        return await self._first(TEMPLATES, TEMPLATES.c.is_default.is_(True))

    async def list_certificate_templates(self) -> List[dict]:
        return await self._list(TEMPLATES, order_by=TEMPLATES.c.created_at.desc())

    async def update_certificate_template(self, template_id: str, data: dict) -> Optional[dict]:
        template = await self._update(TEMPLATES, template_id, data)
        if template and template["is_default"]:
            await self._clear_default_templates(keep_id=template["id"])
        return template

    async def delete_certificate_template(self, template_id: str) -> bool:
        return await self._delete(TEMPLATES, template_id)

    # ------------------------------------------------------------------
    # Communication logs (append-only)
    # ------------------------------------------------------------------

    async def create_communication_log(self, data: dict) -> dict:
        return await self._insert(COMMUNICATION_LOGS, data)

    async def list_communication_logs(self, fdp_id: str) -> List[dict]:
        return await self._list(
            COMMUNICATION_LOGS,
            COMMUNICATION_LOGS.c.fdp_id == fdp_id,
            order_by=COMMUNICATION_LOGS.c.created_at.desc()
        )

    # ------------------------------------------------------------------
    # Coupons
    # ------------------------------------------------------------------

    async def create_coupon(self, data: dict) -> dict:
        return await self._insert(COUPONS, data)

    async def get_coupon(self, coupon_id: str) -> Optional[dict]:
        return await self._get(COUPONS, coupon_id)

    async def get_coupon_by_code(self, code: str) -> Optional[dict]:
        """Active coupon with this code"""
        return await self._first(
            COUPONS,
            COUPONS.c.code == code,
            COUPONS.c.is_active.is_(True)
        )

    async def coupon_code_exists(self, code: str) -> bool:
        return await self._first(COUPONS, COUPONS.c.code == code) is not None

    async def list_coupons(self) -> List[dict]:
        return await self._list(COUPONS, order_by=COUPONS.c.created_at.desc())

    async def update_coupon(self, coupon_id: str, data: dict) -> Optional[dict]:
        return await self._update(COUPONS, coupon_id, data)

    async def delete_coupon(self, coupon_id: str) -> bool:
        return await self._delete(COUPONS, coupon_id)

    # ------------------------------------------------------------------
    # Analytics
    # ------------------------------------------------------------------

    async def _paid_stats(self, table: Table, *criteria) -> tuple:
        query = select(
            func.count().label("count"),
            func.coalesce(func.sum(table.c.amount_paid), 0).label("revenue")
        ).select_from(table).where(table.c.payment_status == "completed", *criteria)
        row = await self.database.fetch_one(query)
        if not row:
            return 0, to_money(0)
        return int(row["count"] or 0), to_money(row["revenue"])

    async def get_event_analytics(self, fdp_id: str) -> dict:
        host_count, host_revenue = await self._paid_stats(
            HOST_COLLEGES, HOST_COLLEGES.c.fdp_id == fdp_id
        )
        faculty_count, faculty_revenue = await self._paid_stats(
            FACULTY, FACULTY.c.fdp_id == fdp_id
        )

        return {
            "fdp_id": fdp_id,
            "total_host_colleges": host_count,
            "total_faculty": faculty_count,
            "total_revenue": to_money(host_revenue + faculty_revenue),
            "payments_pending": await self._count(
                and_(PAYMENTS.c.fdp_id == fdp_id, PAYMENTS.c.status == "pending"),
                table=PAYMENTS
            ),
            "payments_completed": await self._count(
                and_(PAYMENTS.c.fdp_id == fdp_id, PAYMENTS.c.status == "success"),
                table=PAYMENTS
            ),
            "certificates_generated": await self._count(
                CERTIFICATES.c.fdp_id == fdp_id,
                table=CERTIFICATES
            ),
        }

    async def get_dashboard_summary(self) -> dict:
        host_count, host_revenue = await self._paid_stats(HOST_COLLEGES)
        faculty_count, faculty_revenue = await self._paid_stats(FACULTY)

        return {
            "total_events": await self._count(table=EVENTS),
            "upcoming_events": await self._count(EVENTS.c.status == "upcoming", table=EVENTS),
            "total_host_colleges": await self._count(table=HOST_COLLEGES),
            "total_faculty": await self._count(table=FACULTY),
            "paid_host_colleges": host_count,
            "paid_faculty": faculty_count,
            "total_revenue": to_money(host_revenue + faculty_revenue),
            "certificates_generated": await self._count(table=CERTIFICATES),
        }
