"""
Database Models
Import all models here for Alembic migrations
"""

from fdp_portal.models.event import FdpEvent
from fdp_portal.models.registration import HostCollege, FacultyRegistration
from fdp_portal.models.payment import Payment, Coupon
from fdp_portal.models.certificate import Certificate, CertificateTemplate
from fdp_portal.models.communication import CommunicationLog

__all__ = [
    "FdpEvent",
    "HostCollege",
    "FacultyRegistration",
    "Payment",
    "Coupon",
    "Certificate",
    "CertificateTemplate",
    "CommunicationLog",
]
