"""
Service Dependencies
Builds every adapter once from settings and hands services to the routes
"""

from functools import lru_cache

from fdp_portal.config import settings
from fdp_portal.database import database
from fdp_portal.services.certificate_service import CertificateService, PlaywrightPdfEngine
from fdp_portal.services.communication_service import CommunicationService
from fdp_portal.services.coupon_service import CouponService
from fdp_portal.services.email_service import SmtpEmailTransport
from fdp_portal.services.entity_store import EntityStore
from fdp_portal.services.event_service import EventService
from fdp_portal.services.notification_service import NotificationService
from fdp_portal.services.payment_service import CashfreeGateway
from fdp_portal.services.registration_service import RegistrationService
from fdp_portal.services.storage_service import StorageService
from fdp_portal.services.template_service import TemplateService
from fdp_portal.services.whatsapp_service import build_whatsapp_transport


@lru_cache
def get_entity_store() -> EntityStore:
    return EntityStore(database)


@lru_cache
def get_storage_service() -> StorageService:
    return StorageService(settings)


@lru_cache
def get_payment_gateway() -> CashfreeGateway:
    return CashfreeGateway(settings, get_entity_store())


@lru_cache
def get_notification_service() -> NotificationService:
    return NotificationService(
        get_entity_store(),
        SmtpEmailTransport(settings),
        build_whatsapp_transport(settings),
        settings
    )


@lru_cache
def get_certificate_service() -> CertificateService:
    return CertificateService(
        get_entity_store(),
        get_storage_service(),
        PlaywrightPdfEngine(),
        settings
    )


@lru_cache
def get_registration_service() -> RegistrationService:
    return RegistrationService(
        get_entity_store(),
        get_payment_gateway(),
        get_notification_service(),
        get_certificate_service(),
        get_storage_service(),
        settings
    )


@lru_cache
def get_event_service() -> EventService:
    return EventService(get_entity_store())


@lru_cache
def get_coupon_service() -> CouponService:
    return CouponService(get_entity_store())


@lru_cache
def get_template_service() -> TemplateService:
    return TemplateService(get_entity_store())


@lru_cache
def get_communication_service() -> CommunicationService:
    return CommunicationService(get_entity_store(), get_notification_service(), settings)
