"""
Payment Models
Gateway orders and discount coupons
"""

from sqlalchemy import Column, String, Integer, Boolean, DateTime, Numeric, Text, ForeignKey, JSON
from sqlalchemy.orm import relationship
from fdp_portal.database import Base


class Payment(Base):
    __tablename__ = "payments"
    
    id = Column(String(36), primary_key=True)
    order_id = Column(String(255), unique=True, nullable=False, index=True)
    payment_id = Column(String(255), nullable=True)
    
    # Paying entity: host_college or faculty
    entity_type = Column(String(50), nullable=False)
    entity_id = Column(String(36), nullable=False, index=True)
    fdp_id = Column(String(36), ForeignKey("fdp_events.id", ondelete="CASCADE"), nullable=False, index=True)
    
    amount = Column(Numeric(10, 2), nullable=False)
    currency = Column(String(10), nullable=False, default="INR")
    
    # created, pending, success, failed, refunded
    status = Column(String(50), nullable=False, default="created")
    payment_method = Column(String(50), nullable=True)
    payment_gateway = Column(String(50), nullable=False, default="cashfree")
    gateway_response = Column(JSON, nullable=True)
    
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)
    
    event = relationship("FdpEvent", backref="payments")


class Coupon(Base):
    __tablename__ = "coupons"
    
    id = Column(String(36), primary_key=True)
    code = Column(String(100), unique=True, nullable=False, index=True)
    fdp_id = Column(String(36), ForeignKey("fdp_events.id", ondelete="CASCADE"), nullable=True)
    
    # percentage or fixed
    discount_type = Column(String(50), nullable=False)
    discount_value = Column(Numeric(10, 2), nullable=False)
    
    # Usage
    max_uses = Column(Integer, nullable=True)
    used_count = Column(Integer, nullable=False, default=0)
    valid_from = Column(DateTime, nullable=True)
    valid_until = Column(DateTime, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    description = Column(Text, nullable=True)
    
    created_at = Column(DateTime, nullable=False)
