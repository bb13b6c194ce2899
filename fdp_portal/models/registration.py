"""
Registration Models
Host colleges and individual faculty registered for an event
"""

from sqlalchemy import Column, String, Boolean, DateTime, Numeric, Text, ForeignKey
from sqlalchemy.orm import relationship
from fdp_portal.database import Base


class HostCollege(Base):
    __tablename__ = "host_colleges"
    
    id = Column(String(36), primary_key=True)
    fdp_id = Column(String(36), ForeignKey("fdp_events.id", ondelete="CASCADE"), nullable=False, index=True)
    
    # College details
    college_name = Column(String(255), nullable=False)
    address = Column(Text, nullable=False)
    website = Column(String(255), nullable=True)
    contact_person = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=False)
    whatsapp = Column(String(20), nullable=True)
    logo_url = Column(Text, nullable=True)
    
    # Payment (pending, completed, failed, refunded)
    payment_status = Column(String(50), nullable=False, default="pending")
    payment_id = Column(String(255), nullable=True)
    amount_paid = Column(Numeric(10, 2), nullable=True)
    
    registered_at = Column(DateTime, nullable=False)
    
    event = relationship("FdpEvent", backref="host_colleges")


class FacultyRegistration(Base):
    __tablename__ = "faculty_registrations"
    
    id = Column(String(36), primary_key=True)
    fdp_id = Column(String(36), ForeignKey("fdp_events.id", ondelete="CASCADE"), nullable=False, index=True)
    host_college_id = Column(String(36), ForeignKey("host_colleges.id", ondelete="SET NULL"), nullable=True, index=True)
    registration_type = Column(String(50), nullable=False)  # host_college, individual
    
    # Participant details
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=False)
    whatsapp = Column(String(20), nullable=True)
    designation = Column(String(100), nullable=True)
    department = Column(String(100), nullable=True)
    institution = Column(String(255), nullable=False)
    
    # Payment (pending, completed, failed, refunded)
    payment_status = Column(String(50), nullable=False, default="pending")
    payment_id = Column(String(255), nullable=True)
    amount_paid = Column(Numeric(10, 2), nullable=True)
    
    # Post-event progress
    feedback_submitted = Column(Boolean, nullable=False, default=False)
    certificate_generated = Column(Boolean, nullable=False, default=False)
    certificate_url = Column(Text, nullable=True)
    
    registered_at = Column(DateTime, nullable=False)
    
    event = relationship("FdpEvent", backref="faculty_registrations")
    host_college = relationship("HostCollege", backref="faculty")
