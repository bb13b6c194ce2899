"""
Certificate Models
Issued certificates and the HTML templates they are rendered from
"""

from sqlalchemy import Column, String, Boolean, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship
from fdp_portal.database import Base


class Certificate(Base):
    __tablename__ = "certificates"
    
    id = Column(String(36), primary_key=True)
    faculty_id = Column(
        String(36),
        ForeignKey("faculty_registrations.id", ondelete="CASCADE"),
        unique=True,
        nullable=False
    )
    fdp_id = Column(String(36), ForeignKey("fdp_events.id", ondelete="CASCADE"), nullable=False, index=True)
    certificate_id = Column(String(100), unique=True, nullable=False, index=True)
    certificate_url = Column(Text, nullable=True)
    
    # Snapshot taken at issue time
    participant_name = Column(String(255), nullable=False)
    college_name = Column(String(255), nullable=True)
    fdp_title = Column(String(255), nullable=False)
    fdp_dates = Column(String(100), nullable=True)
    organiser_logo = Column(Text, nullable=True)
    college_logo = Column(Text, nullable=True)
    signature_image = Column(Text, nullable=True)
    
    generated_at = Column(DateTime, nullable=False)
    
    faculty = relationship("FacultyRegistration", backref="certificate")


class CertificateTemplate(Base):
    __tablename__ = "certificate_templates"
    
    id = Column(String(36), primary_key=True)
    name = Column(String(255), nullable=False)
    html_template = Column(Text, nullable=False)
    organiser_logo = Column(Text, nullable=True)
    signature_image = Column(Text, nullable=True)
    is_default = Column(Boolean, nullable=False, default=False)
    
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)
