"""
FDP Event Model
Faculty development programs open for registration
"""

from sqlalchemy import Column, String, Integer, DateTime, Numeric, Text
from fdp_portal.database import Base


class FdpEvent(Base):
    __tablename__ = "fdp_events"
    
    id = Column(String(36), primary_key=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(100), nullable=False)  # NAAC, NBA, etc.
    banner_image = Column(Text, nullable=True)
    
    # Schedule
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)
    
    # Fees
    host_fee = Column(Numeric(10, 2), nullable=False)
    faculty_fee = Column(Numeric(10, 2), nullable=False)
    max_participants = Column(Integer, nullable=True)
    
    # upcoming, ongoing, completed, cancelled
    status = Column(String(50), nullable=False, default="upcoming", index=True)
    
    # Links shared with registrants
    joining_link = Column(Text, nullable=True)
    community_link = Column(Text, nullable=True)
    whatsapp_group_link = Column(Text, nullable=True)
    feedback_form_link = Column(Text, nullable=True)
    
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)
