"""
Communication Log Model
Append-only audit trail of outbound email and WhatsApp messages
"""

from sqlalchemy import Column, String, DateTime, Text, ForeignKey
from fdp_portal.database import Base


class CommunicationLog(Base):
    __tablename__ = "communication_logs"
    
    id = Column(String(36), primary_key=True)
    fdp_id = Column(String(36), ForeignKey("fdp_events.id", ondelete="CASCADE"), nullable=True, index=True)
    
    # host_college, faculty, all
    recipient_type = Column(String(50), nullable=False)
    recipient_id = Column(String(36), nullable=True)
    
    channel = Column(String(50), nullable=False)  # email, whatsapp
    message_type = Column(String(100), nullable=True)  # confirmation, reminder, certificate, bulk...
    recipient = Column(String(255), nullable=False)
    subject = Column(Text, nullable=True)
    content = Column(Text, nullable=False)
    
    # sent, failed
    status = Column(String(50), nullable=False, default="pending")
    error_message = Column(Text, nullable=True)
    sent_at = Column(DateTime, nullable=True)
    
    created_at = Column(DateTime, nullable=False)
