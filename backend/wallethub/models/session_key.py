"""SessionKey model - delegated signing sessions issued to a device."""
from datetime import datetime
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String
from sqlalchemy.orm import relationship

from ..database import Base
from .user import generate_id


class SessionKey(Base):
    """A session key; revoked keys are kept for audit."""
    
    __tablename__ = "session_keys"
    
    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    wallet_address = Column(String, nullable=False)
    derived_public_key = Column(String, nullable=True)
    device_public_key = Column(String, nullable=True)
    is_revoked = Column(Boolean, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    expires_at = Column(DateTime, nullable=True)
    revoked_at = Column(DateTime, nullable=True)
    last_used_at = Column(DateTime, nullable=True)
    
    # Relationship
    user = relationship("User", back_populates="sessions")
