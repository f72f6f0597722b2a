"""User model - one account per mobile device."""
import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship

from ..database import Base


def generate_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    """An account, created on first contact from a device."""
    
    __tablename__ = "users"
    
    id = Column(String(36), primary_key=True, default=generate_id)
    device_id = Column(String, unique=True, nullable=False, index=True)
    display_name = Column(String, nullable=True)
    email = Column(String, nullable=True)
    last_seen = Column(DateTime, default=datetime.utcnow)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    # Relationships
    wallets = relationship(
        "WalletAccount",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="WalletAccount.created_at",
    )
    sessions = relationship(
        "SessionKey",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="SessionKey.created_at.desc()",
    )
    push_tokens = relationship("PushToken", back_populates="user", cascade="all, delete-orphan")
