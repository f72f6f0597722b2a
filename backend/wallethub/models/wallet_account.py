"""WalletAccount model - on-chain wallets linked to a user."""
from datetime import datetime
from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, String
from sqlalchemy.orm import relationship

from ..database import Base
from .user import generate_id


class WalletAccount(Base):
    """A wallet address owned by a user."""
    
    __tablename__ = "wallet_accounts"
    
    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    address = Column(String, unique=True, nullable=False)
    label = Column(String, nullable=True)
    provider = Column(String, default="custom")  # phantom, solflare, backpack, ledger, mobile-stack, custom
    is_active = Column(Boolean, default=True)
    last_balance_usd = Column(Float, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    # Relationships
    user = relationship("User", back_populates="wallets")
    transactions = relationship(
        "Transaction",
        back_populates="wallet_account",
        cascade="all, delete-orphan",
        order_by="Transaction.timestamp.desc()",
    )
