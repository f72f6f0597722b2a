"""Transaction model - immutable ledger entries per wallet."""
from datetime import datetime
from sqlalchemy import Column, DateTime, Float, ForeignKey, String
from sqlalchemy.orm import relationship

from ..database import Base
from .user import generate_id


class Transaction(Base):
    """An on-chain transaction observed for a wallet."""
    
    __tablename__ = "transactions"
    
    id = Column(String(36), primary_key=True, default=generate_id)
    wallet_account_id = Column(
        String(36), ForeignKey("wallet_accounts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    signature = Column(String, unique=True, nullable=False)
    type = Column(String, nullable=False)  # transfer, swap, stake, unknown
    status = Column(String, default="confirmed")  # pending, confirmed, failed
    amount = Column(Float, nullable=True)
    token_symbol = Column(String, nullable=True)
    timestamp = Column(DateTime, default=datetime.utcnow, index=True)
    payload = Column(String, nullable=True)  # JSON: raw provider metadata
    
    # Relationship
    wallet_account = relationship("WalletAccount", back_populates="transactions")
