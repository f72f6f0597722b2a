"""Database models."""
from .user import User
from .wallet_account import WalletAccount
from .transaction import Transaction
from .session_key import SessionKey
from .push_token import PushToken

__all__ = ["User", "WalletAccount", "Transaction", "SessionKey", "PushToken"]
