"""Pydantic schemas for API request/response models."""
from .user import (
    DeviceUserCreate,
    UserCreate,
    UserUpdate,
    UserFilter,
    UserResponse,
    UserWithWallets,
    UserWithSessions,
    UserWithRelations,
    UserDetails,
    UserListResponse,
    WalletResponse,
    WalletWithTransactions,
    TransactionResponse,
    SessionResponse,
    PushTokenResponse,
)

__all__ = [
    "DeviceUserCreate",
    "UserCreate",
    "UserUpdate",
    "UserFilter",
    "UserResponse",
    "UserWithWallets",
    "UserWithSessions",
    "UserWithRelations",
    "UserDetails",
    "UserListResponse",
    "WalletResponse",
    "WalletWithTransactions",
    "TransactionResponse",
    "SessionResponse",
    "PushTokenResponse",
]
