"""User schemas for API request/response models."""
from datetime import datetime, timezone
from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field, field_validator


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Convert offset-aware timestamps to naive UTC, the form the columns store."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class DeviceUserCreate(BaseModel):
    """Minimal input for creating a user on first contact from a device."""
    device_id: str = Field(..., min_length=1, max_length=255)


class UserCreate(DeviceUserCreate):
    """Schema for creating a user with profile fields."""
    display_name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[str] = Field(None, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")


class UserUpdate(BaseModel):
    """Schema for a partial user update. Only fields that are set are applied."""
    display_name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[str] = Field(None, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    last_seen: Optional[datetime] = None

    @field_validator("last_seen")
    @classmethod
    def _normalize_last_seen(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(value)


class UserFilter(BaseModel):
    """Filters for listing users."""
    device_id: Optional[str] = None
    email: Optional[str] = None
    seen_since: Optional[datetime] = None  # last_seen >= this

    @field_validator("seen_since")
    @classmethod
    def _normalize_seen_since(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(value)


class TransactionResponse(BaseModel):
    """Schema for a wallet transaction."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    signature: str
    type: str
    status: Optional[str] = None
    amount: Optional[float] = None
    token_symbol: Optional[str] = None
    timestamp: datetime


class WalletResponse(BaseModel):
    """Schema for a wallet account."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    address: str
    label: Optional[str] = None
    provider: Optional[str] = None
    is_active: bool
    last_balance_usd: Optional[float] = None
    created_at: datetime


class WalletWithTransactions(WalletResponse):
    """Wallet with its most recent transactions, newest first."""
    transactions: List[TransactionResponse] = []


class SessionResponse(BaseModel):
    """Schema for a session key."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    wallet_address: str
    is_revoked: bool
    created_at: datetime
    expires_at: Optional[datetime] = None
    last_used_at: Optional[datetime] = None


class PushTokenResponse(BaseModel):
    """Schema for a push token."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    token: str
    platform: Optional[str] = None
    is_active: bool


class UserResponse(BaseModel):
    """Schema for user in API responses."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    device_id: str
    display_name: Optional[str] = None
    email: Optional[str] = None
    last_seen: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class UserWithWallets(UserResponse):
    """User with wallets, as returned by listing."""
    wallets: List[WalletResponse] = []


class UserWithSessions(UserWithWallets):
    """User with wallets and sessions, as returned by device lookup."""
    sessions: List[SessionResponse] = []


class UserWithRelations(UserWithSessions):
    """User with wallets, sessions and push tokens."""
    push_tokens: List[PushTokenResponse] = []


class UserDetails(UserResponse):
    """Deep view: wallets with recent transactions, live sessions, active push tokens."""
    wallets: List[WalletWithTransactions] = []
    sessions: List[SessionResponse] = []
    push_tokens: List[PushTokenResponse] = []


class UserListResponse(BaseModel):
    """A page of users."""
    data: List[UserWithWallets]
    total: int
    page: int
    page_size: int
