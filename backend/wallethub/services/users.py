"""Users service - typed data access for user accounts and their relations.

Every operation round-trips to the database. Failures are logged with the
operation and key, then re-raised unchanged; the only translated condition is
UserNotFoundError for operations whose contract requires an existing row.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..exceptions import UserNotFoundError
from ..models import PushToken, SessionKey, Transaction, User, WalletAccount
from ..schemas.user import DeviceUserCreate, UserFilter, UserUpdate

# Transactions returned per wallet by the deep fetch
RECENT_TRANSACTIONS_LIMIT = 50

DEFAULT_PAGE_SIZE = 10

SORTABLE_COLUMNS = {
    "created_at": User.created_at,
    "last_seen": User.last_seen,
    "device_id": User.device_id,
    "id": User.id,
}


@dataclass
class UserPage:
    """A page of users plus pagination metadata."""
    data: List[User]
    total: int
    page: int
    page_size: int


def parse_order_by(order_by: Optional[str]) -> Tuple[str, bool]:
    """Parse a `field:direction` sort string into (field, descending)."""
    if not order_by:
        return "created_at", False

    field, _, direction = order_by.partition(":")
    direction = direction or "asc"
    if field not in SORTABLE_COLUMNS:
        raise ValueError(f"Cannot order users by '{field}'")
    if direction not in ("asc", "desc"):
        raise ValueError(f"Invalid sort direction '{direction}'")
    return field, direction == "desc"


class UsersService:
    """CRUD, pagination and find-or-create over the User entity."""

    def __init__(self, db: AsyncSession, logger: Optional[logging.Logger] = None):
        self.db = db
        self.logger = logger or logging.getLogger(__name__)

    async def create(self, data: DeviceUserCreate) -> User:
        """Insert a user.

        Accepts either the minimal DeviceUserCreate or the full UserCreate.
        A duplicate device id surfaces the store's IntegrityError.
        """
        try:
            user = User(**data.model_dump(exclude_unset=True))
            self.db.add(user)
            await self.db.commit()
            await self.db.refresh(user)
            self.logger.info(f"Created user: {user.id}")
            return user
        except Exception as e:
            await self.db.rollback()
            self.logger.error(f"Failed to create user: {e}")
            raise

    async def find_by_id(self, user_id: str) -> Optional[User]:
        """Find a user by id with wallets, sessions and push tokens loaded."""
        try:
            result = await self.db.execute(
                select(User)
                .options(
                    selectinload(User.wallets),
                    selectinload(User.sessions),
                    selectinload(User.push_tokens),
                )
                .where(User.id == user_id)
                .execution_options(populate_existing=True)
            )
            return result.scalar_one_or_none()
        except Exception as e:
            self.logger.error(f"Failed to find user {user_id}: {e}")
            raise

    async def find_by_device_id(self, device_id: str) -> Optional[User]:
        """Find a user by device id with wallets and sessions loaded.

        Push tokens are not loaded here.
        """
        try:
            result = await self.db.execute(
                select(User)
                .options(
                    selectinload(User.wallets),
                    selectinload(User.sessions),
                )
                .where(User.device_id == device_id)
                .execution_options(populate_existing=True)
            )
            return result.scalar_one_or_none()
        except Exception as e:
            self.logger.error(f"Failed to find user by device_id {device_id}: {e}")
            raise

    async def find_or_create_by_device_id(self, device_id: str) -> User:
        """Return the user for a device, creating it on first contact.

        An existing user gets its last-seen timestamp touched. Two concurrent
        first contacts for the same device can both miss the lookup; the
        loser's insert fails on the device_id unique constraint.
        """
        try:
            user = await self.find_by_device_id(device_id)

            if user is None:
                user = await self.create(DeviceUserCreate(device_id=device_id))
                self.logger.info(f"Created new user for device: {device_id}")
            else:
                user = await self.update_last_seen(user.id)

            return user
        except Exception as e:
            self.logger.error(f"Failed to find or create user for device {device_id}: {e}")
            raise

    async def update(self, user_id: str, data: UserUpdate) -> User:
        """Apply a partial update. Raises UserNotFoundError for an unknown id."""
        try:
            user = await self.db.get(User, user_id)
            if user is None:
                raise UserNotFoundError(user_id)

            for field, value in data.model_dump(exclude_unset=True).items():
                setattr(user, field, value)

            await self.db.commit()
            self.logger.info(f"Updated user: {user_id}")
            return user
        except Exception as e:
            await self.db.rollback()
            self.logger.error(f"Failed to update user {user_id}: {e}")
            raise

    async def update_last_seen(self, user_id: str) -> User:
        """Set the last-seen timestamp to now."""
        return await self.update(user_id, UserUpdate(last_seen=datetime.utcnow()))

    async def delete(self, user_id: str) -> User:
        """Delete a user and its wallets, sessions and push tokens."""
        try:
            user = await self.db.get(User, user_id)
            if user is None:
                raise UserNotFoundError(user_id)

            await self.db.delete(user)
            await self.db.commit()
            self.logger.info(f"Deleted user: {user_id}")
            return user
        except Exception as e:
            await self.db.rollback()
            self.logger.error(f"Failed to delete user {user_id}: {e}")
            raise

    async def find_by_id_with_relations(self, user_id: str) -> User:
        """Deep fetch of a user.

        Loads wallets with their most recent transactions (newest first),
        sessions that are not revoked (newest first) and active push tokens.
        Raises UserNotFoundError instead of returning None.
        """
        try:
            ranked = (
                select(
                    Transaction.id,
                    func.row_number()
                    .over(
                        partition_by=Transaction.wallet_account_id,
                        order_by=Transaction.timestamp.desc(),
                    )
                    .label("rank_in_wallet"),
                )
                # Rank only this user's ledger
                .join(WalletAccount, WalletAccount.id == Transaction.wallet_account_id)
                .where(WalletAccount.user_id == user_id)
                .subquery()
            )
            recent_ids = select(ranked.c.id).where(
                ranked.c.rank_in_wallet <= RECENT_TRANSACTIONS_LIMIT
            )

            result = await self.db.execute(
                select(User)
                .options(
                    selectinload(User.wallets).selectinload(
                        WalletAccount.transactions.and_(Transaction.id.in_(recent_ids))
                    ),
                    selectinload(User.sessions.and_(SessionKey.is_revoked.is_(False))),
                    selectinload(User.push_tokens.and_(PushToken.is_active.is_(True))),
                )
                .where(User.id == user_id)
                .execution_options(populate_existing=True)
            )
            user = result.scalar_one_or_none()

            if user is None:
                raise UserNotFoundError(user_id)

            return user
        except Exception as e:
            self.logger.error(f"Failed to find user with relations {user_id}: {e}")
            raise

    async def list(
        self,
        skip: Optional[int] = None,
        take: Optional[int] = None,
        cursor: Optional[str] = None,
        where: Optional[UserFilter] = None,
        order_by: Optional[str] = None,
    ) -> UserPage:
        """List users with wallets, plus a total count.

        The page and the count are separate queries, so under concurrent
        writes they may disagree. `cursor` is a user id; the page starts at
        that user (inclusive) in the requested ordering.

        Without `take` no limit is applied and every matching user is
        returned; `page_size` still reports the default of 10.
        """
        try:
            conditions = self._filter_conditions(where)
            field, descending = parse_order_by(order_by)
            column = SORTABLE_COLUMNS[field]

            if descending:
                ordering = [column.desc(), User.id.desc()]
            else:
                ordering = [column.asc(), User.id.asc()]

            stmt = (
                select(User)
                .options(selectinload(User.wallets))
                .where(*conditions)
                .order_by(*ordering)
            )

            users: List[User] = []
            anchor = None
            if cursor is not None:
                anchor = await self.db.get(User, cursor)

            if cursor is None or anchor is not None:
                if anchor is not None:
                    stmt = stmt.where(self._cursor_condition(column, anchor, descending))
                if skip:
                    stmt = stmt.offset(skip)
                if take is not None:
                    stmt = stmt.limit(take)

                result = await self.db.execute(stmt.execution_options(populate_existing=True))
                users = list(result.scalars().all())

            count_result = await self.db.execute(
                select(func.count(User.id)).where(*conditions)
            )
            total = count_result.scalar() or 0

            page_size = take or DEFAULT_PAGE_SIZE
            return UserPage(
                data=users,
                total=total,
                page=skip // page_size + 1 if skip else 1,
                page_size=page_size,
            )
        except Exception as e:
            self.logger.error(f"Failed to list users: {e}")
            raise

    @staticmethod
    def _filter_conditions(where: Optional[UserFilter]) -> List:
        if where is None:
            return []

        conditions = []
        if where.device_id is not None:
            conditions.append(User.device_id == where.device_id)
        if where.email is not None:
            conditions.append(User.email == where.email)
        if where.seen_since is not None:
            conditions.append(User.last_seen >= where.seen_since)
        return conditions

    @staticmethod
    def _cursor_condition(column, anchor: User, descending: bool):
        value = getattr(anchor, column.key)
        if descending:
            return or_(column < value, and_(column == value, User.id <= anchor.id))
        return or_(column > value, and_(column == value, User.id >= anchor.id))
