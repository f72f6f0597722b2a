"""Helpers for building user graphs directly through the ORM."""
from datetime import datetime, timedelta

from sqlalchemy import func, select

from wallethub.models import PushToken, SessionKey, Transaction, User, WalletAccount

BASE_TIME = datetime(2024, 1, 1, 12, 0, 0)


async def seed_user_graph(session_factory, device_id="device-graph", transaction_count=3):
    """Create a user owning a wallet, sessions and push tokens; return its id.

    Transactions are one minute apart starting at BASE_TIME. Two sessions are
    live and one is revoked; one push token is active and one is not.
    """
    async with session_factory() as session:
        user = User(device_id=device_id, display_name="Graph")
        session.add(user)
        await session.flush()

        wallet = WalletAccount(user_id=user.id, address=f"addr-{device_id}", provider="phantom")
        session.add(wallet)
        await session.flush()

        for i in range(transaction_count):
            session.add(
                Transaction(
                    wallet_account_id=wallet.id,
                    signature=f"sig-{device_id}-{i}",
                    type="transfer",
                    amount=float(i),
                    timestamp=BASE_TIME + timedelta(minutes=i),
                )
            )

        session.add_all([
            SessionKey(user_id=user.id, wallet_address=wallet.address, created_at=BASE_TIME),
            SessionKey(
                user_id=user.id,
                wallet_address=wallet.address,
                created_at=BASE_TIME + timedelta(hours=1),
            ),
            SessionKey(
                user_id=user.id,
                wallet_address=wallet.address,
                is_revoked=True,
                created_at=BASE_TIME + timedelta(hours=2),
            ),
            PushToken(user_id=user.id, token=f"ExponentPushToken[{device_id}-on]", is_active=True),
            PushToken(user_id=user.id, token=f"ExponentPushToken[{device_id}-off]", is_active=False),
        ])
        await session.commit()
        return user.id


async def count_users(session_factory) -> int:
    async with session_factory() as session:
        result = await session.execute(select(func.count(User.id)))
        return result.scalar()
