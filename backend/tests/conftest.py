"""Shared fixtures: a throwaway SQLite database per test."""
import pytest

from wallethub.config import Settings
from wallethub.database import close_db, create_engine, create_session_factory, init_db
from wallethub.services.users import UsersService


@pytest.fixture
def sqlite_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'wallethub.db'}"


@pytest.fixture
async def engine(sqlite_url):
    engine = create_engine(sqlite_url)
    await init_db(engine)
    yield engine
    await close_db(engine)


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def users_service(db):
    return UsersService(db)


@pytest.fixture
def test_settings(tmp_path):
    return Settings(
        _env_file=None,
        node_env="test",
        database_url=f"sqlite:///{tmp_path / 'api.db'}",
        solana_rpc_url="https://rpc.test",
    )
