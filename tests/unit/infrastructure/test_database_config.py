"""Engine selection per database URL."""

import pytest
from sqlalchemy.pool import NullPool, StaticPool

from storefront.infrastructure.database.config import DatabaseSettings, create_engine


@pytest.mark.parametrize(
    "url, in_memory",
    [
        ("sqlite+aiosqlite:///:memory:", True),
        ("sqlite+aiosqlite://", True),
        ("sqlite+aiosqlite:///./storefront.db", False),
        ("postgresql+asyncpg://shop:shop@db:5432/shop", False),
    ],
)
def test_in_memory_sqlite_detection(url, in_memory):
    assert DatabaseSettings(database_url=url).is_sqlite_memory is in_memory


def test_in_memory_sqlite_shares_one_connection():
    engine = create_engine(DatabaseSettings(database_url="sqlite+aiosqlite:///:memory:"))
    assert isinstance(engine.sync_engine.pool, StaticPool)


def test_file_sqlite_opens_a_connection_per_session(tmp_path):
    engine = create_engine(
        DatabaseSettings(database_url=f"sqlite+aiosqlite:///{tmp_path / 'dev.db'}")
    )
    assert isinstance(engine.sync_engine.pool, NullPool)
