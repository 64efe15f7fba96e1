"""Pytest configuration and fixtures."""
import os
import uuid
from datetime import UTC, datetime
from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config as AlembicConfig
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

# Ensure the application uses a dedicated SQLite database during tests
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
# Channel locks stay in-process during tests
os.environ["REDIS_URL"] = ""

from clubledger.config import get_settings
from clubledger.database import Base


BASE_DIR = Path(__file__).resolve().parent.parent
TEST_DB_PATH = BASE_DIR / "test.db"
settings = get_settings()

# Mid-afternoon so every write lands well inside the same UTC day
FIXED_NOW = datetime(2026, 3, 14, 15, 0, tzinfo=UTC)
TODAY = FIXED_NOW.date()


@pytest.fixture
def fixed_clock():
    """Clock pinned to FIXED_NOW for services that stamp writes."""
    return lambda: FIXED_NOW


@pytest.fixture
def today():
    return TODAY


@pytest.fixture(scope="session", autouse=True)
def apply_migrations():
    """Apply database migrations against the test database."""
    if TEST_DB_PATH.exists():
        TEST_DB_PATH.unlink()

    alembic_cfg = AlembicConfig(str(BASE_DIR / "alembic.ini"))
    alembic_cfg.set_main_option("sqlalchemy.url", settings.database_url)
    command.upgrade(alembic_cfg, "head")

    yield

    if TEST_DB_PATH.exists():
        try:
            TEST_DB_PATH.unlink()
        except PermissionError:
            # Still open on Windows; removed on the next run
            pass


@pytest.fixture
async def test_engine():
    """Create test database engine using the same database as migrations."""
    engine = create_async_engine(settings.database_url, echo=False)

    yield engine

    # Every test starts from empty tables
    async with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            await conn.execute(delete(table))
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory):
    """Create test database session."""
    async with session_factory() as session:
        yield session
        await session.rollback()
        await session.close()


@pytest.fixture
def notifier():
    from clubledger.services import ChangeNotifier

    return ChangeNotifier()


@pytest.fixture
async def test_app(session_factory, notifier):
    """Create test app with database override."""
    from clubledger.main import app
    from clubledger.database import get_db

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
            finally:
                await session.close()

    app.dependency_overrides[get_db] = override_get_db
    previous_notifier = app.state.change_notifier
    app.state.change_notifier = notifier
    yield app
    app.dependency_overrides.clear()
    app.state.change_notifier = previous_notifier


@pytest.fixture
async def player_factory(db_session):
    """Factory for creating players."""
    from clubledger.models import Player

    async def _create_player(first_name: str = "Test", last_name: str | None = None, rakeback_percent=0):
        player = Player(
            player_id=uuid.uuid4(),
            first_name=first_name,
            last_name=last_name if last_name is not None else uuid.uuid4().hex[:6],
            rakeback_percent=rakeback_percent,
        )
        db_session.add(player)
        await db_session.commit()
        return player

    return _create_player


@pytest.fixture
async def staff_factory(db_session):
    """Factory for creating staff users with a given role."""
    from clubledger.models import StaffRole, StaffUser

    async def _create_staff(role: StaffRole = StaffRole.CASHIER, name: str | None = None, active: bool = True):
        user = StaffUser(
            user_id=uuid.uuid4(),
            name=name or f"{role.value.title()} {uuid.uuid4().hex[:4]}",
            role=role.value,
            active=active,
        )
        db_session.add(user)
        await db_session.commit()
        return user

    return _create_staff


@pytest.fixture
async def bank_account_factory(db_session):
    """Factory for creating bank accounts."""
    from clubledger.models import BankAccount

    async def _create_bank_account(name: str | None = None, active: bool = True):
        account = BankAccount(
            bank_account_id=uuid.uuid4(),
            name=name or f"Bank {uuid.uuid4().hex[:6]}",
            active=active,
        )
        db_session.add(account)
        await db_session.commit()
        return account

    return _create_bank_account


@pytest.fixture
async def cashier(staff_factory):
    return await staff_factory()


@pytest.fixture
async def admin(staff_factory):
    from clubledger.models import StaffRole

    return await staff_factory(StaffRole.ADMIN)


@pytest.fixture
def open_day(db_session, admin):
    """Set opening balances: ``await open_day({"CASH": 500, "DEPOSITS": 0})``."""
    from clubledger.services import OpeningBalanceService

    async def _open_day(balances: dict, day=TODAY):
        await OpeningBalanceService(db_session).save_balances(
            day=day,
            entry_time="18:00",
            balances=list(balances.items()),
            set_by_user_id=admin.user_id,
        )

    return _open_day


@pytest.fixture
def auth_headers():
    """Headers identifying a staff member to the API."""

    def _auth_headers(user) -> dict[str, str]:
        return {settings.staff_user_header: str(user.user_id)}

    return _auth_headers
