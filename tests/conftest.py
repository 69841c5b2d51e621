import os

# Must be set before flavorhub.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("SECRET_KEY", "testing-secret-key")
os.environ["TRACING_ENABLED"] = "false"

from decimal import Decimal  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from flavorhub.database import Base, get_db  # noqa: E402
from flavorhub.main import app  # noqa: E402
from flavorhub.models import MenuItem, Restaurant, User, UserRole  # noqa: E402

OPENING_HOURS = '{"monday": {"open": "09:00", "close": "22:00"}, "sunday": {"closed": true}}'


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def make_user(db, email: str, role: UserRole, first_name: str = "Test") -> User:
    user = User(
        email=email,
        # Not a real bcrypt hash; these users never log in
        password_hash="unused",
        first_name=first_name,
        last_name="User",
        phone=None,
        role=role,
    )
    db.add(user)
    await db.commit()
    return user


@pytest.fixture
async def customer(db) -> User:
    return await make_user(db, "customer@test.com", UserRole.CUSTOMER, "Casey")


@pytest.fixture
async def other_customer(db) -> User:
    return await make_user(db, "other.customer@test.com", UserRole.CUSTOMER, "Morgan")


@pytest.fixture
async def partner(db) -> User:
    return await make_user(db, "partner@test.com", UserRole.PARTNER, "Pat")


@pytest.fixture
async def restaurant(db, partner) -> Restaurant:
    restaurant = Restaurant(
        partner_id=partner.id,
        name="Trattoria Test",
        description="Wood-fired pizza",
        address="1 Main Street",
        phone="555-0100",
        email="hello@trattoria.example.com",
        opening_hours=OPENING_HOURS,
        cuisine_type="Italian",
    )
    db.add(restaurant)
    await db.commit()
    return restaurant


@pytest.fixture
async def menu_items(db, restaurant) -> list[MenuItem]:
    items = [
        MenuItem(
            restaurant_id=restaurant.id,
            name="Margherita Pizza",
            description="Classic tomato & mozzarella",
            price=Decimal("12.99"),
            category="Pizza",
        ),
        MenuItem(
            restaurant_id=restaurant.id,
            name="Garlic Bread",
            description=None,
            price=Decimal("4.50"),
            category="Sides",
        ),
    ]
    db.add_all(items)
    await db.commit()
    return items
