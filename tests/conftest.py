import httpx
import pytest
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app.db.base import Base
from app.db.session import get_db
from app.schemas.address import AddressCreate
from app.schemas.customer import CustomerCreate
from app.services.customer import create_customer


DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def engine():
    engine = create_async_engine(DATABASE_URL, echo=False, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def db_session(engine):
    AsyncSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with AsyncSessionLocal() as session:
        yield session


@pytest.fixture
async def client(db_session):
    from app.main import app

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def address_payload(**overrides) -> AddressCreate:
    data = {
        "label": "Home",
        "line1": "1 Main St",
        "city": "Springfield",
        "state": "IL",
        "postal_code": "62701",
        "country": "US",
    }
    data.update(overrides)
    return AddressCreate(**data)


@pytest.fixture
def make_customer(db_session):
    """Create a customer through the service; addresses default to one Springfield address."""

    async def _make(first_name="Jane", last_name="Doe", email=None, phone="555-0100", addresses=None):
        data = CustomerCreate(
            first_name=first_name,
            last_name=last_name,
            email=email or f"{first_name.lower()}.{last_name.lower()}@example.com",
            phone=phone,
            addresses=addresses if addresses is not None else [address_payload()],
        )
        return await create_customer(db_session, data)

    return _make


@pytest.fixture
def new_address():
    return address_payload
