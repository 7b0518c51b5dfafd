import json

import httpx
import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from tests.fixtures.json_loader import TestDataLoader
from src.depends import get_http_client, get_unit_of_work
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.utils.jwt import generate_jwt
from src.domain.entities import Company, CompanyOtpPolicy, Sale


@pytest_asyncio.fixture
def test_data():
    return TestDataLoader()


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite:///./test.db")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        yield session


@pytest_asyncio.fixture
def outbound():
    """Requests sent to messaging providers / SMTP relay"""
    return []


@pytest_asyncio.fixture
async def client(db_session, outbound):
    from httpx import ASGITransport
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    def provider_handler(request: httpx.Request):
        body = json.loads(request.content) if request.content.startswith(b"{") else {}
        outbound.append({"url": str(request.url), "body": body})
        return httpx.Response(200, json={"id": "out-1", "messages": [{"id": "wamid.1"}]})

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    async def override_get_http_client():
        async with httpx.AsyncClient(transport=httpx.MockTransport(provider_handler)) as http:
            yield http

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_http_client] = override_get_http_client

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def company(db_session, test_data):
    company = Company(**test_data.get_copy("company"))
    policy = CompanyOtpPolicy(company_id=company.id, **test_data.get_copy("otp_policy"))
    db_session.add_all([company, policy])
    await db_session.commit()
    # detached rows keep their loaded values when a request rolls back the shared session
    db_session.expunge_all()
    return company


@pytest_asyncio.fixture
async def sale(db_session, company):
    sale = Sale(company_id=company.id, status="borrador")
    db_session.add(sale)
    await db_session.commit()
    db_session.expunge(sale)
    return sale


@pytest_asyncio.fixture
def auth_headers(company):
    """Build Authorization headers for a role in the seeded company"""
    from uuid import uuid4

    company_id = company.id

    def build(role: str = "admin"):
        token = generate_jwt(uuid4(), company_id, role)
        return {"Authorization": f"Bearer {token}"}

    return build
