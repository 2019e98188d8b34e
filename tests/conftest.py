import os

# Must be set before app modules read settings
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["OVERVIEW_CACHE_ENABLED"] = "false"

import uuid
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.api.deps import get_overview_cache
from app.core.database import build_engine, create_tables, get_db
from app.core.timeutils import to_utc
from app.main import app
from app.models.event import Event
from app.models.project import Project, ProjectMember


@pytest_asyncio.fixture
async def engine():
    engine = build_engine("sqlite+aiosqlite://")
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_overview_cache] = lambda: None

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def make_project(session_factory):
    """Create a project with an owner, optional members and an API key"""

    async def _make(owner_id=None, members=(), api_key=None, name="demo"):
        project = Project(
            id=uuid.uuid4(),
            name=name,
            owner_id=owner_id or uuid.uuid4(),
            api_key=api_key or f"sf_{uuid.uuid4().hex}"
        )
        async with session_factory() as session:
            session.add(project)
            await session.flush()
            for member_id in members:
                session.add(ProjectMember(project_id=project.id, user_id=member_id))
            await session.commit()
        return project

    return _make


@pytest_asyncio.fixture
async def add_events(session_factory):
    """Insert events directly; rows are (event_name, user_id, created_at)"""

    async def _add(project, rows, properties=None):
        created = []
        async with session_factory() as session:
            for event_name, user_id, created_at in rows:
                event = Event(
                    id=uuid.uuid4(),
                    event_name=event_name,
                    user_id=user_id,
                    project_id=project.id,
                    properties=properties,
                    created_at=to_utc(created_at)
                )
                session.add(event)
                created.append(event)
            await session.commit()
        return created

    return _add
