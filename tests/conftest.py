"""Shared fixtures: in-memory database sessions, caches and sample entities."""

from uuid import uuid4

import pytest

from devportal.domain.entities import (
    Component,
    Group,
    Landscape,
    Link,
    Organization,
    Plugin,
    Project,
    Team,
    User,
)
from devportal.infrastructure.cache import InMemoryCache
from devportal.infrastructure.persistence.database import (
    DevPortalDBBase,
    create_db_engine,
    create_session_factory,
)

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def db_engine():
    """Fresh in-memory database with the full schema for each test."""
    engine = create_db_engine(TEST_DATABASE_URL)
    async with engine.begin() as conn:
        await conn.run_sync(DevPortalDBBase.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(db_engine):
    """Provide database session with automatic rollback."""
    session_factory = create_session_factory(db_engine)
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def cache():
    """Real in-process cache so tests observe hits, misses and invalidation."""
    return InMemoryCache()


# -------------------------------------------------------------------------
# SAMPLE ENTITIES
# -------------------------------------------------------------------------


@pytest.fixture
def organization():
    return Organization(name="acme", title="ACME Corp")


@pytest.fixture
def group(organization):
    return Group(name="platform", org_id=organization.id, title="Platform")


@pytest.fixture
def team(group):
    return Team(
        name="team-portal",
        title="Portal Team",
        group_id=group.id,
        owner="I123456",
        email="portal@example.com",
        picture_url="https://example.com/portal.png",
    )


@pytest.fixture
def project():
    return Project(
        name="cis",
        title="Cloud Integration",
        metadata='{"health":{"endpoint":"https://{subdomain}.{component_name}.cfapps.{landscape_domain}/health","success_regex":"UP"}}',
    )


@pytest.fixture
def landscape(project):
    return Landscape(
        name="prod-eu",
        title="Production EU",
        project_id=project.id,
        domain="eu.example.com",
        environment="production",
    )


@pytest.fixture
def component(project, team):
    return Component(
        name="api",
        title="API Gateway",
        project_id=project.id,
        owner_id=team.id,
        metadata='{"ci":{"qos":"gold"},"github":{"url":"https://github.com/acme/api"}}',
    )


@pytest.fixture
def plugin():
    return Plugin(
        name="deploy-board",
        title="Deploy Board",
        icon="rocket",
        react_component_path="https://github.com/acme/plugins/blob/main/src/DeployBoard.tsx",
        backend_server_url="https://deploy.example.com",
        owner="team-portal",
    )


@pytest.fixture
def user(team):
    return User(
        user_id="I123456",
        email="jane.doe@example.com",
        name="jdoe",
        first_name="Jane",
        last_name="Doe",
        team_id=team.id,
    )


@pytest.fixture
def link_factory():
    """Build links owned by a given entity."""

    def make(owner, name="docs", url="https://docs.example.com"):
        return Link(name=name, url=url, owner=owner, title=name.title(), id=uuid4())

    return make
