# tests/conftest.py
from datetime import timedelta

import pytest
from asgi_lifespan import LifespanManager
from httpx import ASGITransport, AsyncClient

from foodshare import deps
from foodshare.core.config import get_settings
from foodshare.repos.inmemory import InMemoryRepo
from foodshare.schemas import Acceptor, FoodItem, Restaurant, utcnow
from foodshare.services.allocation import AllocationEngine


@pytest.fixture(scope="session")
def anyio_backend():
    # keep AnyIO on asyncio for the whole test session
    return "asyncio"


@pytest.fixture
def make_item():
    def _make(food="Seafood Platter", quantity=30, value=300.0, hours=24):
        return FoodItem(
            food=food, quantity=quantity, value=value,
            expiry_time=utcnow() + timedelta(hours=hours),
        )
    return _make


@pytest.fixture
def make_restaurant(make_item):
    def _make(name="Oceanic Resort", items=None, verified=True):
        return Restaurant(
            name=name, email="contact@oceanic.io",
            items=items if items is not None else [make_item()],
            is_verified=verified,
        )
    return _make


@pytest.fixture
def make_acceptor():
    def _make(food="Seafood Platter", quantity=10, name="Hope Shelter"):
        return Acceptor(name=name, email="hope@shelter.org", food=food, quantity=quantity)
    return _make


@pytest.fixture
def repo():
    return InMemoryRepo()


@pytest.fixture
def engine(repo):
    return AllocationEngine(repo)


@pytest.fixture
async def test_client(monkeypatch, repo, engine):
    monkeypatch.setenv("SEED_DEMO", "false")
    monkeypatch.setenv("ADMIN_ID", "admin")
    monkeypatch.setenv("ADMIN_PASSWORD", "s3cret")
    get_settings.cache_clear()
    monkeypatch.setattr(deps, "_repo", repo)
    monkeypatch.setattr(deps, "_engine", engine)

    from foodshare.main import app
    async with LifespanManager(app):
        transport = ASGITransport(app=app, raise_app_exceptions=True)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    get_settings.cache_clear()
