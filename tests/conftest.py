import sys, os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from devlog.main import app
from devlog.runtime import get_coordinator
from devlog.services.activity_log import ACTIVITY_LOG
from devlog.services.disclosure import DisclosureCursor
from devlog.services.refresh import RefreshCoordinator
from helpers import FEED_TEXT, StubFetcher


@pytest.fixture(autouse=True)
def clear_activity_log():
    ACTIVITY_LOG.clear()
    yield
    ACTIVITY_LOG.clear()


@pytest.fixture
def stub_fetcher() -> StubFetcher:
    return StubFetcher([FEED_TEXT])


@pytest.fixture
def coordinator(stub_fetcher: StubFetcher) -> RefreshCoordinator:
    # Small batches so three days of feed need two batches
    return RefreshCoordinator(stub_fetcher, DisclosureCursor(batch_size=2))


@pytest_asyncio.fixture
async def client(coordinator: RefreshCoordinator) -> AsyncGenerator[AsyncClient, None]:
    app.dependency_overrides[get_coordinator] = lambda: coordinator
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac
    app.dependency_overrides.clear()
