"""API test fixtures — FastAPI app + httpx client over ASGI.

Invariants:
    - Every test gets a fresh app built by create_app()
    - Server errors are returned as responses, not re-raised into the test

Design Decisions:
    - raise_app_exceptions=False: Starlette's ServerErrorMiddleware re-raises
      after the catch-all handler has responded; the tests assert on that response
"""

import pytest
from httpx import ASGITransport, AsyncClient

from throwres.main import create_app


@pytest.fixture
def app():
    return create_app()


@pytest.fixture
async def client(app):
    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as c:
        yield c
