import json

import httpx
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import create_engine, text

from bridge.main import app
from bridge.core.config import Settings, get_settings
from bridge.api.endpoints.generation import get_generation_transport

GENERATION_URL = "http://generation.test"

COINS = [
    {"id": 1, "symbol": "BTC", "label": "Bitcoin", "price": 1.5, "logo": b"\x89PNG"},
    {"id": 2, "symbol": "ETH", "label": "Ether", "price": 0.25, "logo": None},
    {"id": 3, "symbol": "WOM", "label": None, "price": None, "logo": b"\xffwombat"},
]


# Seed a throwaway SQLite store for every test that needs one
@pytest.fixture(scope="function")
def store_uri(tmp_path):
    db_path = tmp_path / "coin_wombat.db"
    engine = create_engine(f"sqlite:///{db_path}")
    with engine.begin() as conn:
        conn.execute(
            text(
                "CREATE TABLE coin ("
                "id INTEGER PRIMARY KEY, symbol TEXT NOT NULL, label TEXT, "
                "price REAL, logo BLOB)"
            )
        )
        conn.execute(
            text(
                "INSERT INTO coin (id, symbol, label, price, logo) "
                "VALUES (:id, :symbol, :label, :price, :logo)"
            ),
            COINS,
        )
    engine.dispose()
    # Bare dialect on purpose: the gateway picks the async driver itself
    return f"sqlite:///{db_path}"


@pytest.fixture(scope="function")
def test_settings(store_uri):
    return Settings(
        DATABASE_URL=store_uri,
        QUERY_STATEMENT="SELECT id, symbol, label FROM coin ORDER BY id",
        GENERATION_URL=GENERATION_URL,
        GENERATION_MODEL="llama3:latest",
    )


# Requests the fake generation service received
@pytest.fixture(scope="function")
def generation_requests():
    return []


@pytest.fixture(scope="function")
def generation_transport(generation_requests):
    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        generation_requests.append({"url": str(request.url), "body": body})
        return httpx.Response(
            200,
            json={
                "model": body["model"],
                "response": f"echo: {body['prompt']}",
                "done": True,
            },
        )

    return httpx.MockTransport(handler)


# Client
@pytest_asyncio.fixture(scope="function")
async def client(test_settings, generation_transport):
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_generation_transport] = lambda: generation_transport

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
