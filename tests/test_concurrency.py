# tests/test_concurrency.py
import asyncio

import httpx
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from rental_quotes.main import create_app
from rental_quotes.models import User
from tests.conftest import API, DEFAULT_PASSWORD

CONCURRENT_REQUESTS = 10


async def run_against_app(settings, db_path, scenario):
    """
    Drive the app through an async client so requests really overlap.
    TestClient sends one request at a time.
    """
    app = create_app(settings)
    await app.state.db.init_models()

    engine = create_engine(f"sqlite:///{db_path}")
    with Session(engine) as session:
        session.add(User(username="staff", password_hash=DEFAULT_PASSWORD, role="user"))
        session.commit()
    engine.dispose()

    try:
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
            response = await client.post(
                f"{API}/auth/login", json={"username": "staff", "password": DEFAULT_PASSWORD}
            )
            headers = {"Authorization": f"Bearer {response.json()['data']['token']}"}
            return await scenario(client, headers)
    finally:
        await app.state.db.dispose()


def test_concurrent_item_adds_all_succeed_with_consistent_totals(settings, db_path):
    async def scenario(client, headers):
        created = await client.post(
            f"{API}/quotations/", json={"client_name": "Acme", "issue_date": "2024-06-01"}, headers=headers
        )
        url = f"{API}/quotations/{created.json()['data']['id']}"

        responses = await asyncio.gather(*(
            client.post(
                f"{url}/items",
                json={"item_name": f"Light {n}", "quantity": 1, "price_per_day": "10.00"},
                headers=headers,
            )
            for n in range(CONCURRENT_REQUESTS)
        ))
        final = await client.get(url, headers=headers)
        return [r.status_code for r in responses], final.json()["data"]

    codes, quotation = asyncio.run(run_against_app(settings, db_path, scenario))

    assert codes == [201] * CONCURRENT_REQUESTS
    assert len(quotation["items"]) == CONCURRENT_REQUESTS
    assert quotation["subtotal"] == "100.00"
    assert quotation["total"] == "100.00"


def test_concurrent_creates_get_distinct_numbers(settings, db_path):
    async def scenario(client, headers):
        return await asyncio.gather(*(
            client.post(
                f"{API}/quotations/",
                json={"client_name": f"Client {n}", "issue_date": "2024-06-01"},
                headers=headers,
            )
            for n in range(CONCURRENT_REQUESTS)
        ))

    responses = asyncio.run(run_against_app(settings, db_path, scenario))

    assert [r.status_code for r in responses] == [201] * CONCURRENT_REQUESTS
    numbers = sorted(r.json()["data"]["quotation_number"] for r in responses)
    assert [int(n[-4:]) for n in numbers] == list(range(1, CONCURRENT_REQUESTS + 1))
