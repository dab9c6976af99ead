import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.anyio

RESTAURANT = {
    "name": "Oceanic Resort",
    "email": "contact@oceanic.io",
    "phone": "555-0101",
    "location": "Goa Beach Road",
    "food": "Seafood Platter",
    "quantity": 30,
    "category": "Meals",
    "foodValue": 300,
    "expiryHours": 24,
}

ACCEPTOR = {
    "name": "Hope Shelter",
    "email": "hope@shelter.org",
    "phone": "555-0202",
    "location": "Goa",
    "food": "seafood platter",
    "quantity": 10,
}


async def _verified_restaurant(ac: AsyncClient, **overrides) -> dict:
    r = await ac.post("/add-restaurant", json={**RESTAURANT, **overrides})
    assert r.status_code == 201, r.text
    rid = r.json()["data"]["_id"]
    r = await ac.put(f"/verify-restaurant/{rid}")
    assert r.status_code == 200, r.text
    return r.json()["data"]


async def _acceptor(ac: AsyncClient, **overrides) -> dict:
    r = await ac.post("/add-acceptor", json={**ACCEPTOR, **overrides})
    assert r.status_code == 201, r.text
    return r.json()["data"]


async def test_health(test_client: AsyncClient):
    r = await test_client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"ok": True, "storage": "In-Memory"}


async def test_add_restaurant_creates_pending_listing(test_client: AsyncClient):
    r = await test_client.post("/add-restaurant", json=RESTAURANT)
    assert r.status_code == 201, r.text
    data = r.json()["data"]
    assert data["isVerified"] is False
    assert data["items"][0]["foodValue"] == 300
    assert data["items"][0]["quantity"] == 30

    # pending restaurants are not public
    assert (await test_client.get("/restaurants")).json() == []
    assert len((await test_client.get("/admin/restaurants")).json()) == 1


async def test_add_restaurant_with_items_list(test_client: AsyncClient):
    body = {k: RESTAURANT[k] for k in ("name", "email")}
    body["items"] = [
        {"food": "Rice", "quantity": 10},
        {"food": "Dal", "quantity": 5, "foodValue": 50, "expiryHours": 2},
    ]
    r = await test_client.post("/add-restaurant", json=body)
    assert r.status_code == 201, r.text
    assert [i["food"] for i in r.json()["data"]["items"]] == ["Rice", "Dal"]


async def test_add_restaurant_requires_a_listing(test_client: AsyncClient):
    body = {k: RESTAURANT[k] for k in ("name", "email")}
    r = await test_client.post("/add-restaurant", json=body)
    assert r.status_code == 400


async def test_invalid_email_rejected(test_client: AsyncClient):
    r = await test_client.post("/add-acceptor", json={**ACCEPTOR, "email": "not-an-email"})
    assert r.status_code == 422


async def test_verify_acceptor_matches_and_prices(test_client: AsyncClient):
    rest = await _verified_restaurant(test_client)
    acc = await _acceptor(test_client)

    r = await test_client.put(f"/verify-acceptor/{acc['_id']}")
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["success"] is True
    assert body["matched"] is True
    assert body["matchedRestaurantId"] == rest["_id"]
    assert body["matchInfo"] == "Matched with Oceanic Resort. Payout: 10.00, Cost: 20.00"
    assert body["pricing"]["actualValue"] == pytest.approx(100)
    assert body["pricing"]["platformProfit"] == pytest.approx(10)
    assert body["data"]["isVerified"] is True

    listing = (await test_client.get(f"/get-restaurant/{rest['_id']}")).json()
    assert listing["items"][0]["quantity"] == 20

    public = (await test_client.get("/acceptors")).json()
    assert [a["_id"] for a in public] == [acc["_id"]]


async def test_verify_acceptor_without_stock(test_client: AsyncClient):
    await _verified_restaurant(test_client)
    acc = await _acceptor(test_client, quantity=50)

    body = (await test_client.put(f"/verify-acceptor/{acc['_id']}")).json()

    assert body["matched"] is False
    assert body["pricing"] is None
    assert body["matchInfo"] == "No matching fresh verified food found."
    assert body["data"]["isVerified"] is True


async def test_verify_unknown_acceptor_is_404(test_client: AsyncClient):
    before = (await test_client.get("/admin/activities")).json()

    r = await test_client.put("/verify-acceptor/does-not-exist")

    assert r.status_code == 404
    assert r.json() == {"detail": "Acceptor not found"}
    assert (await test_client.get("/admin/activities")).json() == before


async def test_activity_trail(test_client: AsyncClient):
    await _verified_restaurant(test_client)
    acc = await _acceptor(test_client)
    await test_client.put(f"/verify-acceptor/{acc['_id']}")

    logs = (await test_client.get("/admin/activities")).json()
    assert [l["action"] for l in logs] == ["Matched & Priced", "Requested Food", "Donated Food"]
    assert logs[0]["actorName"] == "Pricing Engine"

    r = await test_client.delete(f"/delete-activity/{logs[0]['_id']}")
    assert r.status_code == 200
    assert len((await test_client.get("/admin/activities")).json()) == 2


async def test_delete_restaurant_and_acceptor(test_client: AsyncClient):
    rest = await _verified_restaurant(test_client)
    acc = await _acceptor(test_client)

    assert (await test_client.delete(f"/delete-restaurant/{rest['_id']}")).status_code == 200
    assert (await test_client.delete(f"/delete-acceptor/{acc['_id']}")).status_code == 200
    assert (await test_client.get(f"/get-restaurant/{rest['_id']}")).status_code == 404
    assert (await test_client.delete(f"/delete-acceptor/{acc['_id']}")).status_code == 404


async def test_delivery_lifecycle(test_client: AsyncClient):
    r = await test_client.post("/add-delivery", json={
        "name": "Ravi", "email": "ravi@example.com", "phone": "555-0303",
        "location": "Goa", "vehicleType": "Bike", "licenseNumber": "GA-07-1234",
    })
    assert r.status_code == 201, r.text
    did = r.json()["data"]["_id"]
    assert r.json()["data"]["status"] == "Available"

    r = await test_client.put(f"/verify-delivery/{did}")
    assert r.json()["data"]["isVerified"] is True

    listed = (await test_client.get("/admin/deliveries")).json()
    assert [d["_id"] for d in listed] == [did]

    assert (await test_client.delete(f"/delete-delivery/{did}")).status_code == 200
    assert (await test_client.get("/admin/deliveries")).json() == []


async def test_admin_login(test_client: AsyncClient):
    ok = await test_client.post("/verify-admin", json={"adminId": "admin", "password": "s3cret"})
    assert ok.status_code == 200
    assert ok.json()["success"] is True

    bad = await test_client.post("/verify-admin", json={"adminId": "admin", "password": "nope"})
    assert bad.status_code == 401


async def test_storage_stats(test_client: AsyncClient):
    await _verified_restaurant(test_client)
    await _acceptor(test_client)

    stats = (await test_client.get("/admin/storage-stats")).json()
    assert stats == {
        "engine": "In-Memory",
        "restaurants": 1,
        "acceptors": 1,
        "deliveries": 0,
        "activities": 2,
    }
    assert "In-Memory" in (await test_client.get("/admin/db-status")).json()["status"]
