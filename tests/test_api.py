from datetime import datetime, timedelta
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from groupledger.database import get_db
from groupledger.main import app

@pytest.fixture
def client(engine):
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()

def setup_group(client):
    ids = []
    for name in ("ana", "ben", "cleo"):
        r = client.post("/users", json={"name": name.title(), "email": f"{name}@example.com"})
        assert r.status_code == 200
        ids.append(r.json()["id"])
    gid = client.post("/groups", json={"name": "Lake trip"}).json()["id"]
    for uid in ids:
        assert client.post(f"/groups/{gid}/members", json={"user_id": uid}).json() == {"message": "Member added"}
    return gid, ids

def test_health(client):
    assert client.get("/").json() == {"status": "ok"}

def test_balances_and_settlements(client):
    gid, (a, b, c) = setup_group(client)
    assert client.post(f"/groups/{gid}/expenses", json={"user_id": a, "amount": 30, "description": "Firewood",
                                                        "split_type": "equal"}).status_code == 200
    assert client.post(f"/groups/{gid}/expenses", json={"user_id": b, "amount": 60, "description": "Boat rental",
                                                        "split_type": "equal"}).status_code == 200
    body = client.get(f"/groups/{gid}/balances").json()
    assert body["balances"] == [
        {"member_id": b, "paid": 60.0, "owed": 30.0, "balance": 30.0},
        {"member_id": a, "paid": 30.0, "owed": 30.0, "balance": 0.0},
        {"member_id": c, "paid": 0.0, "owed": 30.0, "balance": -30.0},
    ]
    assert body["settlements"] == [{"from": c, "to": b, "amount": 30.0}]

def test_invalid_split_is_rejected(client):
    gid, (a, b, _) = setup_group(client)
    r = client.post(f"/groups/{gid}/expenses", json={
        "user_id": a, "amount": 50, "description": "Groceries", "split_type": "custom",
        "split_details": [{"user_id": a, "amount": 20}, {"user_id": b, "amount": 20}],
    })
    assert r.status_code == 400
    assert "must equal expense amount" in r.json()["detail"]
    r = client.post(f"/groups/{gid}/expenses", json={"user_id": a, "amount": 50, "description": "Groceries",
                                                     "split_type": "custom"})
    assert r.status_code == 422
    assert client.get(f"/groups/{gid}/expenses").json() == []

def test_unknown_group(client):
    assert client.get("/groups/999/balances").status_code == 404

def test_dashboard(client):
    gid, (a, _, _) = setup_group(client)
    client.post(f"/groups/{gid}/expenses", json={"user_id": a, "amount": 90, "description": "Cabin rent",
                                                 "split_type": "equal"})
    body = client.get(f"/groups/{gid}/dashboard").json()
    assert body["member_count"] == 3
    assert body["stats"]["total_count"] == 1
    assert body["stats"]["top_categories"] == [{"category": "Rent", "amount": 90.0, "percentage": 100, "emoji": "🏠"}]
    assert [s["amount"] for s in body["settlements"]] == [30.0, 30.0]

def test_bill_analysis_flow(client):
    gid, (a, _, _) = setup_group(client)
    start = datetime(2026, 6, 1, 18, 0)
    for week in range(4):
        client.post(f"/groups/{gid}/expenses", json={
            "user_id": a, "amount": 24.0, "description": "Payment to Cleaning crew #{}".format(100 + week),
            "split_type": "equal", "created_at": (start + timedelta(weeks=week)).isoformat(),
        })
    r = client.post(f"/groups/{gid}/bills/analyze", params={"user_id": a})
    assert r.status_code == 200
    saved = r.json()["saved"]
    assert [(s["name"], s["frequency"]) for s in saved] == [("Cleaning Crew", "weekly")]
    bills = client.get(f"/groups/{gid}/bills").json()
    assert [b["id"] for b in bills] == [saved[0]["id"]]

def test_offset_timestamps_are_stored_as_utc(client):
    gid, (a, _, _) = setup_group(client)
    r = client.post(f"/groups/{gid}/expenses", json={"user_id": a, "amount": 12, "description": "Late dinner",
                                                     "split_type": "equal", "created_at": "2026-06-01T23:30:00-05:00"})
    assert r.status_code == 200
    assert r.json()["created_at"] == "2026-06-02T04:30:00"
    assert client.get(f"/groups/{gid}/expenses/{r.json()['id']}").json()["created_at"] == "2026-06-02T04:30:00"

def test_edit_and_delete_expense(client):
    gid, (a, b, c) = setup_group(client)
    eid = client.post(f"/groups/{gid}/expenses", json={"user_id": a, "amount": 30, "description": "Firewood",
                                                       "split_type": "equal"}).json()["id"]
    r = client.put(f"/groups/{gid}/expenses/{eid}", json={"user_id": b, "description": "Kindling"})
    assert r.status_code == 403
    r = client.put(f"/groups/{gid}/expenses/{eid}", json={"user_id": a, "amount": 45, "split_type": "equal"})
    assert r.status_code == 200
    assert [s["amount"] for s in r.json()["shares"]] == [15.0, 15.0, 15.0]
    settlements = client.get(f"/groups/{gid}/balances").json()["settlements"]
    assert settlements == [{"from": b, "to": a, "amount": 15.0}, {"from": c, "to": a, "amount": 15.0}]

    r = client.put(f"/groups/{gid}/expenses/{eid}", json={"user_id": a, "amount": 50})
    assert r.status_code == 400

    assert client.delete(f"/groups/{gid}/expenses/{eid}", params={"user_id": a}).json() == {"message": "Expense deleted"}
    assert client.get(f"/groups/{gid}/expenses/{eid}").status_code == 404
    assert client.get(f"/groups/{gid}/balances").json()["settlements"] == []

def test_recurring_bill_endpoints(client):
    gid, (a, b, _) = setup_group(client)
    r = client.post(f"/groups/{gid}/bills", json={"user_id": a, "name": "Internet", "amount": 45.0,
                                                  "category": "Utilities", "frequency": "monthly",
                                                  "next_due_date": "2026-07-01T00:00:00"})
    assert r.status_code == 200
    bill_id = r.json()["id"]
    assert client.put(f"/groups/{gid}/bills/{bill_id}", json={"user_id": b, "amount": 50}).status_code == 403
    r = client.put(f"/groups/{gid}/bills/{bill_id}", json={"user_id": a, "amount": 50})
    assert (r.json()["amount"], r.json()["frequency"]) == (50.0, "monthly")
    assert client.delete(f"/groups/{gid}/bills/{bill_id}", params={"user_id": b}).status_code == 403
    assert client.delete(f"/groups/{gid}/bills/{bill_id}", params={"user_id": a}).status_code == 200
    assert client.get(f"/groups/{gid}/bills").json() == []

def test_user_dashboard(client):
    gid, (a, b, _) = setup_group(client)
    client.post(f"/groups/{gid}/expenses", json={"user_id": b, "amount": 60, "description": "Boat rental",
                                                 "split_type": "equal"})
    body = client.get(f"/users/{a}/dashboard").json()
    assert body["user"]["id"] == a
    assert body["summary"] == {"total_paid": 0.0, "total_owed": 20.0, "net_balance": -20.0}
    assert [(x["description"], x["impact"]) for x in body["recent_activity"]] == [("Boat rental", -20.0)]
    assert [g["id"] for g in body["groups"]] == [gid]
    assert client.get("/users/999/dashboard").status_code == 404
