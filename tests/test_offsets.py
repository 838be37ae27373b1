import pytest


def test_offset_acknowledgment_lifecycle(client, auth_headers):
    r = client.post("/api/offsets", json={"flight_id": "f-1", "co2_kg": 76.23, "note": "Crédits VCS"}, headers=auth_headers)

    assert r.status_code == 201
    ack = r.json()
    assert ack["club_id"] == "club-1"
    assert ack["user_id"] == "user-1"
    assert ack["offset_cost"] == pytest.approx(76.23 / 1000 * 25)
    assert ack["price_per_tonne"] == 25.0

    client.post("/api/offsets", json={"flight_id": "f-2", "co2_kg": 1000}, headers=auth_headers)

    listed = client.get("/api/offsets", headers=auth_headers).json()
    assert [x["flight_id"] for x in listed] == ["f-2", "f-1"]

    summary = client.get("/api/offsets/summary", headers=auth_headers).json()
    assert summary["count"] == 2
    assert summary["total_co2"] == pytest.approx(1076.23)
    assert summary["total_offset_cost"] == pytest.approx(25 + 76.23 / 1000 * 25)


def test_duplicate_acknowledgment_conflicts(client, auth_headers):
    body = {"flight_id": "f-1", "co2_kg": 10}
    assert client.post("/api/offsets", json=body, headers=auth_headers).status_code == 201
    assert client.post("/api/offsets", json=body, headers=auth_headers).status_code == 409


def test_negative_co2_is_rejected(client, auth_headers):
    r = client.post("/api/offsets", json={"flight_id": "f-1", "co2_kg": -1}, headers=auth_headers)
    assert r.status_code == 422


def test_offsets_are_scoped_to_club(client, supabase, auth_headers):
    client.post("/api/offsets", json={"flight_id": "f-1", "co2_kg": 10}, headers=auth_headers)

    supabase.memberships["user-1"] = {"club_id": "club-2", "clubs": {"name": "Autre club"}}

    assert client.get("/api/offsets", headers=auth_headers).json() == []
    assert client.get("/api/offsets/summary", headers=auth_headers).json()["count"] == 0


def test_empty_summary(client, auth_headers):
    assert client.get("/api/offsets/summary", headers=auth_headers).json() == {
        "count": 0,
        "total_co2": 0.0,
        "total_offset_cost": 0.0,
    }


def test_offsets_require_auth(client):
    assert client.get("/api/offsets").status_code == 401
