import json
import os
import tempfile

import httpx
import pytest

# Settings are read at import time: configure before any ecoflight import.
_fd, _DB_PATH = tempfile.mkstemp(prefix="ecoflight_test_", suffix=".db")
os.close(_fd)
os.environ["DATABASE_URL"] = f"sqlite:///{_DB_PATH}"
os.environ["SUPABASE_URL"] = "https://fourfly.test"
os.environ["SUPABASE_ANON_KEY"] = "anon-test-key"
os.environ["LOG_LEVEL"] = "DEBUG"

from fastapi.testclient import TestClient

from ecoflight.services.api.db.session import db, init_db
from ecoflight.services.fourfly.client import FourFlyClient

GOOD_TOKEN = "good-token-abcdefghijklmnop"
LONELY_TOKEN = "lonely-token-abcdefghijklmnop"


class FakeSupabase:
    """In-memory stand-in for the Supabase Auth + REST endpoints used by 4Fly."""

    def __init__(self):
        self.users = {
            GOOD_TOKEN: {"id": "user-1", "email": "pilote@aeroclub.fr"},
            LONELY_TOKEN: {"id": "user-2", "email": "sansclub@aeroclub.fr"},
        }
        self.passwords = {("pilote@aeroclub.fr", "secret"): GOOD_TOKEN}
        self.memberships = {"user-1": {"club_id": "club-1", "clubs": {"name": "Aéroclub Test"}}}
        self.installed = {("ecoflight", "club-1")}
        self.flight_rows: list[dict] = []
        self.aircraft_rows: list[dict] = []
        self.member_rows: list[dict] = []
        self.flights_status = 200
        self.rpc_status = 204
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        params = request.url.params
        token = request.headers.get("authorization", "").removeprefix("Bearer ")

        if path == "/auth/v1/user":
            user = self.users.get(token)
            if user is None:
                return httpx.Response(401, json={"msg": "invalid JWT"})
            return httpx.Response(200, json=user)
        if path == "/auth/v1/token":
            body = json.loads(request.content)
            tok = self.passwords.get((body.get("email"), body.get("password")))
            if tok is None:
                return httpx.Response(400, json={"error_description": "Invalid login credentials"})
            return httpx.Response(200, json={"access_token": tok, "user": self.users[tok]})
        if path == "/auth/v1/logout":
            return httpx.Response(204)

        if token not in self.users:
            return httpx.Response(401, json={"message": "JWT expired"})

        if path == "/rest/v1/club_members":
            m = self.memberships.get(params["user_id"].removeprefix("eq."))
            return httpx.Response(200, json=[m] if m else [])
        if path == "/rest/v1/external_app_installations":
            key = (params["app_id"].removeprefix("eq."), params["club_id"].removeprefix("eq."))
            return httpx.Response(200, json=[{"id": 1}] if key in self.installed else [])
        if path == "/rest/v1/flights":
            if self.flights_status != 200:
                return httpx.Response(self.flights_status, json={"message": "permission denied"})
            offset, limit = int(params["offset"]), int(params["limit"])
            return httpx.Response(200, json=self.flight_rows[offset:offset + limit])
        if path == "/rest/v1/aircraft":
            return httpx.Response(200, json=self.aircraft_rows)
        if path == "/rest/v1/users":
            return httpx.Response(200, json=self.member_rows)
        if path == "/rest/v1/rpc/log_app_usage":
            return httpx.Response(self.rpc_status)
        return httpx.Response(404, json={"message": f"unknown path {path}"})


def _flight_row(
    id,
    duration,
    capacity=None,
    aircraft_type=None,
    emission_factor=2.31,
    before=None,
    after=None,
    date="2025-06-01",
):
    return {
        "id": id,
        "date": date,
        "duration": duration,
        "userId": "user-1",
        "aircraftId": f"ac-{id}",
        "destination": "LFPN",
        "fuel_added_before": before,
        "fuel_added_after": after,
        "landings": 1,
        "aircraft": {
            "id": f"ac-{id}",
            "name": "DR400",
            "registration": "F-GABC",
            "type": aircraft_type,
            "capacity": capacity,
            "fuel_types": {"name": "100LL", "emission_factor": emission_factor},
        },
        "users": {"first_name": "Jeanne", "last_name": "Pilote"},
    }


@pytest.fixture(scope="session", autouse=True)
def _db_tmp():
    init_db()
    yield
    try:
        os.remove(_DB_PATH)
    except OSError:
        pass


@pytest.fixture
def flight_row():
    return _flight_row


@pytest.fixture
def supabase():
    return FakeSupabase()


@pytest.fixture
def fourfly(supabase):
    return FourFlyClient("https://fourfly.test", "anon-test-key", transport=httpx.MockTransport(supabase))


@pytest.fixture
def client(fourfly):
    from ecoflight.services.api.core.fourfly import get_fourfly
    from ecoflight.services.api.db.models import OffsetAcknowledgment
    from ecoflight.services.api.main import app

    app.dependency_overrides[get_fourfly] = lambda: fourfly
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
    with db() as s:
        s.query(OffsetAcknowledgment).delete()
        s.commit()


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {GOOD_TOKEN}"}


@pytest.fixture
def lonely_headers():
    return {"Authorization": f"Bearer {LONELY_TOKEN}"}
