"""
4Fly data access over the Supabase Auth (GoTrue) and REST (PostgREST) APIs.

Every data call receives an explicit `ClubScope`; the client itself only
holds connection settings, so one instance is shared by all requests.
Row-level permissions are enforced by Supabase through the user's JWT.
"""
from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any

import httpx

from ecoflight.calc_core.engines import normalize_fuel
from ecoflight.calc_core.models import AircraftDescriptor, FlightRecord
from ecoflight.services.fourfly.errors import (
    AuthenticationError,
    AuthorizationError,
    FourFlyError,
    FourFlyRequestError,
    NoClubError,
)
from ecoflight.services.fourfly.models import ClubScope, SignInResult

logger = logging.getLogger(__name__)

FLIGHT_SELECT = (
    "id,date,duration,userId,aircraftId,destination,"
    "fuel_added_before,fuel_added_after,landings,"
    "aircraft:aircraftId(id,name,registration,type,capacity,"
    "fuel_types!fuel_type_id(name,emission_factor)),"
    "users:userId(first_name,last_name)"
)
AIRCRAFT_SELECT = (
    "id,name,registration,type,capacity,hourlyRate,status,"
    "fuel_types!fuel_type_id(name,emission_factor)"
)
MEMBER_SELECT = "id,first_name,last_name,email"


def mask_token(token: str | None, keep: int = 12) -> str:
    return (token or "")[:keep] + "…"


def _iso(d: date | str | None) -> str | None:
    if d is None:
        return None
    return d.isoformat() if isinstance(d, date) else str(d)


def _parse_date(value: Any) -> date | str | None:
    if not value:
        return None
    if isinstance(value, date):
        return value
    try:
        return datetime.fromisoformat(str(value)).date()
    except ValueError:
        try:
            return date.fromisoformat(str(value)[:10])
        except ValueError:
            return str(value)


def _known_fuel(before: Any, after: Any) -> float | None:
    """Fuel added before + after the flight; None when nothing was recorded."""
    if before is None and after is None:
        return None
    total = normalize_fuel(before, "fuel_added_before") + normalize_fuel(after, "fuel_added_after")
    return total if total > 0 else None


def flight_from_row(row: dict) -> FlightRecord:
    aircraft = row.get("aircraft") or {}
    fuel_type = aircraft.get("fuel_types") or {}
    users = row.get("users")
    pilot_name = f"{users.get('first_name') or ''} {users.get('last_name') or ''}".strip() if users else ""

    return FlightRecord(
        id=row.get("id"),
        date=_parse_date(row.get("date")),
        duration=row.get("duration"),
        destination=row.get("destination"),
        pilot_id=row.get("userId"),
        pilot_name=pilot_name or "N/A",
        fuel_used=_known_fuel(row.get("fuel_added_before"), row.get("fuel_added_after")),
        landings=row.get("landings"),
        aircraft=AircraftDescriptor(
            id=row.get("aircraftId") or aircraft.get("id"),
            name=aircraft.get("name") or "Avion",
            registration=aircraft.get("registration") or "",
            type=aircraft.get("type"),
            capacity=aircraft.get("capacity"),
            emission_factor=fuel_type.get("emission_factor"),
            fuel_type=fuel_type.get("name"),
        ),
    )


class FourFlyClient:
    def __init__(
        self,
        supabase_url: str,
        supabase_anon_key: str,
        *,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if not supabase_url or not supabase_anon_key:
            raise ValueError("Supabase configuration required: supabase_url and supabase_anon_key")
        self._anon_key = supabase_anon_key
        self._http = httpx.AsyncClient(
            base_url=supabase_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._http.aclose()

    def _headers(self, token: str | None = None) -> dict[str, str]:
        return {
            "apikey": self._anon_key,
            "Authorization": f"Bearer {token or self._anon_key}",
        }

    async def _send(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            return await self._http.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise FourFlyRequestError(f"4Fly request failed ({method} {path}): {e}") from e

    async def _rest(
        self,
        method: str,
        path: str,
        token: str,
        *,
        params: Any = None,
        json: Any = None,
    ) -> Any:
        resp = await self._send(method, f"/rest/v1/{path}", params=params, json=json, headers=self._headers(token))
        if resp.status_code in (401, 403):
            raise AuthorizationError(f"4Fly refused access to {path} ({resp.status_code})")
        if resp.is_error:
            raise FourFlyRequestError(
                f"4Fly error on {path}: {resp.status_code} {resp.text}",
                status_code=resp.status_code,
            )
        if not resp.content:
            return None
        return resp.json()

    # -----------------
    # Auth
    # -----------------
    async def get_user(self, token: str) -> dict:
        if not token:
            raise AuthenticationError("Token required")
        resp = await self._send("GET", "/auth/v1/user", headers=self._headers(token))
        if resp.status_code in (400, 401, 403, 404):
            raise AuthenticationError("Invalid JWT")
        if resp.is_error:
            raise FourFlyRequestError(f"4Fly auth error: {resp.status_code}", status_code=resp.status_code)
        user = resp.json()
        if not user or not user.get("id"):
            raise AuthenticationError("Invalid JWT")
        return user

    async def sign_in(self, email: str, password: str) -> SignInResult:
        resp = await self._send(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
            headers={"apikey": self._anon_key},
        )
        if resp.status_code in (400, 401, 403):
            try:
                body = resp.json() if resp.content else {}
            except ValueError:
                body = {}
            if not isinstance(body, dict):
                body = {}
            message = body.get("error_description") or body.get("msg") or "Invalid login credentials"
            raise AuthenticationError(message)
        if resp.is_error:
            raise FourFlyRequestError(f"4Fly sign-in error: {resp.status_code}", status_code=resp.status_code)
        data = resp.json()
        token = data.get("access_token")
        if not token:
            raise AuthenticationError("No session returned")
        logger.info("4Fly sign-in OK for %s", (data.get("user") or {}).get("email") or email)
        return SignInResult(access_token=token, user=data.get("user") or {})

    async def sign_out(self, token: str) -> None:
        resp = await self._send("POST", "/auth/v1/logout", headers=self._headers(token))
        if resp.status_code in (401, 403):
            raise AuthenticationError("Invalid JWT")
        if resp.is_error:
            raise FourFlyRequestError(f"4Fly sign-out error: {resp.status_code}", status_code=resp.status_code)

    async def load_club(self, token: str, user_id: str) -> dict | None:
        rows = await self._rest(
            "GET",
            "club_members",
            token,
            params={
                "select": "club_id,clubs(name)",
                "user_id": f"eq.{user_id}",
                "is_active": "eq.true",
                "limit": "1",
            },
        )
        return rows[0] if rows else None

    async def resolve_scope(self, token: str) -> ClubScope:
        """Validate the JWT and attach the user's active club."""
        user = await self.get_user(token)
        membership = await self.load_club(token, user["id"])
        if not membership or membership.get("club_id") is None:
            raise NoClubError(f"User {user['id']} has no active club")
        return ClubScope(
            user_id=user["id"],
            club_id=membership["club_id"],
            access_token=token,
            email=user.get("email"),
            club_name=(membership.get("clubs") or {}).get("name"),
        )

    # -----------------
    # App installation / usage
    # -----------------
    async def is_app_installed(self, scope: ClubScope, app_id: str) -> bool:
        rows = await self._rest(
            "GET",
            "external_app_installations",
            scope.access_token,
            params={
                "select": "id",
                "app_id": f"eq.{app_id}",
                "club_id": f"eq.{scope.club_id}",
                "is_active": "eq.true",
                "limit": "1",
            },
        )
        return bool(rows)

    async def log_app_usage(self, scope: ClubScope, app_id: str, action: str = "access") -> None:
        """Best-effort usage log; failures are reported and never raised."""
        try:
            await self._rest(
                "POST",
                "rpc/log_app_usage",
                scope.access_token,
                json={"p_app_id": app_id, "p_club_id": scope.club_id, "p_action": action},
            )
        except FourFlyError as e:
            logger.warning("Usage logging failed for club %s: %s", scope.club_id, e)

    # -----------------
    # Club data
    # -----------------
    async def fetch_flights(
        self,
        scope: ClubScope,
        *,
        limit: int = 50,
        offset: int = 0,
        start_date: date | str | None = None,
        end_date: date | str | None = None,
    ) -> list[FlightRecord]:
        """Club flights, newest first, in the [offset, offset + limit) window."""
        if limit < 1:
            raise ValueError("limit must be >= 1")
        if offset < 0:
            raise ValueError("offset must be >= 0")

        params: list[tuple[str, str]] = [
            ("select", FLIGHT_SELECT),
            ("club_id", f"eq.{scope.club_id}"),
            ("order", "date.desc"),
            ("offset", str(offset)),
            ("limit", str(limit)),
        ]
        if start_date:
            params.append(("date", f"gte.{_iso(start_date)}"))
        if end_date:
            params.append(("date", f"lte.{_iso(end_date)}"))

        rows = await self._rest("GET", "flights", scope.access_token, params=params) or []
        logger.debug("Fetched %d flights for club %s (offset=%d limit=%d)", len(rows), scope.club_id, offset, limit)
        return [flight_from_row(r) for r in rows]

    async def fetch_aircraft(self, scope: ClubScope) -> list[dict]:
        rows = await self._rest(
            "GET",
            "aircraft",
            scope.access_token,
            params={"select": AIRCRAFT_SELECT, "club_id": f"eq.{scope.club_id}", "order": "name.asc"},
        )
        return rows or []

    async def fetch_members(self, scope: ClubScope) -> list[dict]:
        rows = await self._rest(
            "GET",
            "users",
            scope.access_token,
            params={"select": MEMBER_SELECT, "club_id": f"eq.{scope.club_id}", "order": "last_name.asc"},
        )
        return rows or []
