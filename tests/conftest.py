"""Test configuration and fixtures"""

import os

os.environ.setdefault("RETRY_BACKOFF_SECONDS", "0")

import json
import re
import time
from itertools import count
from typing import Any, Dict, List, Optional, Tuple, Union

import httpx
import pytest
from httpx import ASGITransport, AsyncClient
from jose import jwt

from clubtable.api.deps import get_http
from clubtable.config import Settings
from clubtable.main import app
from clubtable.state import AppState

UPSTREAM_URL = "http://club.test/api"
TEST_SECRET = "test-secret"

Injected = Union[int, Tuple[int, Any]]


def make_token(
    user_id: int = 1,
    role: str = "member",
    name: Optional[str] = "Ada Lovelace",
    member_id: Optional[int] = 10,
    expires_in: int = 3600,
) -> str:
    """Create a backend-style access token"""
    payload = {
        "user_id": user_id,
        "role": role,
        "exp": int(time.time()) + expires_in,
        "name": name,
        "member_id": member_id,
    }
    return jwt.encode(payload, TEST_SECRET, algorithm="HS256")


class FakeBackend:
    """In-memory stand-in for the club REST API, served through MockTransport"""

    def __init__(self):
        self.rooms = [
            {"id": 1, "name": "Main Hall"},
            {"id": 2, "name": "Garden Room"},
        ]
        self.tables = [
            {
                "id": i,
                "dining_room_id": 1,
                "table_number": i,
                "seat_count": 2 if i == 8 else 4,
                "position_x": i * 10,
                "position_y": 0,
            }
            for i in range(1, 9)
        ] + [
            {"id": 9, "dining_room_id": 2, "table_number": 1, "seat_count": 6},
        ]
        self.seats = []
        seat_ids = count(1)
        for table in self.tables:
            for number in range(1, table["seat_count"] + 1):
                self.seats.append(
                    {"id": next(seat_ids), "table_id": table["id"], "seat_number": number}
                )
        self.members = [
            {"id": 10, "name": "Ada Lovelace", "relation": None, "dietary_restrictions": None},
            {"id": 11, "name": "Byron Lovelace", "relation": "Spouse", "dietary_restrictions": {"note": "Vegan"}},
            {"id": 12, "name": "Alice Brown", "relation": None, "dietary_restrictions": None},
        ]
        self.users = {"ada@club.test": "secret"}
        self.reservations: List[Dict[str, Any]] = []
        self.attendees: List[Dict[str, Any]] = []
        self.orders: List[Dict[str, Any]] = []
        self.menu_items = [
            {"id": 1, "name": "Onion Soup", "price": "9.50", "category": "Starters", "is_available": True},
            {"id": 2, "name": "Ribeye", "price": "38.00", "category": "Mains", "is_available": True},
            {"id": 3, "name": "Lobster", "price": "52.00", "category": "Mains", "is_available": False},
        ]
        # "record", "envelope" (id in meta) or "bare" (no id at all)
        self.attendee_reply = "record"
        self.revoked: set = set()
        self.failing_attendees: Dict[str, int] = {}
        self.requests: List[httpx.Request] = []
        self._failures: Dict[Tuple[str, str], List[Injected]] = {}
        self._ids = count(100)

    # Test controls

    def fail(self, method: str, path: str, *responses: Injected) -> None:
        """Queue injected responses: a status, (status, body), 0 for a dropped
        connection, or an httpx exception class to raise"""
        self._failures.setdefault((method, path), []).extend(responses)

    def fail_attendee(self, name: str, status: int = 422) -> None:
        self.failing_attendees[name] = status

    def add_reservation(self, **fields) -> Dict[str, Any]:
        reservation = {
            "id": next(self._ids),
            "date": "2025-06-01",
            "meal_type": "dinner",
            "start_time": "15:00",
            "end_time": "19:00",
            "dining_room_id": 1,
            "table_id": 1,
            "status": "confirmed",
            "notes": None,
            "fired_at": None,
        }
        reservation.update(fields)
        self.reservations.append(reservation)
        return reservation

    def add_attendee(self, reservation_id: int, name: str, **fields) -> Dict[str, Any]:
        attendee = {
            "id": next(self._ids),
            "reservation_id": reservation_id,
            "name": name,
            "attendee_type": "guest",
            "dietary_restrictions": None,
            "member_id": None,
            "seat_id": None,
        }
        attendee.update(fields)
        self.attendees.append(attendee)
        return attendee

    def calls(self, method: str, path: str) -> List[httpx.Request]:
        return [
            r for r in self.requests
            if r.method == method and self._path(r) == path
        ]

    # Transport

    @staticmethod
    def _path(request: httpx.Request) -> str:
        path = request.url.path
        return path[len("/api"):] if path.startswith("/api") else path

    def _with_attendees(self, reservation: Dict[str, Any]) -> Dict[str, Any]:
        return {
            **reservation,
            "attendees": [a for a in self.attendees if a["reservation_id"] == reservation["id"]],
        }

    def _place_order(self, payload: Dict[str, Any]) -> httpx.Response:
        reservation = next(
            (r for r in self.reservations if r["id"] == payload["reservation_id"]), None
        )
        if reservation is None:
            return httpx.Response(404, json={"detail": "Reservation not found"})

        menu = {m["id"]: m for m in self.menu_items}
        names = {a["id"]: a["name"] for a in self.attendees}
        table = next((t for t in self.tables if t["id"] == reservation["table_id"]), {})

        by_guest: Dict[int, Dict[str, Any]] = {}
        for line in payload["items"]:
            attendee_id = line["reservation_attendee_id"]
            guest = by_guest.setdefault(
                attendee_id,
                {"attendee_id": attendee_id, "name": names.get(attendee_id, "Guest"), "items": []},
            )
            guest["items"].append(
                {
                    "id": next(self._ids),
                    "quantity": line["quantity"],
                    "menu_item": {"name": menu[line["menu_item_id"]]["name"]},
                    "special_instructions": line.get("special_instructions"),
                }
            )

        order = {
            "id": next(self._ids),
            "reservation_id": reservation["id"],
            "status": "pending",
            "reservation": {
                "id": reservation["id"],
                "fired_at": reservation["fired_at"],
                "table": {"table_number": table.get("table_number")},
            },
            "items_by_guest": list(by_guest.values()),
        }
        self.orders.append(order)
        return httpx.Response(201, json=order)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        method, path = request.method, self._path(request)

        queued = self._failures.get((method, path))
        if queued:
            injected = queued.pop(0)
            if isinstance(injected, type):
                raise injected("injected failure", request=request)
            if injected == 0:
                raise httpx.ConnectError("connection refused", request=request)
            if isinstance(injected, tuple):
                status, body = injected
                return httpx.Response(status, json=body)
            return httpx.Response(injected, json={"detail": f"Injected {injected}"})

        if path not in ("/users/login", "/users/"):
            auth = request.headers.get("Authorization", "")
            if not auth.startswith("Bearer ") or auth[len("Bearer "):] in self.revoked:
                return httpx.Response(401, json={"detail": "Not authenticated"})

        payload = json.loads(request.content) if request.content else None
        return self._route(method, path, request, payload)

    def _route(self, method, path, request, payload) -> httpx.Response:
        params = request.url.params

        if method == "POST" and path == "/users/login":
            if self.users.get(payload.get("email")) != payload.get("password"):
                return httpx.Response(401, json={"detail": "Incorrect email or password"})
            return httpx.Response(
                200,
                json={"access_token": make_token(), "user": {"id": 1, "name": "Ada Lovelace"}},
            )

        if method == "POST" and path == "/users/":
            self.users[payload["email"]] = payload["password"]
            return httpx.Response(201, json={"id": next(self._ids), "email": payload["email"]})

        if method == "GET" and path == "/dining-rooms":
            return httpx.Response(200, json=self.rooms)

        match = re.fullmatch(r"/dining-rooms/(\d+)/tables", path)
        if method == "GET" and match:
            room_id = int(match.group(1))
            return httpx.Response(
                200, json=[t for t in self.tables if t["dining_room_id"] == room_id]
            )

        if method == "GET" and path == "/ops/tables":
            return httpx.Response(200, json=self.tables)

        if method == "GET" and path == "/ops/seats":
            return httpx.Response(200, json=self.seats)

        if method == "GET" and path == "/members":
            term = params.get("search", "").lower()
            return httpx.Response(
                200, json=[m for m in self.members if term in m["name"].lower()]
            )

        if method == "GET" and path == "/reservations/availability":
            on = params.get("date")
            return httpx.Response(
                200,
                json=[
                    {"table_id": r["table_id"], "meal_type": r["meal_type"], "status": r["status"]}
                    for r in self.reservations
                    if r["date"] == on
                ],
            )

        if method == "GET" and path == "/ops/reservations":
            on = params.get("date")
            return httpx.Response(
                200,
                json=[self._with_attendees(r) for r in self.reservations if r["date"] == on],
            )

        if method == "POST" and path == "/reservations":
            reservation = self.add_reservation(status="confirmed", **payload)
            return httpx.Response(
                201,
                json={
                    "what": "Reservation created",
                    "why": f"Table {reservation['table_id']} is yours",
                    "meta": {"reservation_id": reservation["id"]},
                },
            )

        match = re.fullmatch(r"/reservations/(\d+)", path)
        if method == "PATCH" and match:
            reservation = next(
                (r for r in self.reservations if r["id"] == int(match.group(1))), None
            )
            if reservation is None:
                return httpx.Response(404, json={"detail": "Reservation not found"})
            reservation.update(payload)
            return httpx.Response(200, json=self._with_attendees(reservation))

        if method == "POST" and path == "/reservation-attendees":
            if payload["name"] in self.failing_attendees:
                status = self.failing_attendees[payload["name"]]
                return httpx.Response(status, json={"detail": "Attendee rejected"})
            attendee = self.add_attendee(**payload)
            if self.attendee_reply == "envelope":
                return httpx.Response(
                    201,
                    json={"what": "Guest added", "meta": {"attendee_id": attendee["id"]}},
                )
            if self.attendee_reply == "bare":
                return httpx.Response(201, json={"what": "Guest added"})
            return httpx.Response(201, json=attendee)

        match = re.fullmatch(r"/reservation-attendees/(\d+)", path)
        if match:
            attendee = next(
                (a for a in self.attendees if a["id"] == int(match.group(1))), None
            )
            if attendee is None:
                return httpx.Response(404, json={"detail": "Attendee not found"})
            if method == "PATCH":
                attendee.update(payload)
                return httpx.Response(200, json=attendee)
            if method == "DELETE":
                self.attendees.remove(attendee)
                return httpx.Response(204)

        if method == "GET" and path == "/menu-items":
            items = self.menu_items
            if params.get("available_only") == "true":
                items = [m for m in items if m["is_available"]]
            return httpx.Response(200, json=items)

        if method == "POST" and path == "/orders":
            return self._place_order(payload)

        if method == "GET" and path == "/ops/orders/active":
            return httpx.Response(200, json=self.orders)

        return httpx.Response(404, json={"detail": "Not Found"})


@pytest.fixture
def test_settings():
    """Settings with no backoff and fast polling"""
    return Settings(
        api_base_url=UPSTREAM_URL,
        retry_backoff_seconds=0,
        floor_plan_poll_seconds=0.01,
        kitchen_poll_seconds=0.01,
        member_search_debounce_seconds=0.01,
    )


@pytest.fixture
def backend():
    """Fake club backend"""
    return FakeBackend()


@pytest.fixture
async def upstream(backend):
    """HTTP client wired to the fake backend"""
    async with AsyncClient(
        base_url=UPSTREAM_URL,
        transport=httpx.MockTransport(backend.handle),
    ) as client:
        yield client


@pytest.fixture
def member_token():
    return make_token()


@pytest.fixture
async def app_state(upstream, test_settings, member_token):
    """Signed-in application state talking to the fake backend"""
    state = AppState.create(token=member_token, settings=test_settings, http=upstream)
    yield state
    await state.close()


@pytest.fixture
async def client(upstream):
    """Gateway test client with the upstream client overridden"""
    app.dependency_overrides[get_http] = lambda: upstream

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
async def authenticated_client(client, member_token):
    """Gateway test client carrying a member token"""
    client.headers["Authorization"] = f"Bearer {member_token}"
    return client


@pytest.fixture
def token_factory():
    """Build tokens with custom claims"""
    return make_token
