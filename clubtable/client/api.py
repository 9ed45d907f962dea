"""Typed endpoints of the club REST API"""

from datetime import date
from typing import Any, List, Optional, Type, TypeVar

import structlog
from pydantic import BaseModel
from pydantic import ValidationError as SchemaError

from clubtable.client.http import ApiClient
from clubtable.errors import ValidationError
from clubtable.schemas.attendee import Attendee, AttendeeCreate, AttendeeUpdate
from clubtable.schemas.auth import LoginRequest, LoginResponse, SignupRequest, TokenOk
from clubtable.schemas.dining import DiningRoom, Seat, Table
from clubtable.schemas.member import Member
from clubtable.schemas.order import ActiveOrder, MenuItem, Order, OrderCreate
from clubtable.schemas.reservation import (
    AvailabilityEntry,
    Reservation,
    ReservationCreate,
    ReservationUpdate,
)

logger = structlog.get_logger()

ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_list(model: Type[ModelT], data: Any) -> List[ModelT]:
    """Parse a JSON array, dropping anything that is not a valid object"""
    if not isinstance(data, list):
        return []

    items = []
    for raw in data:
        if not isinstance(raw, dict):
            continue
        try:
            items.append(model.model_validate(raw))
        except SchemaError as e:
            logger.warning(
                "Skipping malformed record",
                model=model.__name__,
                record_id=raw.get("id"),
                errors=e.error_count(),
            )
    return items


def parse_one(model: Type[ModelT], data: Any) -> Optional[ModelT]:
    """Parse a JSON object, or None if the body is not one"""
    if not isinstance(data, dict):
        return None
    try:
        return model.model_validate(data)
    except SchemaError:
        return None


class ClubApi(ApiClient):
    """Endpoints consumed by the booking workflow and the staff views"""

    # Auth

    async def login(self, credentials: LoginRequest) -> LoginResponse:
        """Log in and adopt the returned token on the session"""
        data = await self.post("/users/login", credentials.model_dump(), auth=False)
        response = parse_one(LoginResponse, data)
        if response is None:
            raise ValidationError("Invalid server response")

        result = self.session.restore(response.access_token)
        if not isinstance(result, TokenOk):
            raise ValidationError("Invalid server response")

        logger.info("Logged in", user_id=self.session.user.id, role=self.session.user.role)
        return response

    async def signup(self, form: SignupRequest) -> LoginResponse:
        """Create an account, then log in with it"""
        await self.post("/users/", form.model_dump(), auth=False)
        return await self.login(LoginRequest(email=form.email, password=form.password))

    # Reference data

    async def list_dining_rooms(self) -> List[DiningRoom]:
        return parse_list(DiningRoom, await self.get("/dining-rooms"))

    async def list_room_tables(self, room_id: int) -> List[Table]:
        return parse_list(Table, await self.get(f"/dining-rooms/{room_id}/tables"))

    async def list_tables(self) -> List[Table]:
        return parse_list(Table, await self.get("/ops/tables"))

    async def list_seats(self) -> List[Seat]:
        return parse_list(Seat, await self.get("/ops/seats"))

    async def list_members(self, search: Optional[str] = None) -> List[Member]:
        params = {"search": search} if search else None
        return parse_list(Member, await self.get("/members", params=params))

    # Reservations

    async def get_availability(self, on: date) -> List[AvailabilityEntry]:
        data = await self.get("/reservations/availability", params={"date": on.isoformat()})
        return parse_list(AvailabilityEntry, data)

    async def list_reservations(self, on: date) -> List[Reservation]:
        data = await self.get("/ops/reservations", params={"date": on.isoformat()})
        return parse_list(Reservation, data)

    async def create_reservation(self, payload: ReservationCreate) -> Any:
        """Create a reservation; returns the raw body (the id may be nested)"""
        return await self.post("/reservations", payload.model_dump(mode="json"))

    async def update_reservation(
        self, reservation_id: int, changes: ReservationUpdate
    ) -> Optional[Reservation]:
        data = await self.patch(
            f"/reservations/{reservation_id}",
            changes.model_dump(mode="json", exclude_unset=True),
        )
        return parse_one(Reservation, data)

    # Attendees

    async def create_attendee(self, payload: AttendeeCreate) -> Any:
        """Create an attendee; returns the raw body (a record or a 5W1H envelope)"""
        return await self.post("/reservation-attendees", payload.model_dump(mode="json"))

    async def update_attendee(
        self, attendee_id: int, changes: AttendeeUpdate
    ) -> Optional[Attendee]:
        data = await self.patch(
            f"/reservation-attendees/{attendee_id}",
            changes.model_dump(mode="json", exclude_unset=True),
        )
        return parse_one(Attendee, data)

    async def delete_attendee(self, attendee_id: int) -> None:
        await self.delete(f"/reservation-attendees/{attendee_id}")

    # Menu and orders

    async def list_menu_items(self, available_only: bool = True) -> List[MenuItem]:
        params = {"available_only": "true"} if available_only else None
        return parse_list(MenuItem, await self.get("/menu-items", params=params))

    async def create_order(self, payload: OrderCreate) -> Optional[Order]:
        data = await self.post("/orders", payload.model_dump(mode="json"))
        return parse_one(Order, data)

    async def list_active_orders(self) -> List[ActiveOrder]:
        return parse_list(ActiveOrder, await self.get("/ops/orders/active"))
