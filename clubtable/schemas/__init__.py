"""Pydantic schemas for the club REST API and the gateway"""

from clubtable.schemas.attendee import (
    Attendee,
    AttendeeCreate,
    AttendeeUpdate,
    DietaryRestriction,
    RosterEntry,
    dietary_from_choice,
)
from clubtable.schemas.auth import (
    CurrentUser,
    LoginRequest,
    LoginResponse,
    SignupRequest,
    Token,
    TokenClaims,
    TokenExpired,
    TokenMalformed,
    TokenOk,
    TokenResult,
)
from clubtable.schemas.booking import (
    AvailabilityResponse,
    BookingAttendee,
    BookingRequest,
    BookingResult,
    DietaryUpdate,
    NotesUpdate,
    MoveTableRequest,
    SeatAssignmentRequest,
)
from clubtable.schemas.dining import (
    DiningRoom,
    Seat,
    Table,
    TableAvailability,
)
from clubtable.schemas.floor import FloorPlanResponse, RoomStats
from clubtable.schemas.member import Member
from clubtable.schemas.notification import (
    ErrorEnvelope,
    GenericError,
    StructuredServerError,
    Toast,
    ToastAction,
    parse_error_envelope,
)
from clubtable.schemas.order import (
    ActiveOrder,
    KitchenTicket,
    MenuItem,
    Order,
    OrderCreate,
    OrderItemCreate,
)
from clubtable.schemas.reservation import (
    MEAL_PERIODS,
    AvailabilityEntry,
    MealType,
    Reservation,
    ReservationCreate,
    ReservationStatus,
    ReservationUpdate,
)

__all__ = [
    "Attendee",
    "AttendeeCreate",
    "AttendeeUpdate",
    "DietaryRestriction",
    "RosterEntry",
    "dietary_from_choice",
    "CurrentUser",
    "LoginRequest",
    "LoginResponse",
    "SignupRequest",
    "Token",
    "TokenClaims",
    "TokenExpired",
    "TokenMalformed",
    "TokenOk",
    "TokenResult",
    "AvailabilityResponse",
    "BookingAttendee",
    "BookingRequest",
    "BookingResult",
    "DietaryUpdate",
    "NotesUpdate",
    "MoveTableRequest",
    "SeatAssignmentRequest",
    "DiningRoom",
    "Seat",
    "Table",
    "TableAvailability",
    "FloorPlanResponse",
    "RoomStats",
    "Member",
    "ErrorEnvelope",
    "GenericError",
    "StructuredServerError",
    "Toast",
    "ToastAction",
    "parse_error_envelope",
    "ActiveOrder",
    "KitchenTicket",
    "MenuItem",
    "Order",
    "OrderCreate",
    "OrderItemCreate",
    "MEAL_PERIODS",
    "AvailabilityEntry",
    "MealType",
    "Reservation",
    "ReservationCreate",
    "ReservationStatus",
    "ReservationUpdate",
]
