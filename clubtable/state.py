"""Application state: the session, the API client and one store per resource"""

from typing import Callable, Dict, Generic, Iterator, List, Optional, TypeVar

import httpx
import structlog

from clubtable.auth.session import AuthSession
from clubtable.client.api import ClubApi
from clubtable.config import Settings, get_settings
from clubtable.schemas.attendee import Attendee
from clubtable.schemas.dining import DiningRoom, Seat, Table
from clubtable.schemas.member import Member
from clubtable.schemas.order import ActiveOrder, MenuItem
from clubtable.schemas.reservation import Reservation

logger = structlog.get_logger()

T = TypeVar("T")


class ResourceStore(Generic[T]):
    """In-memory copy of one resource type.

    The backend is the source of truth: ``set_items`` replaces everything
    with the latest fetch, and single-record writes replace by id.
    """

    def __init__(self, name: str):
        self.name = name
        self._items: List[T] = []

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._items))

    @property
    def items(self) -> List[T]:
        return list(self._items)

    def set_items(self, items: List[T]) -> None:
        self._items = list(items)

    def get(self, item_id) -> Optional[T]:
        for item in self._items:
            if getattr(item, "id", None) == item_id:
                return item
        return None

    def upsert(self, item: T) -> None:
        item_id = getattr(item, "id", None)
        for index, existing in enumerate(self._items):
            if item_id is not None and getattr(existing, "id", None) == item_id:
                self._items = self._items[:index] + [item] + self._items[index + 1:]
                return
        self._items = self._items + [item]

    def remove(self, item_id) -> None:
        self._items = [i for i in self._items if getattr(i, "id", None) != item_id]

    def filter(self, predicate: Callable[[T], bool]) -> List[T]:
        return [i for i in self._items if predicate(i)]

    def clear(self) -> None:
        self._items = []


class AppState:
    """Everything a signed-in session works with, passed around explicitly"""

    def __init__(self, session: AuthSession, api: ClubApi):
        self.session = session
        self.api = api

        self.rooms: ResourceStore[DiningRoom] = ResourceStore("rooms")
        self.tables: ResourceStore[Table] = ResourceStore("tables")
        self.seats: ResourceStore[Seat] = ResourceStore("seats")
        self.reservations: ResourceStore[Reservation] = ResourceStore("reservations")
        self.attendees: ResourceStore[Attendee] = ResourceStore("attendees")
        self.members: ResourceStore[Member] = ResourceStore("members")
        self.orders: ResourceStore[ActiveOrder] = ResourceStore("orders")
        self.menu_items: ResourceStore[MenuItem] = ResourceStore("menu_items")

        session.on_logout(self._handle_logout)

    @classmethod
    def create(
        cls,
        token: Optional[str] = None,
        settings: Optional[Settings] = None,
        http: Optional[httpx.AsyncClient] = None,
    ) -> "AppState":
        """Build a session, its API client and empty stores"""
        settings = settings or get_settings()
        session = AuthSession(token, login_path=settings.login_path)
        api = ClubApi(session, settings=settings, http=http)
        return cls(session, api)

    @property
    def stores(self) -> Dict[str, ResourceStore]:
        return {
            store.name: store
            for store in (
                self.rooms,
                self.tables,
                self.seats,
                self.reservations,
                self.attendees,
                self.members,
                self.orders,
                self.menu_items,
            )
        }

    def attendees_for(self, reservation_id: int) -> List[Attendee]:
        return self.attendees.filter(lambda a: a.reservation_id == reservation_id)

    def reset(self) -> None:
        """Drop every cached record"""
        for store in self.stores.values():
            store.clear()

    def _handle_logout(self, reason: str) -> None:
        logger.debug("Clearing application state", reason=reason)
        self.reset()

    async def close(self) -> None:
        """End of session: clear state and release the HTTP client"""
        self.reset()
        await self.api.close()
