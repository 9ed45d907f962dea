"""Ordering dishes for the attendees of a seated reservation"""

from decimal import Decimal
from typing import Iterable, List, Optional, Sequence

import structlog

from clubtable.errors import ValidationError
from clubtable.schemas.order import MenuItem, Order, OrderCreate, OrderItemCreate
from clubtable.state import AppState

logger = structlog.get_logger()


class OrderCart:
    """Dishes picked for one attendee before the order is sent.

    Adding a dish already in the cart bumps its quantity; a quantity below
    one removes the line.
    """

    def __init__(self, attendee_id: int):
        self.attendee_id = attendee_id
        self._lines: List[OrderItemCreate] = []

    def __len__(self) -> int:
        return len(self._lines)

    @property
    def lines(self) -> List[OrderItemCreate]:
        return list(self._lines)

    def _index(self, menu_item_id: int) -> Optional[int]:
        return next(
            (i for i, line in enumerate(self._lines) if line.menu_item_id == menu_item_id),
            None,
        )

    def _replace(self, index: int, line: OrderItemCreate) -> None:
        self._lines = self._lines[:index] + [line] + self._lines[index + 1:]

    def add(self, item: MenuItem) -> None:
        if not item.is_available:
            raise ValidationError(f"{item.name} is not available")

        index = self._index(item.id)
        if index is None:
            self._lines = self._lines + [
                OrderItemCreate(menu_item_id=item.id, reservation_attendee_id=self.attendee_id)
            ]
            return
        line = self._lines[index]
        self._replace(index, line.model_copy(update={"quantity": line.quantity + 1}))

    def set_quantity(self, menu_item_id: int, quantity: int) -> None:
        if quantity < 1:
            self.remove(menu_item_id)
            return
        index = self._index(menu_item_id)
        if index is not None:
            self._replace(index, self._lines[index].model_copy(update={"quantity": quantity}))

    def set_instructions(self, menu_item_id: int, text: Optional[str]) -> None:
        index = self._index(menu_item_id)
        if index is not None:
            instructions = (text or "").strip() or None
            self._replace(
                index,
                self._lines[index].model_copy(update={"special_instructions": instructions}),
            )

    def remove(self, menu_item_id: int) -> None:
        self._lines = [line for line in self._lines if line.menu_item_id != menu_item_id]

    def clear(self) -> None:
        self._lines = []

    def total(self, menu: Iterable[MenuItem]) -> Decimal:
        prices = {item.id: item.price or Decimal("0") for item in menu}
        return sum(
            (prices.get(line.menu_item_id, Decimal("0")) * line.quantity for line in self._lines),
            Decimal("0"),
        )


class OrderPlacement:
    """Loads the menu and sends orders for a reservation's attendees"""

    def __init__(self, state: AppState):
        self.state = state
        self.api = state.api

    async def load_menu(self) -> List[MenuItem]:
        """Available dishes only"""
        items = await self.api.list_menu_items(available_only=True)
        self.state.menu_items.set_items(items)
        return items

    def _check(self, reservation_id: int, lines: Sequence[OrderItemCreate]) -> None:
        if not lines:
            raise ValidationError("Add at least one dish to the order")

        known = self.state.reservations.get(reservation_id)
        if known is not None and not known.is_active:
            raise ValidationError(f"Reservation {reservation_id} is cancelled")

        for line in lines:
            attendee = self.state.attendees.get(line.reservation_attendee_id)
            if attendee is not None and attendee.reservation_id not in (None, reservation_id):
                raise ValidationError(
                    f"Attendee {attendee.id} is not on reservation {reservation_id}"
                )

    async def place(
        self, reservation_id: int, lines: Sequence[OrderItemCreate]
    ) -> Optional[Order]:
        self._check(reservation_id, lines)

        order = await self.api.create_order(
            OrderCreate(reservation_id=reservation_id, items=list(lines))
        )
        logger.info(
            "Order placed",
            reservation_id=reservation_id,
            order_id=order.id if order else None,
            items=len(lines),
        )
        return order

    async def place_cart(self, reservation_id: int, cart: OrderCart) -> Optional[Order]:
        """Send one attendee's cart; the cart is emptied once the order is accepted"""
        order = await self.place(reservation_id, cart.lines)
        cart.clear()
        return order
