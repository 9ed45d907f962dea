"""Kitchen display of active orders"""

from datetime import datetime
from typing import List, Optional

from clubtable.config import Settings, get_settings
from clubtable.schemas.order import KitchenTicket
from clubtable.state import AppState
from clubtable.tasks.periodic import PeriodicTask


def wait_minutes(fired_at: Optional[datetime], now: Optional[datetime] = None) -> int:
    """Whole minutes since the ticket was fired"""
    if fired_at is None:
        return 0
    current = now or datetime.now(fired_at.tzinfo)
    return max(0, int((current - fired_at).total_seconds() // 60))


class KitchenDisplay:
    """Active orders grouped by guest, refreshed on a timer"""

    def __init__(self, state: AppState, settings: Optional[Settings] = None):
        self.state = state
        self.settings = settings or get_settings()
        self._poller = PeriodicTask(
            self.refresh,
            self.settings.kitchen_poll_seconds,
            name="kitchen-display",
        )

    async def refresh(self) -> None:
        self.state.orders.set_items(await self.state.api.list_active_orders())

    def live(self) -> PeriodicTask:
        return self._poller

    def tickets(self, now: Optional[datetime] = None) -> List[KitchenTicket]:
        tickets = []
        for order in self.state.orders:
            reservation = order.reservation
            table = reservation.table if reservation else None
            tickets.append(
                KitchenTicket(
                    order_id=order.id,
                    table_number=table.table_number if table else None,
                    wait_minutes=wait_minutes(reservation.fired_at if reservation else None, now),
                    guests=order.items_by_guest,
                )
            )
        return tickets
