"""Kitchen display and ordering endpoints"""

from typing import List, Optional

from fastapi import APIRouter, Depends

from clubtable.api.deps import get_state
from clubtable.ops.kitchen import KitchenDisplay
from clubtable.ops.orders import OrderPlacement
from clubtable.schemas.order import KitchenTicket, MenuItem, Order, OrderCreate
from clubtable.state import AppState

router = APIRouter()


@router.get("/menu", response_model=List[MenuItem])
async def menu(state: AppState = Depends(get_state)):
    """Dishes that can be ordered right now"""
    return await OrderPlacement(state).load_menu()


@router.get("/orders", response_model=List[KitchenTicket])
async def active_orders(state: AppState = Depends(get_state)):
    """Active orders with time since firing"""
    display = KitchenDisplay(state)
    await display.refresh()
    return display.tickets()


@router.post("/orders", response_model=Optional[Order], status_code=201)
async def place_order(order: OrderCreate, state: AppState = Depends(get_state)):
    """Order dishes for attendees of a reservation"""
    return await OrderPlacement(state).place(order.reservation_id, order.items)
