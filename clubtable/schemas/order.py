"""Menu and kitchen order schemas"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field


class MenuItem(BaseModel):
    """Dish on the club menu"""
    id: int
    name: str
    description: Optional[str] = None
    price: Optional[Decimal] = None
    category: Optional[str] = None
    is_available: bool = True


class MenuItemRef(BaseModel):
    name: str


class OrderItem(BaseModel):
    """Dish on a ticket"""
    id: int
    quantity: int = 1
    menu_item: MenuItemRef
    special_instructions: Optional[str] = None


class OrderItemCreate(BaseModel):
    """One dish ordered for one attendee"""
    menu_item_id: int
    reservation_attendee_id: int
    quantity: int = Field(1, ge=1)
    special_instructions: Optional[str] = None


class OrderCreate(BaseModel):
    """Create order request"""
    reservation_id: int
    items: List[OrderItemCreate] = Field(..., min_length=1)


class GuestItems(BaseModel):
    """Dishes ordered by one attendee"""
    attendee_id: int
    name: str
    items: List[OrderItem] = []


class OrderTableRef(BaseModel):
    table_number: Optional[int] = None


class OrderReservationRef(BaseModel):
    id: Optional[int] = None
    fired_at: Optional[datetime] = None
    table: Optional[OrderTableRef] = None


class Order(BaseModel):
    """Order as returned by the backend"""
    id: int
    reservation_id: Optional[int] = None
    status: Optional[str] = None


class ActiveOrder(Order):
    """Order currently in the kitchen"""
    reservation: Optional[OrderReservationRef] = None
    items_by_guest: List[GuestItems] = []


class KitchenTicket(BaseModel):
    """Active order as shown on the kitchen display"""
    order_id: int
    table_number: Optional[int] = None
    wait_minutes: int = 0
    guests: List[GuestItems] = []
