from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .models import OrderStatus, Role
from .rbac import Permission


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# -------------------------
# Auth
# -------------------------

class CountryRead(ApiModel):
    id: int
    name: str
    code: str


class UserRead(ApiModel):
    id: int
    name: str
    email: str
    role: Role
    country: CountryRead


class LoginRequest(ApiModel):
    user_id: Optional[int] = None


class LoginResponse(ApiModel):
    token: str
    user: UserRead


class SessionUser(ApiModel):
    id: int
    name: str
    email: str
    role: Role
    country_id: int
    country_code: str
    permissions: List[Permission]


# -------------------------
# Restaurants
# -------------------------

class RestaurantSummary(ApiModel):
    id: int
    name: str
    description: Optional[str] = None
    image: Optional[str] = None
    cuisine: str
    rating: float
    country: CountryRead
    menu_item_count: int


class MenuItemRead(ApiModel):
    id: int
    name: str
    description: Optional[str] = None
    price: float
    image: Optional[str] = None
    category: str
    is_vegetarian: bool


class RestaurantDetail(ApiModel):
    id: int
    name: str
    description: Optional[str] = None
    image: Optional[str] = None
    cuisine: str
    rating: float
    country: CountryRead
    menu_items: List[MenuItemRead]


# -------------------------
# Orders & cart
# -------------------------

class RestaurantBrief(ApiModel):
    id: int
    name: str
    image: Optional[str] = None


class OrderMenuItem(ApiModel):
    id: int
    name: str
    description: Optional[str] = None
    image: Optional[str] = None
    restaurant: RestaurantBrief


class OrderItemRead(ApiModel):
    id: int
    quantity: int
    price: float
    subtotal: float
    menu_item: OrderMenuItem


class OrderUser(ApiModel):
    id: int
    name: str
    country: CountryRead


class PaymentMethodBrief(ApiModel):
    id: int
    type: str
    last_four: str


class OrderRead(ApiModel):
    id: int
    status: OrderStatus
    total: float
    created_at: datetime
    user: OrderUser
    items: List[OrderItemRead]
    payment_method: Optional[PaymentMethodBrief] = None


class CartRead(ApiModel):
    id: Optional[int] = None
    items: List[OrderItemRead] = Field(default_factory=list)
    total: float = 0
    item_count: int = 0


class AddItemRequest(ApiModel):
    menu_item_id: Optional[int] = None
    quantity: int = 1


class UpdateItemRequest(ApiModel):
    item_id: int
    quantity: int


class CheckoutRequest(ApiModel):
    payment_method_id: Optional[int] = None


class CheckoutResponse(ApiModel):
    message: str
    order: OrderRead


class MessageResponse(ApiModel):
    message: str


# -------------------------
# Payment methods
# -------------------------

LAST_FOUR_PATTERN = r"^\d{4}$"


class PaymentMethodRead(ApiModel):
    id: int
    type: str
    last_four: str
    is_default: bool


class PaymentMethodCreate(ApiModel):
    type: str = Field(min_length=1)
    last_four: str = Field(pattern=LAST_FOUR_PATTERN)
    is_default: bool = False


class PaymentMethodUpdate(ApiModel):
    id: int
    type: Optional[str] = Field(default=None, min_length=1)
    last_four: Optional[str] = Field(default=None, pattern=LAST_FOUR_PATTERN)
    is_default: Optional[bool] = None
