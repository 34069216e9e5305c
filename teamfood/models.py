from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from sqlalchemy import Index, UniqueConstraint, text
from sqlmodel import Field, Relationship, SQLModel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Role(str, Enum):
    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    MEMBER = "MEMBER"


class OrderStatus(str, Enum):
    DRAFT = "DRAFT"
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    DELIVERED = "DELIVERED"


class Country(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    code: str = Field(index=True, sa_column_kwargs={"unique": True})

    users: List["User"] = Relationship(back_populates="country")
    restaurants: List["Restaurant"] = Relationship(back_populates="country")


class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    email: str = Field(index=True, sa_column_kwargs={"unique": True})
    role: Role = Field(default=Role.MEMBER, index=True)
    country_id: int = Field(foreign_key="country.id", index=True)
    created_at: datetime = Field(default_factory=_utcnow)

    country: Country = Relationship(back_populates="users")
    orders: List["Order"] = Relationship(back_populates="user")
    payment_methods: List["PaymentMethod"] = Relationship(
        back_populates="user", sa_relationship_kwargs={"cascade": "all, delete-orphan"}
    )


class Restaurant(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    description: Optional[str] = None
    image: Optional[str] = None
    cuisine: str
    rating: float = Field(default=0, ge=0, le=5, index=True)
    country_id: int = Field(foreign_key="country.id", index=True)
    created_at: datetime = Field(default_factory=_utcnow)

    country: Country = Relationship(back_populates="restaurants")
    menu_items: List["MenuItem"] = Relationship(
        back_populates="restaurant", sa_relationship_kwargs={"cascade": "all, delete-orphan"}
    )

    @property
    def menu_item_count(self) -> int:
        return len(self.menu_items)


class MenuItem(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    description: Optional[str] = None
    price: float = Field(gt=0)
    image: Optional[str] = None
    category: str = Field(index=True)
    is_vegetarian: bool = False
    is_available: bool = Field(default=True, index=True)
    restaurant_id: int = Field(foreign_key="restaurant.id", index=True)
    created_at: datetime = Field(default_factory=_utcnow)

    restaurant: Restaurant = Relationship(back_populates="menu_items")


class PaymentMethod(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    type: str
    last_four: str = Field(min_length=4, max_length=4)
    is_default: bool = Field(default=False, index=True)
    created_at: datetime = Field(default_factory=_utcnow)

    user: User = Relationship(back_populates="payment_methods")


class Order(SQLModel, table=True):
    __tablename__ = "orders"
    # a user's cart is the one order left in DRAFT
    __table_args__ = (
        Index(
            "ix_orders_one_draft_per_user",
            "user_id",
            unique=True,
            sqlite_where=text("status = 'DRAFT'"),
            postgresql_where=text("status = 'DRAFT'"),
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    status: OrderStatus = Field(default=OrderStatus.DRAFT, index=True)
    total: float = Field(default=0, ge=0)
    payment_method_id: Optional[int] = Field(default=None, foreign_key="paymentmethod.id")
    created_at: datetime = Field(default_factory=_utcnow, index=True)
    updated_at: datetime = Field(default_factory=_utcnow)

    user: User = Relationship(back_populates="orders")
    items: List["OrderItem"] = Relationship(
        back_populates="order", sa_relationship_kwargs={"cascade": "all, delete-orphan"}
    )
    payment_method: Optional[PaymentMethod] = Relationship()


class OrderItem(SQLModel, table=True):
    __table_args__ = (UniqueConstraint("order_id", "menu_item_id", name="uq_orderitem_order_menu_item"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    order_id: int = Field(foreign_key="orders.id", index=True)
    menu_item_id: int = Field(foreign_key="menuitem.id", index=True)
    quantity: int = Field(default=1, gt=0)
    price: float = Field(gt=0)

    order: Order = Relationship(back_populates="items")
    menu_item: MenuItem = Relationship()

    @property
    def subtotal(self) -> float:
        return self.price * self.quantity


__all__ = ["Country", "MenuItem", "Order", "OrderItem", "OrderStatus", "PaymentMethod", "Role", "User"]
