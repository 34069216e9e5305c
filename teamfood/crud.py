from __future__ import annotations

from datetime import datetime, timezone
from typing import List

from sqlalchemy import func, update
from sqlmodel import Session, select

from .demo_data import DEMO_COUNTRIES, DEMO_PAYMENT_METHODS, DEMO_RESTAURANTS, DEMO_USERS
from .models import Country, MenuItem, Order, OrderItem, OrderStatus, PaymentMethod, Restaurant, User


# -------------------------
# User operations
# -------------------------

def list_users(session: Session) -> List[User]:
    statement = select(User).order_by(User.role.asc(), User.name.asc())
    return list(session.exec(statement))


def get_user(session: Session, user_id: int) -> User | None:
    return session.get(User, user_id)


# -------------------------
# Restaurant operations
# -------------------------

def list_restaurants(session: Session, *, country_id: int | None = None) -> List[Restaurant]:
    statement = select(Restaurant)
    if country_id is not None:
        statement = statement.where(Restaurant.country_id == country_id)
    statement = statement.order_by(Restaurant.rating.desc(), Restaurant.id.asc())
    return list(session.exec(statement))


def get_restaurant(session: Session, restaurant_id: int) -> Restaurant | None:
    return session.get(Restaurant, restaurant_id)


def list_menu_items(session: Session, restaurant_id: int, *, available_only: bool = False) -> List[MenuItem]:
    statement = select(MenuItem).where(MenuItem.restaurant_id == restaurant_id)
    if available_only:
        statement = statement.where(MenuItem.is_available.is_(True))
    statement = statement.order_by(MenuItem.category.asc(), MenuItem.name.asc())
    return list(session.exec(statement))


def get_menu_item(session: Session, menu_item_id: int) -> MenuItem | None:
    return session.get(MenuItem, menu_item_id)


# -------------------------
# Order operations
# -------------------------

def list_orders(
    session: Session,
    *,
    user_id: int | None = None,
    country_id: int | None = None,
) -> List[Order]:
    statement = select(Order)
    if country_id is not None:
        statement = statement.join(User, Order.user_id == User.id).where(User.country_id == country_id)
    if user_id is not None:
        statement = statement.where(Order.user_id == user_id)
    statement = statement.order_by(Order.created_at.desc(), Order.id.desc())
    return list(session.exec(statement))


def get_order(session: Session, order_id: int) -> Order | None:
    return session.get(Order, order_id)


def get_draft_order(session: Session, user_id: int, *, for_update: bool = False) -> Order | None:
    statement = select(Order).where(Order.user_id == user_id, Order.status == OrderStatus.DRAFT)
    if for_update:
        statement = statement.with_for_update()
    return session.exec(statement).first()


def recompute_order_total(session: Session, order: Order) -> float:
    """Write SUM(price * quantity) of the order's lines back onto the order.

    Pending line changes are flushed first so the aggregate runs inside the
    same transaction as the mutation; the caller commits once.
    """
    session.flush()
    total = session.exec(
        select(func.coalesce(func.sum(OrderItem.price * OrderItem.quantity), 0)).where(
            OrderItem.order_id == order.id
        )
    ).one()
    order.total = round(float(total or 0), 2)
    order.updated_at = datetime.now(timezone.utc)
    session.add(order)
    return order.total


def delete_order(session: Session, order: Order) -> None:
    session.delete(order)
    session.commit()


# -------------------------
# Payment method operations
# -------------------------

def list_payment_methods(session: Session, user_id: int) -> List[PaymentMethod]:
    statement = (
        select(PaymentMethod)
        .where(PaymentMethod.user_id == user_id)
        .order_by(PaymentMethod.is_default.desc(), PaymentMethod.id.asc())
    )
    return list(session.exec(statement))


def get_payment_method(session: Session, payment_method_id: int) -> PaymentMethod | None:
    return session.get(PaymentMethod, payment_method_id)


def get_default_payment_method(session: Session, user_id: int) -> PaymentMethod | None:
    statement = select(PaymentMethod).where(
        PaymentMethod.user_id == user_id,
        PaymentMethod.is_default.is_(True),
    )
    return session.exec(statement).first()


def _clear_default_payment_methods(session: Session, user_id: int) -> None:
    session.exec(
        update(PaymentMethod)
        .where(PaymentMethod.user_id == user_id, PaymentMethod.is_default.is_(True))
        .values(is_default=False)
    )


def create_payment_method(session: Session, user_id: int, data: dict) -> PaymentMethod:
    is_default = bool(data.get("is_default", False))
    if is_default:
        _clear_default_payment_methods(session, user_id)
    payment_method = PaymentMethod(
        user_id=user_id,
        type=data["type"],
        last_four=data["last_four"],
        is_default=is_default,
    )
    session.add(payment_method)
    session.commit()
    session.refresh(payment_method)
    return payment_method


def update_payment_method(session: Session, payment_method: PaymentMethod, updates: dict) -> PaymentMethod:
    if updates.get("is_default"):
        _clear_default_payment_methods(session, payment_method.user_id)
    for key, value in updates.items():
        if value is None:
            continue
        setattr(payment_method, key, value)
    session.add(payment_method)
    session.commit()
    session.refresh(payment_method)
    return payment_method


def delete_payment_method(session: Session, payment_method: PaymentMethod) -> None:
    # confirmed orders keep their history, only the reference goes
    session.exec(
        update(Order).where(Order.payment_method_id == payment_method.id).values(payment_method_id=None)
    )
    session.delete(payment_method)
    session.commit()


# -------------------------
# Demo data
# -------------------------

def ensure_demo_data(session: Session) -> None:
    existing_count = session.exec(select(func.count(Country.id))).one()
    if existing_count:
        return
    countries = {}
    for item in DEMO_COUNTRIES:
        country = Country(name=item["name"], code=item["code"])
        session.add(country)
        countries[item["code"]] = country
    session.flush()

    users = {}
    for item in DEMO_USERS:
        user = User(
            name=item["name"],
            email=item["email"],
            role=item["role"],
            country_id=countries[item["country"]].id,
        )
        session.add(user)
        users[item["email"]] = user
    session.flush()

    for item in DEMO_PAYMENT_METHODS:
        session.add(
            PaymentMethod(
                user_id=users[item["email"]].id,
                type=item["type"],
                last_four=item["last_four"],
                is_default=item["is_default"],
            )
        )

    for item in DEMO_RESTAURANTS:
        restaurant = Restaurant(
            name=item["name"],
            description=item["description"],
            image=item.get("image"),
            cuisine=item["cuisine"],
            rating=item["rating"],
            country_id=countries[item["country"]].id,
        )
        restaurant.menu_items = [MenuItem(**menu_item) for menu_item in item["menu_items"]]
        session.add(restaurant)
    session.commit()
