"""Cart and order lifecycle.

A user's cart is their single DRAFT order. From there an order is either
confirmed through checkout or cancelled. PENDING and DELIVERED belong to a
fulfillment flow that nothing here drives.

Every function takes the caller's session claims and raises one of the
``errors`` exceptions when a permission, scope or state rule fails.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from . import crud
from .auth import SessionClaims
from .errors import Forbidden, InvalidState, NotFound, ValidationFailed
from .models import Order, OrderItem, OrderStatus, Role
from .notifier import notify_order_event
from .rbac import Permission, can_access_country, can_access_order, ensure_permission

logger = logging.getLogger(__name__)

CANCEL_BLOCKED_STATUSES = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED})


def _load_order(session: Session, order_id: int) -> Order:
    order = crud.get_order(session, order_id)
    if order is None:
        raise NotFound("Order not found")
    return order


# -------------------------
# Reads
# -------------------------

def get_cart(session: Session, claims: SessionClaims) -> Order | None:
    return crud.get_draft_order(session, claims.user_id)


def list_orders(session: Session, claims: SessionClaims) -> List[Order]:
    if claims.role == Role.ADMIN:
        return crud.list_orders(session)
    if claims.role == Role.MANAGER:
        return crud.list_orders(session, country_id=claims.country_id)
    return crud.list_orders(session, user_id=claims.user_id)


def get_order(session: Session, claims: SessionClaims, order_id: int) -> Order:
    order = _load_order(session, order_id)
    if not can_access_order(
        claims.role,
        claims.user_id,
        order.user_id,
        claims.country_id,
        order.user.country_id,
    ):
        raise Forbidden("Access denied")
    return order


# -------------------------
# Cart mutations
# -------------------------

def _get_or_create_draft(session: Session, claims: SessionClaims) -> Order:
    order = crud.get_draft_order(session, claims.user_id, for_update=True)
    if order is not None:
        return order
    order = Order(user_id=claims.user_id, status=OrderStatus.DRAFT, total=0)
    session.add(order)
    try:
        session.flush()
    except IntegrityError:
        # another request created the draft first
        session.rollback()
        order = crud.get_draft_order(session, claims.user_id, for_update=True)
        if order is None:
            raise
        return order
    logger.info("Created draft order %s for user %s", order.id, claims.user_id)
    return order


def add_item(session: Session, claims: SessionClaims, menu_item_id: int, quantity: int = 1) -> Order:
    """Put ``quantity`` of a menu item into the caller's cart.

    The cart is created on first use. Adding an item that is already in the
    cart sums the quantities on the existing line; the line keeps the price
    captured when it was first added.
    """
    ensure_permission(claims.role, Permission.CREATE_ORDER, "Permission denied - you cannot create orders")
    ensure_permission(claims.role, Permission.ADD_ITEMS, "Permission denied - you cannot add items to orders")
    if quantity is None or quantity <= 0:
        raise ValidationFailed("Quantity must be greater than zero")

    menu_item = crud.get_menu_item(session, menu_item_id)
    if menu_item is None:
        raise NotFound("Menu item not found")
    if not can_access_country(claims.role, claims.country_id, menu_item.restaurant.country_id):
        raise Forbidden("Access denied - this item is not available in your region")
    if not menu_item.is_available:
        raise InvalidState("Menu item is currently unavailable")

    order = _get_or_create_draft(session, claims)
    line = next((item for item in order.items if item.menu_item_id == menu_item.id), None)
    if line is not None:
        line.quantity += quantity
        session.add(line)
    else:
        order.items.append(
            OrderItem(menu_item_id=menu_item.id, quantity=quantity, price=menu_item.price)
        )
    crud.recompute_order_total(session, order)
    session.commit()
    session.refresh(order)
    return order


def update_item_quantity(
    session: Session,
    claims: SessionClaims,
    order_id: int,
    item_id: int,
    quantity: int,
) -> Order:
    """Set a cart line's quantity; zero or less removes the line."""
    order = _load_order(session, order_id)
    if order.user_id != claims.user_id:
        raise Forbidden("Access denied - only the order owner can modify it")
    if order.status != OrderStatus.DRAFT:
        raise InvalidState("Cannot modify order - not in draft status")

    line = next((item for item in order.items if item.id == item_id), None)
    if line is None:
        raise NotFound("Order item not found")
    if quantity <= 0:
        order.items.remove(line)
    else:
        line.quantity = quantity
        session.add(line)
    crud.recompute_order_total(session, order)
    session.commit()
    session.refresh(order)
    return order


def clear_cart(session: Session, claims: SessionClaims) -> bool:
    order = crud.get_draft_order(session, claims.user_id)
    if order is None:
        return False
    crud.delete_order(session, order)
    logger.info("Cleared cart of user %s", claims.user_id)
    return True


# -------------------------
# Transitions
# -------------------------

def _resolve_payment_method(session: Session, claims: SessionClaims, order: Order, payment_method_id: int | None):
    if payment_method_id is not None:
        payment_method = crud.get_payment_method(session, payment_method_id)
        if payment_method is None or payment_method.user_id not in (order.user_id, claims.user_id):
            raise NotFound("Payment method not found")
        return payment_method
    payment_method = crud.get_default_payment_method(session, order.user_id)
    if payment_method is None:
        raise InvalidState("No payment method available")
    return payment_method


def checkout(
    session: Session,
    claims: SessionClaims,
    order_id: int,
    payment_method_id: int | None = None,
) -> Order:
    """Confirm a draft order. Payment is simulated; nothing is charged."""
    ensure_permission(
        claims.role,
        Permission.CHECKOUT,
        "Permission denied - only Admins and Managers can checkout orders",
    )
    order = _load_order(session, order_id)
    if not can_access_order(
        claims.role,
        claims.user_id,
        order.user_id,
        claims.country_id,
        order.user.country_id,
    ):
        if claims.role == Role.MANAGER:
            raise Forbidden("Access denied - order is not in your region")
        raise Forbidden("Access denied")
    if order.status != OrderStatus.DRAFT:
        raise InvalidState("Order already submitted or cancelled")
    if not order.items:
        raise InvalidState("Cannot checkout empty order")

    payment_method = _resolve_payment_method(session, claims, order, payment_method_id)
    order.status = OrderStatus.CONFIRMED
    order.payment_method_id = payment_method.id
    order.updated_at = datetime.now(timezone.utc)
    session.add(order)
    session.commit()
    session.refresh(order)
    logger.info("Order %s confirmed by user %s (total %.2f)", order.id, claims.user_id, order.total)
    notify_order_event(order, "confirmed")
    return order


def cancel_order(session: Session, claims: SessionClaims, order_id: int) -> Order:
    ensure_permission(
        claims.role,
        Permission.CANCEL_ORDER,
        "Permission denied - only Admins and Managers can cancel orders",
    )
    order = _load_order(session, order_id)
    if not can_access_country(claims.role, claims.country_id, order.user.country_id):
        raise Forbidden("Access denied - order is not in your region")
    if order.status in CANCEL_BLOCKED_STATUSES:
        raise InvalidState("Cannot cancel - order is already delivered or cancelled")

    order.status = OrderStatus.CANCELLED
    order.updated_at = datetime.now(timezone.utc)
    session.add(order)
    session.commit()
    session.refresh(order)
    logger.info("Order %s cancelled by user %s", order.id, claims.user_id)
    notify_order_event(order, "cancelled")
    return order
