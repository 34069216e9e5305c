"""Role based access rules.

Permissions are a fixed table keyed by role. ADMIN holds every action,
MANAGER everything except payment method management, MEMBER can only
browse and fill a cart. Country scoping is layered on top: only ADMIN
sees across countries.
"""
from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import List, Mapping, Optional, Type, TypeVar

from .errors import Forbidden
from .models import Role


E = TypeVar("E", bound=Enum)


class Permission(str, Enum):
    VIEW_RESTAURANTS = "VIEW_RESTAURANTS"
    VIEW_MENU = "VIEW_MENU"
    CREATE_ORDER = "CREATE_ORDER"
    ADD_ITEMS = "ADD_ITEMS"
    CHECKOUT = "CHECKOUT"
    CANCEL_ORDER = "CANCEL_ORDER"
    UPDATE_PAYMENT_METHOD = "UPDATE_PAYMENT_METHOD"


_MEMBER_PERMISSIONS = frozenset(
    {
        Permission.VIEW_RESTAURANTS,
        Permission.VIEW_MENU,
        Permission.CREATE_ORDER,
        Permission.ADD_ITEMS,
    }
)
_MANAGER_PERMISSIONS = _MEMBER_PERMISSIONS | {Permission.CHECKOUT, Permission.CANCEL_ORDER}
_ADMIN_PERMISSIONS = _MANAGER_PERMISSIONS | {Permission.UPDATE_PAYMENT_METHOD}

ROLE_PERMISSIONS: Mapping[Role, frozenset[Permission]] = MappingProxyType(
    {
        Role.ADMIN: _ADMIN_PERMISSIONS,
        Role.MANAGER: _MANAGER_PERMISSIONS,
        Role.MEMBER: _MEMBER_PERMISSIONS,
    }
)


def _coerce(enum_cls: Type[E], value: object) -> Optional[E]:
    try:
        return enum_cls(value)
    except (TypeError, ValueError):
        return None


def has_permission(role: Role | str, action: Permission | str) -> bool:
    role = _coerce(Role, role)
    action = _coerce(Permission, action)
    if role is None or action is None:
        return False
    return action in ROLE_PERMISSIONS.get(role, frozenset())


def get_permissions(role: Role | str) -> List[Permission]:
    role = _coerce(Role, role)
    if role is None:
        return []
    # keep declaration order so clients get a stable list
    return [permission for permission in Permission if permission in ROLE_PERMISSIONS[role]]


def ensure_permission(role: Role | str, action: Permission | str, message: str) -> None:
    if not has_permission(role, action):
        raise Forbidden(message)


def can_access_country(role: Role | str, user_country_id: int, target_country_id: int) -> bool:
    if _coerce(Role, role) is Role.ADMIN:
        return True
    return user_country_id == target_country_id


def can_access_order(
    role: Role | str,
    user_id: int,
    order_user_id: int,
    user_country_id: int,
    order_country_id: int,
) -> bool:
    role = _coerce(Role, role)
    if role is Role.ADMIN:
        return True
    if role is Role.MANAGER and user_country_id == order_country_id:
        return True
    return user_id == order_user_id
