from __future__ import annotations

import logging
from typing import Annotated, List, Optional

from fastapi import Depends, FastAPI, Query, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel import Session

from . import crud, orders, schemas
from .auth import SessionClaims, claims_for_user, create_token, verify_token
from .config import get_settings
from .database import engine, get_session, init_db
from .errors import AppError, Forbidden, NotFound, Unauthenticated, ValidationFailed
from .models import Order, Role
from .rbac import Permission, can_access_country, ensure_permission, get_permissions

logger = logging.getLogger(__name__)

app = FastAPI(title="Team Food Orders", version="0.1.0")
settings = get_settings()

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def on_startup() -> None:
    logging.basicConfig(level=settings.log_level)
    init_db()
    if settings.seed_demo_data:
        with Session(engine) as session:
            crud.ensure_demo_data(session)


# -------------------------
# Error handling
# -------------------------

@app.exception_handler(AppError)
def handle_app_error(request: Request, exc: AppError) -> JSONResponse:
    if isinstance(exc, Forbidden):
        logger.warning("Forbidden %s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request", "details": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(Exception)
def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


# -------------------------
# Authentication
# -------------------------

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_claims(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)] = None,
) -> SessionClaims:
    if credentials is None:
        raise Unauthenticated("Unauthorized")
    claims = verify_token(credentials.credentials)
    if claims is None:
        raise Unauthenticated("Invalid token")
    return claims


CurrentClaims = Annotated[SessionClaims, Depends(get_current_claims)]


def require_permission(permission: Permission, message: str):
    def dependency(claims: CurrentClaims) -> SessionClaims:
        ensure_permission(claims.role, permission, message)
        return claims

    return dependency


PaymentAdmin = Annotated[
    SessionClaims,
    Depends(
        require_permission(
            Permission.UPDATE_PAYMENT_METHOD,
            "Permission denied - only Admins can manage payment methods",
        )
    ),
]


@app.get("/health")
def health_check() -> dict:
    return {"status": "ok"}


@app.post("/auth/login", response_model=schemas.LoginResponse)
def login(
    payload: schemas.LoginRequest,
    session: Session = Depends(get_session),
):
    if payload.user_id is None:
        raise ValidationFailed("User ID is required")
    user = crud.get_user(session, payload.user_id)
    if not user:
        raise NotFound("User not found")
    token = create_token(claims_for_user(user))
    logger.info("User %s logged in as %s", user.id, user.role.value)
    return schemas.LoginResponse(token=token, user=schemas.UserRead.model_validate(user))


@app.get("/auth/users", response_model=List[schemas.UserRead])
def list_users(session: Session = Depends(get_session)):
    return [schemas.UserRead.model_validate(user) for user in crud.list_users(session)]


@app.get("/auth/me", response_model=schemas.SessionUser)
def current_user(claims: CurrentClaims):
    return schemas.SessionUser(
        id=claims.user_id,
        name=claims.name,
        email=claims.email,
        role=claims.role,
        country_id=claims.country_id,
        country_code=claims.country_code,
        permissions=get_permissions(claims.role),
    )


# -------------------------
# Restaurants
# -------------------------

@app.get("/restaurants", response_model=List[schemas.RestaurantSummary])
def list_restaurants(
    claims: CurrentClaims,
    session: Session = Depends(get_session),
):
    ensure_permission(claims.role, Permission.VIEW_RESTAURANTS, "Permission denied - you cannot view restaurants")
    country_id = None if claims.role == Role.ADMIN else claims.country_id
    restaurants = crud.list_restaurants(session, country_id=country_id)
    return [schemas.RestaurantSummary.model_validate(restaurant) for restaurant in restaurants]


@app.get("/restaurants/{restaurant_id}", response_model=schemas.RestaurantDetail)
def get_restaurant(
    restaurant_id: int,
    claims: CurrentClaims,
    session: Session = Depends(get_session),
):
    ensure_permission(claims.role, Permission.VIEW_MENU, "Permission denied - you cannot view menus")
    restaurant = crud.get_restaurant(session, restaurant_id)
    if not restaurant:
        raise NotFound("Restaurant not found")
    if not can_access_country(claims.role, claims.country_id, restaurant.country_id):
        raise Forbidden("Access denied - this restaurant is not in your region")
    menu_items = crud.list_menu_items(session, restaurant.id, available_only=True)
    return schemas.RestaurantDetail(
        id=restaurant.id,
        name=restaurant.name,
        description=restaurant.description,
        image=restaurant.image,
        cuisine=restaurant.cuisine,
        rating=restaurant.rating,
        country=schemas.CountryRead.model_validate(restaurant.country),
        menu_items=[schemas.MenuItemRead.model_validate(item) for item in menu_items],
    )


# -------------------------
# Cart
# -------------------------

def _cart_view(order: Order | None) -> schemas.CartRead:
    if order is None:
        return schemas.CartRead()
    return schemas.CartRead(
        id=order.id,
        items=[schemas.OrderItemRead.model_validate(item) for item in order.items],
        total=order.total,
        item_count=sum(item.quantity for item in order.items),
    )


@app.get("/cart", response_model=schemas.CartRead)
def get_cart(
    claims: CurrentClaims,
    session: Session = Depends(get_session),
):
    return _cart_view(orders.get_cart(session, claims))


@app.delete("/cart", response_model=schemas.MessageResponse)
def clear_cart(
    claims: CurrentClaims,
    session: Session = Depends(get_session),
):
    orders.clear_cart(session, claims)
    return schemas.MessageResponse(message="Cart cleared")


# -------------------------
# Orders
# -------------------------

@app.get("/orders", response_model=List[schemas.OrderRead])
def list_orders(
    claims: CurrentClaims,
    session: Session = Depends(get_session),
):
    return [schemas.OrderRead.model_validate(order) for order in orders.list_orders(session, claims)]


@app.post("/orders", response_model=schemas.OrderRead)
def add_to_cart(
    payload: schemas.AddItemRequest,
    claims: CurrentClaims,
    session: Session = Depends(get_session),
):
    if payload.menu_item_id is None:
        raise ValidationFailed("Menu item ID is required")
    order = orders.add_item(session, claims, payload.menu_item_id, payload.quantity)
    return schemas.OrderRead.model_validate(order)


@app.get("/orders/{order_id}", response_model=schemas.OrderRead)
def get_order(
    order_id: int,
    claims: CurrentClaims,
    session: Session = Depends(get_session),
):
    return schemas.OrderRead.model_validate(orders.get_order(session, claims, order_id))


@app.put("/orders/{order_id}", response_model=schemas.OrderRead)
def update_order_item(
    order_id: int,
    payload: schemas.UpdateItemRequest,
    claims: CurrentClaims,
    session: Session = Depends(get_session),
):
    order = orders.update_item_quantity(session, claims, order_id, payload.item_id, payload.quantity)
    return schemas.OrderRead.model_validate(order)


@app.delete("/orders/{order_id}", response_model=schemas.MessageResponse)
def cancel_order(
    order_id: int,
    claims: CurrentClaims,
    session: Session = Depends(get_session),
):
    orders.cancel_order(session, claims, order_id)
    return schemas.MessageResponse(message="Order cancelled successfully")


@app.post("/orders/{order_id}/checkout", response_model=schemas.CheckoutResponse)
def checkout_order(
    order_id: int,
    claims: CurrentClaims,
    payload: Optional[schemas.CheckoutRequest] = None,
    session: Session = Depends(get_session),
):
    payment_method_id = payload.payment_method_id if payload else None
    order = orders.checkout(session, claims, order_id, payment_method_id)
    return schemas.CheckoutResponse(
        message="Order placed successfully",
        order=schemas.OrderRead.model_validate(order),
    )


# -------------------------
# Payment methods
# -------------------------

@app.get("/payment-methods", response_model=List[schemas.PaymentMethodRead])
def list_payment_methods(
    claims: CurrentClaims,
    session: Session = Depends(get_session),
):
    return [
        schemas.PaymentMethodRead.model_validate(payment_method)
        for payment_method in crud.list_payment_methods(session, claims.user_id)
    ]


@app.post("/payment-methods", response_model=schemas.PaymentMethodRead, status_code=status.HTTP_201_CREATED)
def create_payment_method(
    payload: schemas.PaymentMethodCreate,
    claims: PaymentAdmin,
    session: Session = Depends(get_session),
):
    payment_method = crud.create_payment_method(session, claims.user_id, payload.model_dump())
    return schemas.PaymentMethodRead.model_validate(payment_method)


@app.put("/payment-methods", response_model=schemas.PaymentMethodRead)
def update_payment_method(
    payload: schemas.PaymentMethodUpdate,
    claims: PaymentAdmin,
    session: Session = Depends(get_session),
):
    payment_method = _owned_payment_method(session, claims, payload.id)
    updates = payload.model_dump(exclude_unset=True, exclude={"id"})
    return schemas.PaymentMethodRead.model_validate(crud.update_payment_method(session, payment_method, updates))


@app.delete("/payment-methods", response_model=schemas.MessageResponse)
def delete_payment_method(
    claims: PaymentAdmin,
    payment_method_id: Annotated[Optional[int], Query(alias="id")] = None,
    session: Session = Depends(get_session),
):
    if payment_method_id is None:
        raise ValidationFailed("Payment method ID is required")
    payment_method = _owned_payment_method(session, claims, payment_method_id)
    crud.delete_payment_method(session, payment_method)
    return schemas.MessageResponse(message="Payment method deleted successfully")


def _owned_payment_method(session: Session, claims: SessionClaims, payment_method_id: int):
    payment_method = crud.get_payment_method(session, payment_method_id)
    if not payment_method or payment_method.user_id != claims.user_id:
        raise NotFound("Payment method not found")
    return payment_method
