import pytest
from sqlalchemy import func
from sqlmodel import select

from teamfood import crud, orders
from teamfood.auth import claims_for_user
from teamfood.demo_data import DEMO_RESTAURANTS, DEMO_USERS
from teamfood.models import Country, MenuItem, PaymentMethod, Restaurant, Role, User


def test_ensure_demo_data_seeds_once(session):
    crud.ensure_demo_data(session)
    crud.ensure_demo_data(session)

    assert session.exec(select(func.count(Country.id))).one() == 2
    assert session.exec(select(func.count(User.id))).one() == len(DEMO_USERS)
    assert session.exec(select(func.count(Restaurant.id))).one() == len(DEMO_RESTAURANTS)
    expected_items = sum(len(restaurant["menu_items"]) for restaurant in DEMO_RESTAURANTS)
    assert session.exec(select(func.count(MenuItem.id))).one() == expected_items


def test_demo_users_cover_every_role(session):
    crud.ensure_demo_data(session)
    roles = {user.role for user in crud.list_users(session)}
    assert roles == set(Role)


def test_demo_restaurants_are_split_by_country(session):
    crud.ensure_demo_data(session)
    india = session.exec(select(Country).where(Country.code == "IN")).one()
    names = {restaurant.name for restaurant in crud.list_restaurants(session, country_id=india.id)}
    assert names == {"Spice Garden", "Dosa Plaza", "Biryani House"}


def test_recompute_total_is_idempotent(session, world):
    order = orders.add_item(session, claims_for_user(world.member_in), world.curry.id, 3)
    first = crud.recompute_order_total(session, order)
    second = crud.recompute_order_total(session, order)
    assert first == second == pytest.approx(300)


def test_at_most_one_default_payment_method(session, world):
    crud.create_payment_method(session, world.admin.id, {"type": "UPI", "last_four": "1111", "is_default": True})
    crud.create_payment_method(session, world.admin.id, {"type": "UPI", "last_four": "2222", "is_default": True})

    defaults = session.exec(
        select(PaymentMethod).where(PaymentMethod.user_id == world.admin.id, PaymentMethod.is_default.is_(True))
    ).all()
    assert [method.last_four for method in defaults] == ["2222"]
    assert crud.get_default_payment_method(session, world.admin.id).last_four == "2222"


def test_new_default_leaves_other_users_alone(session, world):
    crud.create_payment_method(session, world.admin.id, {"type": "UPI", "last_four": "1111", "is_default": True})
    assert crud.get_default_payment_method(session, world.manager_in.id).id == world.marvel_upi.id
