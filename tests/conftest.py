from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel

from teamfood.auth import claims_for_user, create_token
from teamfood.database import build_engine, get_session, init_db
from teamfood.main import app
from teamfood.models import Country, MenuItem, PaymentMethod, Restaurant, Role, User


@pytest.fixture
def engine():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    init_db(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def world(session):
    """Two countries, one user per role and country, two restaurants."""
    india = Country(name="India", code="IN")
    america = Country(name="America", code="US")
    session.add_all([india, america])
    session.flush()

    admin = User(name="Nick Fury", email="nick@example.com", role=Role.ADMIN, country_id=america.id)
    manager_in = User(name="Captain Marvel", email="marvel@example.com", role=Role.MANAGER, country_id=india.id)
    manager_us = User(name="Captain America", email="steve@example.com", role=Role.MANAGER, country_id=america.id)
    member_in = User(name="Thanos", email="thanos@example.com", role=Role.MEMBER, country_id=india.id)
    member_us = User(name="Travis", email="travis@example.com", role=Role.MEMBER, country_id=america.id)
    session.add_all([admin, manager_in, manager_us, member_in, member_us])
    session.flush()

    spice_garden = Restaurant(
        name="Spice Garden", cuisine="North Indian", rating=4.5, country_id=india.id
    )
    burger_barn = Restaurant(
        name="Burger Barn", cuisine="American", rating=4.4, country_id=america.id
    )
    session.add_all([spice_garden, burger_barn])
    session.flush()

    curry = MenuItem(name="Butter Chicken", price=100, category="Main Course", restaurant_id=spice_garden.id)
    naan = MenuItem(
        name="Garlic Naan", price=50, category="Breads", is_vegetarian=True, restaurant_id=spice_garden.id
    )
    sold_out = MenuItem(
        name="Mutton Biryani", price=380, category="Biryani", is_available=False, restaurant_id=spice_garden.id
    )
    burger = MenuItem(name="Classic Cheeseburger", price=12.5, category="Burgers", restaurant_id=burger_barn.id)
    session.add_all([curry, naan, sold_out, burger])

    admin_card = PaymentMethod(user_id=admin.id, type="CREDIT_CARD", last_four="4242", is_default=True)
    marvel_upi = PaymentMethod(user_id=manager_in.id, type="UPI", last_four="9876", is_default=True)
    steve_card = PaymentMethod(user_id=manager_us.id, type="DEBIT_CARD", last_four="1234", is_default=True)
    session.add_all([admin_card, marvel_upi, steve_card])
    session.commit()

    return SimpleNamespace(
        india=india,
        america=america,
        admin=admin,
        manager_in=manager_in,
        manager_us=manager_us,
        member_in=member_in,
        member_us=member_us,
        spice_garden=spice_garden,
        burger_barn=burger_barn,
        curry=curry,
        naan=naan,
        sold_out=sold_out,
        burger=burger,
        admin_card=admin_card,
        marvel_upi=marvel_upi,
        steve_card=steve_card,
    )


@pytest.fixture
def client(session):
    def override_get_session():
        return session

    app.dependency_overrides[get_session] = override_get_session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def build(user: User) -> dict:
        return {"Authorization": f"Bearer {create_token(claims_for_user(user))}"}

    return build
