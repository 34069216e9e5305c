import base64
import json
from datetime import timedelta

from jose import jwt

from teamfood.auth import SessionClaims, claims_for_user, create_token, verify_token
from teamfood.config import get_settings
from teamfood.models import Role


def _claims():
    return SessionClaims(
        user_id=7,
        email="thor@example.com",
        name="Thor",
        role=Role.MEMBER,
        country_id=1,
        country_code="IN",
    )


def _b64(data: dict) -> str:
    return base64.urlsafe_b64encode(json.dumps(data).encode()).rstrip(b"=").decode()


def test_token_round_trip():
    claims = _claims()
    assert verify_token(create_token(claims)) == claims


def test_token_uses_camel_case_claims_and_expiry():
    token = create_token(_claims())
    payload = jwt.get_unverified_claims(token)
    assert payload["userId"] == 7
    assert payload["countryCode"] == "IN"
    assert payload["role"] == "MEMBER"
    assert payload["exp"] - payload["iat"] == get_settings().token_ttl_hours * 3600


def test_expired_token_is_invalid():
    token = create_token(_claims(), expires_delta=timedelta(seconds=-5))
    assert verify_token(token) is None


def test_tampered_payload_is_invalid():
    token = create_token(_claims())
    header, _, signature = token.split(".")
    forged = jwt.get_unverified_claims(token)
    forged["role"] = "ADMIN"
    assert verify_token(".".join([header, _b64(forged), signature])) is None


def test_token_signed_with_another_secret_is_invalid():
    token = jwt.encode(_claims().model_dump(by_alias=True, mode="json"), "not-the-secret", algorithm="HS256")
    assert verify_token(token) is None


def test_token_missing_claims_is_invalid():
    settings = get_settings()
    token = jwt.encode({"userId": 7}, settings.jwt_secret, algorithm=settings.jwt_algorithm)
    assert verify_token(token) is None


def test_garbage_is_invalid():
    assert verify_token("not-a-token") is None
    assert verify_token("") is None


def test_claims_for_user(session, world):
    claims = claims_for_user(world.manager_in)
    assert claims.user_id == world.manager_in.id
    assert claims.role is Role.MANAGER
    assert claims.country_id == world.india.id
    assert claims.country_code == "IN"


# -------------------------
# HTTP
# -------------------------

def test_login_returns_token_and_user(client, world):
    response = client.post("/auth/login", json={"userId": world.member_in.id})
    assert response.status_code == 200
    body = response.json()
    assert body["user"]["email"] == "thanos@example.com"
    assert body["user"]["country"]["code"] == "IN"
    claims = verify_token(body["token"])
    assert claims.user_id == world.member_in.id
    assert claims.role is Role.MEMBER


def test_login_requires_user_id(client, world):
    response = client.post("/auth/login", json={})
    assert response.status_code == 400
    assert response.json() == {"error": "User ID is required"}


def test_login_unknown_user(client, world):
    response = client.post("/auth/login", json={"userId": 9999})
    assert response.status_code == 404
    assert response.json() == {"error": "User not found"}


def test_list_users_sorted_by_role_then_name(client, world):
    response = client.get("/auth/users")
    assert response.status_code == 200
    names = [user["name"] for user in response.json()]
    assert names == ["Nick Fury", "Captain America", "Captain Marvel", "Thanos", "Travis"]
    assert response.json()[0]["country"]["code"] == "US"


def test_me_lists_permissions(client, world, auth_headers):
    response = client.get("/auth/me", headers=auth_headers(world.manager_us))
    assert response.status_code == 200
    body = response.json()
    assert body["countryCode"] == "US"
    assert "CHECKOUT" in body["permissions"]
    assert "UPDATE_PAYMENT_METHOD" not in body["permissions"]


def test_missing_token_is_unauthorized(client, world):
    response = client.get("/orders")
    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}


def test_invalid_token_is_unauthorized(client, world):
    response = client.get("/orders", headers={"Authorization": "Bearer nope"})
    assert response.status_code == 401
    assert response.json() == {"error": "Invalid token"}


def test_expired_token_is_unauthorized(client, world):
    token = create_token(claims_for_user(world.admin), expires_delta=timedelta(seconds=-5))
    response = client.get("/restaurants", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
