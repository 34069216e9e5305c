from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from .config import get_settings
from .models import Role, User

logger = logging.getLogger(__name__)


class SessionClaims(BaseModel):
    """Identity carried inside a session token."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    user_id: int
    email: str
    name: str
    role: Role
    country_id: int
    country_code: str


def claims_for_user(user: User) -> SessionClaims:
    return SessionClaims(
        user_id=user.id,
        email=user.email,
        name=user.name,
        role=user.role,
        country_id=user.country_id,
        country_code=user.country.code,
    )


def create_token(claims: SessionClaims, expires_delta: Optional[timedelta] = None) -> str:
    settings = get_settings()
    now = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(hours=settings.token_ttl_hours)
    to_encode = {
        **claims.model_dump(by_alias=True, mode="json"),
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str) -> Optional[SessionClaims]:
    """Return the claims of a valid token, or None for anything else."""
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
        return SessionClaims.model_validate(payload)
    except (JWTError, ValidationError, AttributeError) as exc:
        logger.debug("Rejected session token: %s", exc)
        return None
