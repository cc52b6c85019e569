"""FastAPI dependencies: settings, unit of work and the caller's session.

Sessions come from two headers. ``Authorization: Bearer <admin_token>``
yields the ADMIN session; ``X-User-Id`` identifies a signed-in customer.
Anything else is a guest.
"""

from __future__ import annotations

import hmac
from dataclasses import dataclass

from fastapi import Depends, Header, Request

from storefront.domain.exceptions import AuthorizationError
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.infrastructure.bootstrap import unit_of_work
from storefront.infrastructure.settings import Settings

ADMIN_ACTOR = "admin"


@dataclass(frozen=True)
class Session:
    user_id: str
    is_admin: bool = False


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_uow(settings: Settings = Depends(get_settings)) -> UnitOfWork:
    return unit_of_work(settings)


def current_session(
    settings: Settings = Depends(get_settings),
    authorization: str | None = Header(default=None),
    x_user_id: str | None = Header(default=None),
) -> Session | None:
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization[7:].strip()
        if settings.admin_token and hmac.compare_digest(token, settings.admin_token):
            return Session(user_id=ADMIN_ACTOR, is_admin=True)
    if x_user_id:
        return Session(user_id=x_user_id)
    return None


def require_admin(session: Session | None = Depends(current_session)) -> Session:
    if session is None:
        raise AuthorizationError("Authentication required")
    if not session.is_admin:
        raise AuthorizationError("Admin access required", authenticated=True)
    return session


def require_user(session: Session | None = Depends(current_session)) -> Session:
    if session is None:
        raise AuthorizationError("Authentication required")
    return session
