"""
Core dependencies for client context resolution and route protection
"""

import logging
import uuid
from typing import Iterable

from fastapi import Depends, HTTPException, Request, Response, status

from storefront.config.settings import settings
from storefront.core.context import ContextRegistry, StorefrontContext, get_context_registry
from storefront.core.guards import (
    Guard, GuardResult, admin_guard, authenticated_guard, guest_guard, role_guard
)
from storefront.modules.auth.service import SessionManager
from storefront.modules.cart.service import CartService
from storefront.modules.users.schemas import Role, User
from storefront.modules.users.store import CredentialStore

logger = logging.getLogger(__name__)


def get_context(
    request: Request,
    response: Response,
    registry: ContextRegistry = Depends(get_context_registry),
) -> StorefrontContext:
    """Resolve the caller's context from the client cookie, issuing one on first contact."""
    client_id = request.cookies.get(settings.client_cookie_name)
    if not registry.is_valid_client_id(client_id):
        client_id = uuid.uuid4().hex
        response.set_cookie(
            settings.client_cookie_name,
            client_id,
            httponly=True,
            samesite="lax",
            secure=settings.is_production,
        )
    return registry.get(client_id)


def get_session(context: StorefrontContext = Depends(get_context)) -> SessionManager:
    return context.session


def get_cart(context: StorefrontContext = Depends(get_context)) -> CartService:
    return context.cart


def get_credentials(registry: ContextRegistry = Depends(get_context_registry)) -> CredentialStore:
    return registry.credentials


def guard_failure(result: GuardResult) -> HTTPException:
    """Map a failed guard to 401 (login needed) or 403 (anything else)."""
    detail = {
        "message": result.notice or ("Authentication required" if result.requires_login else "Not allowed"),
        "redirect_to": result.redirect_to,
        "query_params": result.query_params,
    }
    status_code = status.HTTP_401_UNAUTHORIZED if result.requires_login else status.HTTP_403_FORBIDDEN
    return HTTPException(status_code=status_code, detail=detail)


def _enforce(guard: Guard, request: Request, session: SessionManager) -> None:
    result = guard(session, request.url.path)
    if not result.allowed:
        raise guard_failure(result)


def require_authenticated(request: Request, session: SessionManager = Depends(get_session)) -> User:
    _enforce(authenticated_guard, request, session)
    user = session.get_current_user()
    if user is None:
        # Token is live but the account was deleted
        raise guard_failure(GuardResult(allowed=False, redirect_to="/login"))
    return user


def require_guest(request: Request, session: SessionManager = Depends(get_session)) -> None:
    _enforce(guest_guard, request, session)


def require_admin(request: Request, session: SessionManager = Depends(get_session)) -> User:
    _enforce(admin_guard, request, session)
    return session.get_current_user()


def require_roles(allowed_roles: Iterable[Role]):
    """Factory function to create role check dependency"""
    guard = role_guard(allowed_roles)

    def check_roles(request: Request, session: SessionManager = Depends(get_session)) -> User:
        _enforce(guard, request, session)
        return session.get_current_user()

    return check_roles
