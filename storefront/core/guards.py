"""
Navigation guards.

A guard is a pure predicate over the current session state. It is evaluated fresh
on every navigation attempt and either lets the transition through or names where
to redirect instead.
"""
import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, Optional, Protocol

from storefront.modules.users.schemas import Role, User

logger = logging.getLogger(__name__)

LOGIN_PATH = "/login"
HOME_PATH = "/"
RETURN_URL_PARAM = "returnUrl"

ADMIN_REQUIRED = "Access denied. Admin privileges required."
ROLE_REQUIRED = "Access denied. You do not have permission to access this page."


class SessionQuery(Protocol):
    def is_authenticated(self) -> bool: ...

    def is_admin(self) -> bool: ...

    def get_current_user(self) -> Optional[User]: ...


@dataclass(frozen=True)
class GuardResult:
    allowed: bool
    redirect_to: Optional[str] = None
    query_params: Dict[str, str] = field(default_factory=dict)
    notice: Optional[str] = None

    @property
    def requires_login(self) -> bool:
        return not self.allowed and self.redirect_to == LOGIN_PATH


Guard = Callable[[SessionQuery, str], GuardResult]

PASS = GuardResult(allowed=True)


def _to_login(url: str) -> GuardResult:
    params = {RETURN_URL_PARAM: url} if url else {}
    return GuardResult(allowed=False, redirect_to=LOGIN_PATH, query_params=params)


def authenticated_guard(session: SessionQuery, url: str) -> GuardResult:
    if session.is_authenticated():
        return PASS
    return _to_login(url)


def guest_guard(session: SessionQuery, url: str) -> GuardResult:
    if not session.is_authenticated():
        return PASS
    return GuardResult(allowed=False, redirect_to=HOME_PATH)


def admin_guard(session: SessionQuery, url: str) -> GuardResult:
    if not session.is_authenticated():
        return _to_login(url)
    if session.is_admin():
        return PASS
    logger.warning(f"Denied non-admin navigation to {url}")
    return GuardResult(allowed=False, redirect_to=HOME_PATH, notice=ADMIN_REQUIRED)


def role_guard(allowed_roles: Iterable[Role]) -> Guard:
    """Build a guard admitting authenticated users whose role is in allowed_roles."""
    roles = frozenset(allowed_roles)

    def guard(session: SessionQuery, url: str) -> GuardResult:
        if not session.is_authenticated():
            return _to_login(url)
        user = session.get_current_user()
        if user is not None and user.role in roles:
            return PASS
        logger.warning(f"Denied navigation to {url}: role not in {sorted(roles)}")
        return GuardResult(allowed=False, redirect_to=HOME_PATH, notice=ROLE_REQUIRED)

    return guard


user_guard = role_guard(["user"])


def evaluate_guards(guards: Iterable[Guard], session: SessionQuery, url: str) -> GuardResult:
    """Run guards in order; the first failure decides the outcome."""
    for guard in guards:
        result = guard(session, url)
        if not result.allowed:
            return result
    return PASS
