import logging
import random
import secrets
import string
import time
from datetime import datetime, timezone
from typing import Callable, Dict, Optional

from storefront.config.settings import settings
from storefront.core.observable import Observable
from storefront.database.local_storage import KeyValueStorage
from storefront.modules.auth import token_codec
from storefront.modules.auth.schemas import AuthResult
from storefront.modules.auth.validators import validate_email, validate_name, validate_password
from storefront.modules.cart.service import CartService
from storefront.modules.users.schemas import Role, User
from storefront.modules.users.store import CredentialStore

logger = logging.getLogger(__name__)

TOKEN_KEY = "auth_token"
RESET_TOKENS_KEY = "password_reset_tokens"
LOGOUT_FLAG_KEY = "just_logged_out"

INVALID_CREDENTIALS = "Invalid email or password"
RESET_REQUESTED = "If an account exists with this email, you will receive password reset instructions."
INVALID_RESET_TOKEN = "This reset link is invalid or has expired"


def log_reset_delivery(email: str, token: str) -> None:
    """Default reset delivery: there is no mail transport, the token goes to the log."""
    logger.info(f"Password reset token for {email}: {token}")


def generate_user_id(now: float) -> str:
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=9))
    return f"user_{int(now * 1000)}_{suffix}"


class SessionManager:
    """
    Session state for one client: issues and reads the stored session token and
    runs the register/login/logout/password-reset flows against the credential store.

    Query methods never raise; a missing, malformed or expired token simply means
    there is no session.
    """

    def __init__(
        self,
        credentials: CredentialStore,
        client_storage: KeyValueStorage,
        session_storage: KeyValueStorage,
        cart: CartService,
        clock: Callable[[], float] = time.time,
        reset_delivery: Callable[[str, str], None] = log_reset_delivery,
    ):
        self.credentials = credentials
        self.client_storage = client_storage
        self.session_storage = session_storage
        self.cart = cart
        self.clock = clock
        self.reset_delivery = reset_delivery
        self.current_user: Observable[Optional[User]] = Observable(None)
        self._initialize()

    def _initialize(self) -> None:
        token = self.get_token()
        if token and token_codec.is_token_valid(token, self.clock()):
            self.current_user.next(self._user_from_token(token))
        elif token:
            logger.info("Discarding stored session token that is expired or malformed")
            self._clear_auth()

    # Token handling

    def get_token(self) -> Optional[str]:
        return self.client_storage.get_item(TOKEN_KEY)

    def _issue_token(self, user: User) -> str:
        payload = token_codec.build_payload(user, int(self.clock()), settings.token_ttl_seconds)
        token = token_codec.encode_token(payload, settings.token_secret)
        self.client_storage.set_item(TOKEN_KEY, token)
        self.current_user.next(user)
        return token

    def _user_from_token(self, token: str) -> Optional[User]:
        payload = token_codec.decode_token(token)
        if payload is None:
            return None
        user = self.credentials.find_by_id(payload.user_id)
        if user is None or not user.is_active:
            return None
        return user

    def _clear_auth(self) -> None:
        self.client_storage.remove_item(TOKEN_KEY)
        self.current_user.next(None)

    # Queries

    def is_authenticated(self) -> bool:
        return token_codec.is_token_valid(self.get_token(), self.clock())

    def get_current_user(self) -> Optional[User]:
        token = self.get_token()
        if not token_codec.is_token_valid(token, self.clock()):
            return None
        return self._user_from_token(token)

    def has_role(self, role: Role) -> bool:
        user = self.get_current_user()
        return user is not None and user.role == role

    def is_admin(self) -> bool:
        return self.has_role("admin")

    def registered_users_count(self) -> int:
        return self.credentials.count()

    # Flows

    def register(
        self,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        role: Role = "user",
    ) -> AuthResult:
        error = validate_email(email)
        if error:
            return AuthResult(success=False, message=error)
        if self.credentials.email_exists(email):
            return AuthResult(success=False, message="An account with this email already exists")
        error = (
            validate_password(password)
            or validate_name(first_name, "First name")
            or validate_name(last_name, "Last name")
        )
        if error:
            return AuthResult(success=False, message=error)

        now = self.clock()
        user = User(
            id=generate_user_id(now),
            email=email.strip().lower(),
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            role=role,
            created_at=datetime.fromtimestamp(now, tz=timezone.utc),
        )
        self.credentials.add(user, password)
        token = self._issue_token(user)
        logger.info(f"Registered user {user.id} with role {user.role}")
        return AuthResult(
            success=True,
            message=f"Welcome, {user.first_name}! Your account has been created.",
            token=token,
        )

    def login(self, email: str, password: str) -> AuthResult:
        if not email or not password:
            return AuthResult(success=False, message="Email and password are required")

        user = self.credentials.find_by_email(email)
        if user is None or not self.credentials.verify_password(user.id, password):
            logger.info("Rejected sign-in attempt")
            return AuthResult(success=False, message=INVALID_CREDENTIALS)
        if not user.is_active:
            return AuthResult(success=False, message="This account has been deactivated")

        now = self.clock()
        user = user.model_copy(update={"last_login": datetime.fromtimestamp(now, tz=timezone.utc)})
        self.credentials.update(user)
        token = self._issue_token(user)
        logger.info(f"User {user.id} signed in")
        return AuthResult(success=True, message=f"Welcome back, {user.first_name}!", token=token)

    def logout(self) -> None:
        self._clear_auth()
        self.cart.clear()
        self.cart.close_cart()
        self.session_storage.set_item(LOGOUT_FLAG_KEY, "true")

    def consume_logout_notice(self) -> bool:
        flag = self.session_storage.get_item(LOGOUT_FLAG_KEY)
        if flag is None:
            return False
        self.session_storage.remove_item(LOGOUT_FLAG_KEY)
        return flag == "true"

    # Password reset

    def _reset_tokens(self) -> Dict[str, dict]:
        stored = self.credentials.storage.read_json(RESET_TOKENS_KEY, {})
        if not isinstance(stored, dict):
            logger.warning(f"'{RESET_TOKENS_KEY}' is not an object, treating as empty")
            return {}
        now = self.clock()
        live = {
            token: entry for token, entry in stored.items()
            if isinstance(entry, dict) and isinstance(entry.get("expires_at"), (int, float)) and entry["expires_at"] > now
        }
        if len(live) != len(stored):
            self._save_reset_tokens(live)
        return live

    def _save_reset_tokens(self, tokens: Dict[str, dict]) -> None:
        self.credentials.storage.write_json(RESET_TOKENS_KEY, tokens)

    def request_password_reset(self, email: str) -> AuthResult:
        error = validate_email(email)
        if error:
            return AuthResult(success=False, message=error)

        user = self.credentials.find_by_email(email)
        if user is not None:
            token = secrets.token_urlsafe(32)
            tokens = self._reset_tokens()
            tokens[token] = {
                "email": user.email,
                "expires_at": int(self.clock()) + settings.reset_token_ttl_seconds,
            }
            self._save_reset_tokens(tokens)
            self.reset_delivery(user.email, token)
        return AuthResult(success=True, message=RESET_REQUESTED)

    def validate_reset_token(self, token: str) -> Optional[str]:
        """Return the email a live reset token belongs to, or None."""
        entry = self._reset_tokens().get(token)
        return entry.get("email") if entry else None

    def reset_password(self, token: str, new_password: str) -> AuthResult:
        email = self.validate_reset_token(token)
        if email is None:
            return AuthResult(success=False, message=INVALID_RESET_TOKEN)
        error = validate_password(new_password)
        if error:
            return AuthResult(success=False, message=error)

        user = self.credentials.find_by_email(email)
        if user is None:
            self._consume_reset_tokens(email)
            return AuthResult(success=False, message=INVALID_RESET_TOKEN)

        self.credentials.set_password(user.id, new_password)
        self._consume_reset_tokens(email)
        logger.info(f"Password reset for user {user.id}")
        return AuthResult(success=True, message="Password reset successful! Please log in.")

    def _consume_reset_tokens(self, email: str) -> None:
        tokens = self._reset_tokens()
        self._save_reset_tokens({t: e for t, e in tokens.items() if e.get("email") != email})
