import base64
import logging
from typing import Dict, List, Optional

from pydantic import ValidationError

from storefront.database.local_storage import KeyValueStorage
from storefront.modules.users.schemas import User

logger = logging.getLogger(__name__)

USERS_KEY = "registered_users"
PASSWORD_HASHES_KEY = "password_hashes"


class CredentialStore:
    """Registered users and their password encodings, kept in shared storage."""

    def __init__(self, storage: KeyValueStorage, salt: str):
        self.storage = storage
        self.salt = salt

    def list_users(self) -> List[User]:
        stored = self.storage.read_json(USERS_KEY, [])
        if not isinstance(stored, list):
            logger.warning(f"'{USERS_KEY}' is not a list, treating as empty")
            return []
        users = []
        for record in stored:
            try:
                users.append(User.model_validate(record))
            except ValidationError as e:
                logger.warning(f"Skipping malformed user record: {e}")
        return users

    def save_users(self, users: List[User]) -> None:
        self.storage.write_json(USERS_KEY, [u.model_dump(mode="json") for u in users])

    def find_by_email(self, email: str) -> Optional[User]:
        email = email.strip().lower()
        return next((u for u in self.list_users() if u.email.lower() == email), None)

    def find_by_id(self, user_id: str) -> Optional[User]:
        return next((u for u in self.list_users() if u.id == user_id), None)

    def email_exists(self, email: str) -> bool:
        return self.find_by_email(email) is not None

    def add(self, user: User, password: str) -> None:
        users = self.list_users()
        users.append(user)
        self.save_users(users)
        self.set_password(user.id, password)

    def update(self, user: User) -> bool:
        users = self.list_users()
        for i, existing in enumerate(users):
            if existing.id == user.id:
                users[i] = user
                self.save_users(users)
                return True
        return False

    def delete(self, user_id: str) -> bool:
        users = self.list_users()
        remaining = [u for u in users if u.id != user_id]
        if len(remaining) == len(users):
            return False
        self.save_users(remaining)
        hashes = self._password_hashes()
        if hashes.pop(user_id, None) is not None:
            self.storage.write_json(PASSWORD_HASHES_KEY, hashes)
        return True

    def _password_hashes(self) -> Dict[str, str]:
        stored = self.storage.read_json(PASSWORD_HASHES_KEY, {})
        if not isinstance(stored, dict):
            logger.warning(f"'{PASSWORD_HASHES_KEY}' is not an object, treating as empty")
            return {}
        return stored

    def encode_password(self, password: str) -> str:
        # Reversible encoding, not a hash
        return base64.b64encode(f"{password}{self.salt}".encode("utf-8")).decode("ascii")

    def set_password(self, user_id: str, password: str) -> None:
        hashes = self._password_hashes()
        hashes[user_id] = self.encode_password(password)
        self.storage.write_json(PASSWORD_HASHES_KEY, hashes)

    def verify_password(self, user_id: str, password: str) -> bool:
        stored = self._password_hashes().get(user_id)
        return bool(stored) and stored == self.encode_password(password)

    def count(self) -> int:
        return len(self.list_users())
