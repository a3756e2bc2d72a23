import logging
from typing import List, Optional

from storefront.modules.users.schemas import Role, User, UserUpdate
from storefront.modules.users.store import CredentialStore

logger = logging.getLogger(__name__)


class UserService:
    """Admin-side management of registered accounts."""

    def __init__(self, credentials: CredentialStore):
        self.credentials = credentials

    def list_users(self, search: Optional[str] = None, role: Optional[Role] = None) -> List[User]:
        """List users, filtered by a name/email substring and/or role"""
        users = self.credentials.list_users()
        if search:
            term = search.strip().lower()
            users = [
                u for u in users
                if term in u.first_name.lower() or term in u.last_name.lower() or term in u.email.lower()
            ]
        if role:
            users = [u for u in users if u.role == role]
        return users

    def get_user(self, user_id: str) -> Optional[User]:
        return self.credentials.find_by_id(user_id)

    def update_user(self, user_id: str, user_data: UserUpdate) -> Optional[User]:
        user = self.credentials.find_by_id(user_id)
        if user is None:
            return None
        update_data = {}
        if user_data.first_name is not None:
            update_data["first_name"] = user_data.first_name.strip()
        if user_data.last_name is not None:
            update_data["last_name"] = user_data.last_name.strip()
        if user_data.role is not None:
            update_data["role"] = user_data.role
        if user_data.is_active is not None:
            update_data["is_active"] = user_data.is_active
        updated = user.model_copy(update=update_data)
        self.credentials.update(updated)
        if updated.role != user.role:
            logger.info(f"Role of user {user_id} changed from {user.role} to {updated.role}")
        return updated

    def delete_user(self, user_id: str) -> bool:
        deleted = self.credentials.delete(user_id)
        if deleted:
            logger.info(f"Deleted user {user_id}")
        return deleted

    def toggle_active(self, user_id: str) -> Optional[User]:
        user = self.credentials.find_by_id(user_id)
        if user is None:
            return None
        return self.update_user(user_id, UserUpdate(is_active=not user.is_active))

    def admin_count(self) -> int:
        return len(self.list_users(role="admin"))

    def count(self) -> int:
        return self.credentials.count()
