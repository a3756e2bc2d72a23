"""
Seed Admin Script
Creates an admin account in shared storage, or promotes an existing account.
Registration through the API always creates plain users, so this is how the first
admin comes to exist.

Usage: python -m storefront.scripts.seed_admin EMAIL PASSWORD [FIRST_NAME LAST_NAME]
"""

import sys
import logging

from storefront.core.context import ContextRegistry, build_registry
from storefront.modules.users.schemas import UserUpdate
from storefront.modules.users.service import UserService

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

SEED_CLIENT_ID = "seed-admin-script"


def seed_admin(registry: ContextRegistry, email: str, password: str,
               first_name: str = "Store", last_name: str = "Admin") -> bool:
    """Create or promote the admin account. Returns True on success."""
    users = UserService(registry.credentials)
    existing = registry.credentials.find_by_email(email)
    if existing:
        users.update_user(existing.id, UserUpdate(role="admin", is_active=True))
        logger.info(f"Promoted existing user {existing.id} to admin")
        return True

    context = registry.get(SEED_CLIENT_ID)
    result = context.session.register(email, password, first_name, last_name, role="admin")
    # The seeding context does not keep a session
    context.session.logout()
    registry.discard(SEED_CLIENT_ID)
    if not result.success:
        logger.error(f"Could not create admin: {result.message}")
        return False
    logger.info(f"Created admin account {email}")
    return True


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    if len(argv) not in (2, 4):
        logger.error("Usage: python -m storefront.scripts.seed_admin EMAIL PASSWORD [FIRST_NAME LAST_NAME]")
        return 2
    return 0 if seed_admin(build_registry(), *argv) else 1


if __name__ == "__main__":
    sys.exit(main())
