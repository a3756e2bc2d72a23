"""Per-client state: storage, session manager and cart, keyed by client id."""
import logging
import re
import threading
from collections import OrderedDict
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from storefront.config.settings import settings
from storefront.database.local_storage import FileStorage, KeyValueStorage, MemoryStorage, ScopedStorage
from storefront.modules.auth.service import SessionManager
from storefront.modules.cart.service import CartService
from storefront.modules.users.store import CredentialStore

logger = logging.getLogger(__name__)

CLIENT_ID_RE = re.compile(r"[A-Za-z0-9_-]{8,64}")


@dataclass
class StorefrontContext:
    client_id: str
    client_storage: KeyValueStorage
    session_storage: KeyValueStorage
    session: SessionManager
    cart: CartService


class ContextRegistry:
    """Live contexts by client id, bounded by max_contexts.

    Evicting a context only drops its in-process objects. Client storage is rebuilt
    by the factory on the next request, so the token and cart survive; the
    session-scoped logout notice does not.
    """

    def __init__(
        self,
        shared_storage: KeyValueStorage,
        client_storage_factory: Callable[[str], KeyValueStorage],
        session_manager_factory: Optional[Callable[..., SessionManager]] = None,
        max_contexts: Optional[int] = None,
    ):
        self.shared_storage = shared_storage
        self.credentials = CredentialStore(shared_storage, settings.password_salt)
        self._client_storage_factory = client_storage_factory
        self._session_manager_factory = session_manager_factory or SessionManager
        self.max_contexts = max_contexts or settings.max_client_contexts
        self._contexts: "OrderedDict[str, StorefrontContext]" = OrderedDict()
        self._lock = threading.Lock()

    @staticmethod
    def is_valid_client_id(client_id: Optional[str]) -> bool:
        return bool(client_id) and bool(CLIENT_ID_RE.fullmatch(client_id))

    def get(self, client_id: str) -> StorefrontContext:
        with self._lock:
            context = self._contexts.get(client_id)
            if context is not None:
                self._contexts.move_to_end(client_id)
                return context
            context = self._create(client_id)
            self._contexts[client_id] = context
            logger.debug(f"Created context for client {client_id}")
            while len(self._contexts) > self.max_contexts:
                evicted, _ = self._contexts.popitem(last=False)
                logger.debug(f"Evicted idle context for client {evicted}")
            return context

    def __len__(self) -> int:
        with self._lock:
            return len(self._contexts)

    def _create(self, client_id: str) -> StorefrontContext:
        client_storage = self._client_storage_factory(client_id)
        session_storage = MemoryStorage()
        cart = CartService(client_storage)
        session = self._session_manager_factory(
            credentials=self.credentials,
            client_storage=client_storage,
            session_storage=session_storage,
            cart=cart,
        )
        return StorefrontContext(
            client_id=client_id,
            client_storage=client_storage,
            session_storage=session_storage,
            session=session,
            cart=cart,
        )

    def discard(self, client_id: str) -> None:
        with self._lock:
            self._contexts.pop(client_id, None)


def build_registry() -> ContextRegistry:
    if settings.storage_backend == "memory":
        logger.info("Using in-memory storage; state is lost on restart")
        client_data = MemoryStorage()
        return ContextRegistry(
            MemoryStorage(), lambda client_id: ScopedStorage(client_data, f"{client_id}:")
        )
    root = Path(settings.storage_dir)
    return ContextRegistry(
        FileStorage(str(root / "shared.json")),
        lambda client_id: FileStorage(str(root / "clients" / f"{client_id}.json")),
    )


_registry: Optional[ContextRegistry] = None
_registry_lock = threading.Lock()


def get_context_registry() -> ContextRegistry:
    global _registry
    with _registry_lock:
        if _registry is None:
            _registry = build_registry()
        return _registry
