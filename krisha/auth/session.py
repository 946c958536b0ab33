"""Client auth session: the current token and its change notification."""
from typing import Callable, Optional

from krisha.db import DurableKeyValueStore, StorageKeys
from krisha.events import Listeners
from krisha.logging import get_logger

logger = get_logger(__name__)

TokenListener = Callable[[Optional[str]], None]


class AuthSession:
    """
    Holds the session token (None when logged out).

    Listeners are called with the new token whenever the value changes:
    login, logout, and token refresh. Setting the same token again does not
    notify. When a store is given the token is persisted under "authToken"
    and restored on construction.
    """

    def __init__(self, store: Optional[DurableKeyValueStore] = None, token: Optional[str] = None):
        self._store = store
        self._listeners = Listeners("auth")
        if token is None and store is not None:
            token = self._read_persisted()
        self._token: Optional[str] = token or None

    @property
    def token(self) -> Optional[str]:
        return self._token

    @property
    def is_authenticated(self) -> bool:
        return self._token is not None

    def subscribe(self, listener: TokenListener) -> Callable[[], None]:
        return self._listeners.subscribe(listener)

    def login(self, token: str) -> None:
        if not token:
            raise ValueError("token must be a non-empty string")
        self._set(token)

    def refresh(self, token: str) -> None:
        self.login(token)

    def logout(self) -> None:
        self._set(None)

    def _set(self, token: Optional[str]) -> None:
        if token == self._token:
            return
        self._token = token
        self._persist(token)
        logger.info("Session %s", "started" if token else "ended")
        self._listeners.emit(token)

    def _read_persisted(self) -> Optional[str]:
        try:
            return self._store.get(StorageKeys.AUTH_TOKEN)
        except Exception as e:
            logger.error("Failed to read auth token: %s", type(e).__name__, exc_info=True)
            return None

    def _persist(self, token: Optional[str]) -> None:
        if self._store is None:
            return
        try:
            if token:
                self._store.set(StorageKeys.AUTH_TOKEN, token)
            else:
                self._store.delete(StorageKeys.AUTH_TOKEN)
        except Exception as e:
            logger.error("Failed to persist auth token: %s", type(e).__name__, exc_info=True)
