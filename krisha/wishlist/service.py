"""Wishlist store.

Local mirror of the remote wishlist for the current session. The remote
API is the authority; this store only ever holds the last accepted
response, minus entries removed after a successful remote remove.

Loads are tagged with a generation stamp. A session change (login, logout,
token refresh) or a new load invalidates older stamps, so a slow response
for an old session can never overwrite newer state.
"""

import asyncio
from typing import Callable, List, Optional

from krisha.auth.session import AuthSession
from krisha.events import Listeners
from krisha.generation import Generation
from krisha.logging import get_logger, sanitize_id_for_logging

from .api import RemoteWishlistAPI
from .models import WishlistEntry, WishlistOutcome

logger = get_logger(__name__)


class WishlistStore:
    """Wishlist domain store.

    Usage:
        store = WishlistStore(session, api)
        store.start()                      # inside a running event loop
        outcome = await store.add(product_id)
    """

    def __init__(self, session: AuthSession, api: RemoteWishlistAPI) -> None:
        self._session = session
        self._api = api
        self._items: List[WishlistEntry] = []
        self._is_loading = False
        self._token: Optional[str] = session.token
        # Advanced on every token change; guards add/remove results
        self._session_generation = Generation()
        # Advanced on every load start; guards list() results
        self._load_generation = Generation()
        # Session stamps of reloads issued by add() that are still outstanding
        self._add_reloads: List[int] = []
        self._tasks: set[asyncio.Task] = set()
        self._listeners = Listeners("wishlist")
        self._unsubscribe: Optional[Callable[[], None]] = session.subscribe(self._on_token_change)

    # ==================== READ ====================

    @property
    def items(self) -> List[WishlistEntry]:
        return list(self._items)

    @property
    def count(self) -> int:
        return len(self._items)

    @property
    def is_loading(self) -> bool:
        return self._is_loading or any(
            self._session_generation.is_current(stamp) for stamp in self._add_reloads
        )

    @property
    def token(self) -> Optional[str]:
        return self._token

    def is_in_wishlist(self, product_id: str) -> bool:
        return any(entry.product_id == product_id for entry in self._items)

    # ==================== LOADING ====================

    def start(self) -> Optional[asyncio.Task]:
        """Begin the initial load for the current session."""
        return self._begin_load()

    async def reload(self) -> None:
        """Reload the full wishlist for the current session and wait for it."""
        task = self._begin_load()
        if task is not None:
            await task

    async def wait_idle(self) -> None:
        """Wait until every load started so far has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _on_token_change(self, token: Optional[str]) -> None:
        if token == self._token:
            return
        self._token = token
        self._session_generation.advance()
        self._begin_load()

    def _begin_load(self) -> Optional[asyncio.Task]:
        stamp = self._load_generation.advance()

        if not self._token:
            self._items = []
            self._is_loading = False
            self._listeners.emit(self)
            return None

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # Called from synchronous code; nothing from the old session may remain
            logger.warning("No running event loop, wishlist load deferred until reload()")
            self._items = []
            self._is_loading = False
            self._listeners.emit(self)
            return None

        self._is_loading = True
        self._listeners.emit(self)
        task = loop.create_task(self._load(stamp))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _load(self, stamp: int) -> None:
        """Fetch the list and apply it if stamp is still current; clear on failure."""
        try:
            entries = await self._api.list()
        except Exception as e:
            if not self._load_generation.is_current(stamp):
                return
            logger.warning("Failed to load wishlist: %s", type(e).__name__, exc_info=True)
            self._items = []
            self._is_loading = False
            self._listeners.emit(self)
            return

        if not self._load_generation.is_current(stamp):
            logger.debug("Discarding stale wishlist load (generation %d)", stamp)
            return

        self._items = list(entries)
        self._is_loading = False
        self._listeners.emit(self)

    # ==================== MUTATIONS ====================

    async def add(self, product_id: str) -> WishlistOutcome:
        """
        Add product to the remote wishlist, then reload the mirror.

        Returns:
            ADDED, ALREADY_PRESENT, NO_SESSION, FAILED or STALE
        """
        if not self._token:
            return WishlistOutcome.NO_SESSION

        session_stamp = self._session_generation.current()
        try:
            await self._api.add(product_id)
        except Exception as e:
            logger.warning(
                "Failed to add %s to wishlist: %s",
                sanitize_id_for_logging(product_id),
                type(e).__name__,
            )
            return WishlistOutcome.FAILED

        if not self._session_generation.is_current(session_stamp):
            return WishlistOutcome.STALE
        if self.is_in_wishlist(product_id):
            return WishlistOutcome.ALREADY_PRESENT

        return await self._reload_after_add(session_stamp)

    async def _reload_after_add(self, session_stamp: int) -> WishlistOutcome:
        """
        Fetch the list after a successful remote add.

        A session load still in flight is only superseded once this reload
        has succeeded; if it fails that load applies as usual.
        """
        load_stamp = self._load_generation.current()
        self._add_reloads.append(session_stamp)
        self._listeners.emit(self)
        entries = None
        try:
            entries = await self._api.list()
        except Exception as e:
            logger.warning("Failed to reload wishlist after add: %s", type(e).__name__)
        finally:
            self._add_reloads.remove(session_stamp)

        if entries is None:
            self._listeners.emit(self)
            return WishlistOutcome.FAILED
        if not self._session_generation.is_current(session_stamp):
            return WishlistOutcome.STALE

        if not self._load_generation.is_current(load_stamp):
            # A load started after the remote add owns the mirror
            self._listeners.emit(self)
            return WishlistOutcome.ADDED

        self._load_generation.advance()
        self._items = list(entries)
        self._is_loading = False
        self._listeners.emit(self)
        return WishlistOutcome.ADDED

    async def remove(self, product_id: str) -> WishlistOutcome:
        """
        Remove product remotely; drop it locally only once that succeeded.

        Returns:
            REMOVED, NOT_PRESENT, NO_SESSION, FAILED or STALE
        """
        if not self._token:
            return WishlistOutcome.NO_SESSION

        session_stamp = self._session_generation.current()
        try:
            await self._api.remove(product_id)
        except Exception as e:
            logger.warning(
                "Failed to remove %s from wishlist: %s",
                sanitize_id_for_logging(product_id),
                type(e).__name__,
            )
            return WishlistOutcome.FAILED

        if not self._session_generation.is_current(session_stamp):
            return WishlistOutcome.STALE
        if not self.is_in_wishlist(product_id):
            return WishlistOutcome.NOT_PRESENT

        self._items = [entry for entry in self._items if entry.product_id != product_id]
        self._listeners.emit(self)
        return WishlistOutcome.REMOVED

    # ==================== LIFECYCLE ====================

    def subscribe(self, listener: Callable[["WishlistStore"], None]) -> Callable[[], None]:
        """Call listener(store) after every change; returns an unsubscribe function."""
        return self._listeners.subscribe(listener)

    def close(self) -> None:
        """Stop following the session. In-flight loads finish but are ignored."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._load_generation.advance()
        self._session_generation.advance()
        self._is_loading = False
