"""Change notification for stores and the auth session.

Listeners are plain callables invoked synchronously after a committed
change. A failing listener is logged and never breaks the emitter.
"""

from typing import Any, Callable

from krisha.logging import get_logger

logger = get_logger(__name__)

Listener = Callable[..., Any]


class Listeners:
    """Ordered set of listeners with a subscribe/unsubscribe handle."""

    def __init__(self, name: str):
        self.name = name
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register listener; returns a function that removes it again."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def emit(self, *args: Any) -> None:
        # Snapshot: a listener may unsubscribe while we iterate
        for listener in list(self._listeners):
            try:
                listener(*args)
            except Exception as e:
                logger.warning("%s listener failed: %s", self.name, type(e).__name__, exc_info=True)
