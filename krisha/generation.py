"""Generation guard for discarding stale asynchronous results."""


class Generation:
    """
    Monotonic counter tagging asynchronous work.

    An operation captures a stamp with current() before its first await and
    applies its result only if is_current(stamp) still holds afterwards.
    advance() invalidates every stamp handed out so far. Stale work is never
    aborted, only ignored when it completes.
    """

    def __init__(self) -> None:
        self._value = 0

    def current(self) -> int:
        return self._value

    def advance(self) -> int:
        self._value += 1
        return self._value

    def is_current(self, stamp: int) -> bool:
        return stamp == self._value

    def __repr__(self) -> str:
        return f"Generation({self._value})"
