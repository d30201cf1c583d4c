import threading


class VersionCounter:
    """Monotonic counter bumped on every mutating action.

    Views poll it (or read the ``X-Todos-Version`` header) and re-fetch the
    todo list when it moves.
    """

    def __init__(self, start: int = 0):
        self._value = start
        self._lock = threading.Lock()

    @property
    def value(self) -> int:
        with self._lock:
            return self._value

    def bump(self) -> int:
        with self._lock:
            self._value += 1
            return self._value
