from typing import Callable, List


class Emitter:
    """Synchronous notifier: listeners are called in registration order on emit()."""

    def __init__(self) -> None:
        self._listeners: List[Callable[[], None]] = []

    def add_listener(self, listener: Callable[[], None]) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Callable[[], None]) -> None:
        # raises ValueError if the listener was never added
        self._listeners.remove(listener)

    def has_listener(self, listener: Callable[[], None]) -> bool:
        return listener in self._listeners

    def emit(self) -> None:
        # copy, so listeners may remove themselves
        for listener in list(self._listeners):
            listener()
