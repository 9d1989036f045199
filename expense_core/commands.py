"""Named ledger operations paired with their enablement predicates."""

from __future__ import annotations

from typing import Any, Callable, List, Optional


def _always() -> bool:
    return True


class Command:
    """An invokable operation that a UI can bind to a button or menu item."""

    def __init__(
        self,
        name: str,
        execute: Callable[[], Any],
        can_execute: Optional[Callable[[], bool]] = None,
    ) -> None:
        if execute is None:
            raise ValueError("execute callable is required")
        self.name = name
        self._execute = execute
        self._can_execute = can_execute or _always
        self._listeners: List[Callable[["Command"], None]] = []

    def can_execute(self) -> bool:
        return bool(self._can_execute())

    def execute(self) -> Any:
        """Run the operation when enabled; disabled commands return ``None``."""
        if not self.can_execute():
            return None
        return self._execute()

    def subscribe(self, callback: Callable[["Command"], None]) -> Callable[[], None]:
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def raise_can_execute_changed(self) -> None:
        for callback in list(self._listeners):
            callback(self)

    def __repr__(self) -> str:
        return f"Command({self.name!r}, enabled={self.can_execute()})"
