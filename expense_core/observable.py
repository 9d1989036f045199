"""Change notification primitives used to bind the ledger to a UI."""

from __future__ import annotations

from typing import Any, Callable, Generic, Iterable, Iterator, List, Optional, TypeVar, overload

T = TypeVar("T")

PropertyListener = Callable[[Any, str], None]
CollectionListener = Callable[[str, Optional[Any]], None]


class Observable:
    """Mixin that lets subscribers watch named attribute changes."""

    def subscribe(self, callback: PropertyListener) -> Callable[[], None]:
        """Register ``callback(source, name)`` and return an unsubscribe handle."""
        listeners = self._property_listeners()
        listeners.append(callback)

        def unsubscribe() -> None:
            if callback in listeners:
                listeners.remove(callback)

        return unsubscribe

    def _property_listeners(self) -> List[PropertyListener]:
        listeners = self.__dict__.get("_listeners")
        if listeners is None:
            listeners = []
            object.__setattr__(self, "_listeners", listeners)
        return listeners

    def _notify(self, name: str) -> None:
        # Iterate over a copy so listeners may unsubscribe while being called.
        for callback in list(self.__dict__.get("_listeners") or ()):
            callback(self, name)


class ObservableList(Generic[T]):
    """List wrapper that reports structural changes to subscribers.

    Listeners receive ``(action, item)`` where action is one of ``"added"``,
    ``"removed"``, ``"replaced"`` or ``"reset"`` (item is ``None`` for reset).
    """

    def __init__(self, items: Optional[Iterable[T]] = None) -> None:
        self._items: List[T] = list(items or [])
        self._listeners: List[CollectionListener] = []

    def subscribe(self, callback: CollectionListener) -> Callable[[], None]:
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def append(self, item: T) -> None:
        self._items.append(item)
        self._emit("added", item)

    def remove(self, item: T) -> None:
        self._items.remove(item)
        self._emit("removed", item)

    def replace_all(self, items: Iterable[T]) -> None:
        self._items = list(items)
        self._emit("reset", None)

    def refresh(self, item: T) -> None:
        """Signal that ``item`` changed in place so views can redraw it."""
        if item in self._items:
            self._emit("replaced", item)

    def index(self, item: T) -> int:
        return self._items.index(item)

    def _emit(self, action: str, item: Optional[T]) -> None:
        for callback in list(self._listeners):
            callback(action, item)

    @overload
    def __getitem__(self, index: int) -> T: ...

    @overload
    def __getitem__(self, index: slice) -> List[T]: ...

    def __getitem__(self, index):
        return self._items[index]

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item: object) -> bool:
        return item in self._items

    def __repr__(self) -> str:
        return f"ObservableList({self._items!r})"
