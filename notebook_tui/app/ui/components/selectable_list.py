"""
Cursor-navigable list of labelled choices.

Each entry pairs a display label with a zero-argument producer. Producers are
only called when the user commits a choice, so building a list never has side
effects. Entries keep insertion order, which is also the display and
navigation order.
"""

from typing import Callable, Generic, Iterable, Iterator, List, Optional, Tuple, TypeVar

from ...exceptions import EmptySelectionError

T = TypeVar('T')


class SelectableList(Generic[T]):
    """
    Ordered (label, producer) pairs with a wrap-around cursor.

    Not safe for concurrent mutation; a list belongs to the render call that
    built it.
    """

    def __init__(self, items: Optional[Iterable[Tuple[str, Callable[[], T]]]] = None):
        self._items: List[Tuple[str, Callable[[], T]]] = list(items or [])
        self._index = 0

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[str]:
        return (label for label, _ in self._items)

    @property
    def count(self) -> int:
        return len(self._items)

    @property
    def index(self) -> int:
        self._require_items()
        return self._index

    def add(self, label: str, producer: Callable[[], T]) -> "SelectableList[T]":
        self._items.append((label, producer))
        return self

    def remove(self, label: str) -> None:
        """Remove the first entry with the given label."""
        for i, (item_label, _) in enumerate(self._items):
            if item_label == label:
                del self._items[i]
                break
        else:
            raise KeyError(label)

        if i < self._index or self._index >= len(self._items):
            self._index = max(self._index - 1, 0)

    def next_index(self) -> None:
        self._require_items()
        self._index = (self._index + 1) % len(self._items)

    def prev_index(self) -> None:
        self._require_items()
        self._index = (self._index - 1 + len(self._items)) % len(self._items)

    def label_at(self, index: int) -> str:
        return self._entry(index)[0]

    def producer_at(self, index: int) -> Callable[[], T]:
        return self._entry(index)[1]

    @property
    def current_label(self) -> str:
        return self.label_at(self.index)

    @property
    def current_producer(self) -> Callable[[], T]:
        return self.producer_at(self.index)

    def invoke(self) -> T:
        """Commit the selection: run the producer under the cursor."""
        return self.current_producer()

    def _entry(self, index: int) -> Tuple[str, Callable[[], T]]:
        if not 0 <= index < len(self._items):
            raise IndexError(f"Index {index} out of range for {len(self._items)} items")
        return self._items[index]

    def _require_items(self) -> None:
        if not self._items:
            raise EmptySelectionError("List has no items to select")
