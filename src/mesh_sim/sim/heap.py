# sim/heap.py
from collections.abc import Hashable
from typing import Generic, TypeVar

T = TypeVar("T", bound=Hashable)


class IndexedMinHeap(Generic[T]):
    """
    Binary min-heap with decrease-key.

    Entries are (key, seq, item); seq is a push counter so equal keys pop FIFO,
    the same tie-break the event queue used. The heap owns the item -> slot
    map, callers only ever hand back the item itself.
    """

    def __init__(self):
        self._q: list[tuple[float, int, T]] = []
        self._pos: dict[T, int] = {}
        self._seq = 0

    def __len__(self) -> int:
        return len(self._q)

    def __contains__(self, item: T) -> bool:
        return item in self._pos

    def key(self, item: T) -> float:
        return self._q[self._pos[item]][0]

    def push(self, item: T, key: float) -> None:
        if item in self._pos:
            raise ValueError(f"item {item!r} already queued")
        self._seq += 1
        self._q.append((key, self._seq, item))
        self._pos[item] = len(self._q) - 1
        self._sift_up(len(self._q) - 1)

    def decrease_key(self, item: T, key: float) -> None:
        i = self._pos[item]  # KeyError if never pushed
        old, seq, _ = self._q[i]
        if key > old:
            raise ValueError(f"decrease_key would raise key of {item!r}: {old} -> {key}")
        self._q[i] = (key, seq, item)
        self._sift_up(i)

    def pop(self) -> T | None:
        if not self._q:
            return None
        last = self._q.pop()
        if not self._q:
            del self._pos[last[2]]
            return last[2]
        top = self._q[0]
        self._q[0] = last
        self._pos[last[2]] = 0
        del self._pos[top[2]]
        self._sift_down(0)
        return top[2]

    # --------------- sifting -----------------------------

    def _swap(self, i: int, j: int) -> None:
        q = self._q
        q[i], q[j] = q[j], q[i]
        self._pos[q[i][2]] = i
        self._pos[q[j][2]] = j

    def _less(self, i: int, j: int) -> bool:
        a, b = self._q[i], self._q[j]
        return (a[0], a[1]) < (b[0], b[1])

    def _sift_up(self, i: int) -> None:
        while i > 0:
            parent = (i - 1) >> 1
            if not self._less(i, parent):
                break
            self._swap(i, parent)
            i = parent

    def _sift_down(self, i: int) -> None:
        n = len(self._q)
        while True:
            child = 2 * i + 1
            if child >= n:
                break
            if child + 1 < n and self._less(child + 1, child):
                child += 1
            if not self._less(child, i):
                break
            self._swap(i, child)
            i = child
