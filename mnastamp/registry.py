"""Ordered registry of the unknowns of an MNA system.

Each key in the registry is either a real node id (``int``) or a
:class:`BranchId`, the synthetic key of a branch-current unknown. The position
of a key in :attr:`NodeRegistry.keys` is its row/column in the global matrix.
"""

from collections.abc import Hashable, Iterable
from typing import NamedTuple


class BranchId(NamedTuple):
    """Branch-current unknown of a voltage source or inductor.

    ``serial`` is unique within its registry, so two branch slots never
    compare equal even when ``element`` is missing or repeated.
    """

    serial: int
    element: str | None = None

    def __repr__(self) -> str:
        return f"BranchId({self.serial}, {self.element!r})"


class NodeRegistry:
    """Insertion-ordered keys with an explicit ``key -> index`` mapping."""

    def __init__(self, keys: Iterable[Hashable] = ()) -> None:
        self._keys: list[Hashable] = []
        self._index: dict[Hashable, int] = {}
        self._next_serial = 0
        for key in keys:
            self.register(key)

    @property
    def keys(self) -> tuple[Hashable, ...]:
        return tuple(self._keys)

    def __len__(self) -> int:
        return len(self._keys)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._index

    def __iter__(self):
        return iter(self._keys)

    def index_of(self, key: Hashable) -> int:
        """Index of ``key``; raises ``KeyError`` if it was never registered."""
        try:
            return self._index[key]
        except KeyError:
            raise KeyError(f"'{key}' is not registered") from None

    def register(self, key: Hashable) -> tuple[int, bool]:
        """Return ``(index, added)``, appending ``key`` if it is new."""
        if key in self._index:
            return self._index[key], False
        self._index[key] = len(self._keys)
        self._keys.append(key)
        return self._index[key], True

    def register_branch(self, element: str | None = None) -> tuple[int, BranchId]:
        """Append a fresh branch slot and return ``(index, branch_id)``."""
        branch = BranchId(self._next_serial, element)
        self._next_serial += 1
        index, _ = self.register(branch)
        return index, branch

    def drop_first(self) -> Hashable:
        """Remove the key at index 0 and shift every other index down by one."""
        if not self._keys:
            raise IndexError("drop_first on an empty registry")
        first = self._keys.pop(0)
        self._index = {key: i for i, key in enumerate(self._keys)}
        return first
