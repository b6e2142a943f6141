from dataclasses import dataclass, field
import sys
from typing import Any, Iterator

from .hash import hash_string
from .shared import printf_err


INITIAL_CAPACITY = 16
MAX_CAPACITY = sys.maxsize + 1
TABLE_MAX_LOAD = 0.5


_debug_trace_growth = False


def set_debug_trace_growth(b: bool):
    global _debug_trace_growth
    _debug_trace_growth = b


class TableError(Exception):
    pass


class TableAllocationError(TableError):
    pass


class CapacityOverflowError(TableAllocationError):
    pass


class InvalidValueError(TableError, ValueError):
    pass


class TableFreedError(TableError):
    pass


@dataclass
class NotFound:
    pass


@dataclass
class Entry:
    key: str | None
    hash: int
    value: Any

    @classmethod
    def empty(cls):
        return Entry(None, 0, None)

    def is_empty(self) -> bool:
        return self.key is None


def new_entries(capacity: int) -> list[Entry]:
    return [Entry.empty() for _ in range(capacity)]


def find_entry(entries: list[Entry], key: str, hash: int) -> Entry:
    capacity = len(entries)
    # capacity is a power of two, so masking replaces modulo
    index = hash & (capacity - 1)

    for _ in range(capacity):
        entry = entries[index]
        if entry.key is None or entry.key == key:
            return entry

        index = (index + 1) & (capacity - 1)

    raise TableError(f"no free slot for key {key!r}")


def is_power_of_two(n: int) -> bool:
    return n > 0 and n & (n - 1) == 0


def _check_key(key: Any):
    if not isinstance(key, str):
        raise TypeError(f"table keys must be str, not {type(key).__name__}")


@dataclass(eq=False, repr=False)
class Table:
    count: int
    entries: list[Entry]
    max_capacity: int
    freed: bool
    _version: int

    def __init__(
        self, capacity: int = INITIAL_CAPACITY, max_capacity: int = MAX_CAPACITY
    ) -> None:
        if not is_power_of_two(capacity):
            raise ValueError(f"capacity must be a power of two, got {capacity}")
        if capacity > max_capacity:
            raise ValueError(
                f"capacity {capacity} exceeds max_capacity {max_capacity}"
            )

        self.count = 0
        self.entries = new_entries(capacity)
        self.max_capacity = max_capacity
        self.freed = False
        self._version = 0

    def __repr__(self) -> str:
        if self.freed:
            return "<Table freed>"
        return f"<Table count={self.count} capacity={self.capacity}>"

    @property
    def capacity(self) -> int:
        return len(self.entries)

    def length(self) -> int:
        self._check_live()
        return self.count

    def get(self, key: str) -> Any | NotFound:
        self._check_live()
        _check_key(key)
        if self.count == 0:
            return NotFound()

        entry = find_entry(self.entries, key, hash_string(key))
        if entry.key is None:
            return NotFound()

        return entry.value

    def set(self, key: str, value: Any) -> str:
        """Insert ``key`` or replace its value, returning the stored key.

        The table grows before the insertion once half of its slots are in
        use. A failed growth raises and leaves the table as it was.
        """
        self._check_live()
        _check_key(key)
        if isinstance(value, NotFound):
            raise InvalidValueError("NotFound cannot be stored as a value")

        if self.count >= int(self.capacity * TABLE_MAX_LOAD):
            self.expand()

        hash = hash_string(key)
        entry = find_entry(self.entries, key, hash)
        if entry.key is not None:
            entry.value = value
            return entry.key

        entry.key = key
        entry.hash = hash
        entry.value = value
        self.count += 1
        self._version += 1
        return key

    def expand(self):
        self._check_live()
        capacity = self.capacity
        new_capacity = capacity * 2
        if new_capacity > self.max_capacity:
            raise CapacityOverflowError(
                f"cannot grow table beyond {self.max_capacity} slots"
            )

        try:
            entries = new_entries(new_capacity)
        except MemoryError as e:
            raise TableAllocationError(
                f"cannot allocate {new_capacity} slots"
            ) from e

        for entry in self.entries:
            if entry.key is None:
                continue

            dest = find_entry(entries, entry.key, entry.hash)
            dest.key = entry.key
            dest.hash = entry.hash
            dest.value = entry.value

        self.entries = entries
        self._version += 1

        if _debug_trace_growth:
            printf_err(
                "expand {0:d} -> {1:d} ({2:d} entries)\n",
                capacity,
                new_capacity,
                self.count,
            )

    def iterator(self) -> "TableIterator":
        self._check_live()
        return TableIterator(self)

    def items(self) -> "TableIterator":
        return self.iterator()

    def free(self):
        self.count = 0
        self.entries = []
        self.freed = True

    def _check_live(self):
        if self.freed:
            raise TableFreedError("table has been freed")

    def __len__(self) -> int:
        return self.length()

    def __contains__(self, key: str) -> bool:
        return not isinstance(self.get(key), NotFound)

    def __getitem__(self, key: str) -> Any:
        value = self.get(key)
        if isinstance(value, NotFound):
            raise KeyError(key)
        return value

    def __setitem__(self, key: str, value: Any):
        self.set(key, value)

    def __iter__(self) -> Iterator[str]:
        """Iterate over keys in slot order, like a mapping; see ``items``."""
        return (key for key, _ in self.iterator())


@dataclass
class TableIterator:
    key: str | None
    value: Any
    _table: Table = field(repr=False)
    _index: int
    _version: int
    _exhausted: bool

    def __init__(self, table: Table) -> None:
        self.key = None
        self.value = None
        self._table = table
        self._index = 0
        self._version = table._version
        self._exhausted = False

    def next(self) -> bool:
        if self._exhausted:
            return False

        table = self._table
        table._check_live()
        if self._version != table._version:
            raise RuntimeError("table changed size during iteration")

        while self._index < table.capacity:
            entry = table.entries[self._index]
            self._index += 1
            if entry.key is not None:
                self.key = entry.key
                self.value = entry.value
                return True

        self._exhausted = True
        return False

    def __iter__(self) -> "TableIterator":
        return self

    def __next__(self) -> tuple[str, Any]:
        if not self.next():
            raise StopIteration
        assert self.key is not None
        return self.key, self.value


def new_table(
    capacity: int = INITIAL_CAPACITY, max_capacity: int = MAX_CAPACITY
) -> Table:
    return Table(capacity, max_capacity)


def free_table(table: Table):
    table.free()


def table_get(table: Table, key: str) -> Any | NotFound:
    return table.get(key)


def table_set(table: Table, key: str, value: Any) -> str:
    return table.set(key, value)


def table_length(table: Table) -> int:
    return table.length()


def create_iterator(table: Table) -> TableIterator:
    return table.iterator()


def advance(it: TableIterator) -> tuple[str, Any] | NotFound:
    if not it.next():
        return NotFound()
    assert it.key is not None
    return it.key, it.value
