from dataclasses import dataclass

from .shared import printf
from .table import Entry, Table


@dataclass(frozen=True)
class ProbeStats:
    count: int
    capacity: int
    load_factor: float
    max_probe: int
    mean_probe: float


def probe_distance(entry: Entry, index: int, capacity: int) -> int:
    home = entry.hash & (capacity - 1)
    return (index - home) & (capacity - 1)


def dump_table(table: Table, name: str):
    printf("== {0:s} ==\n", name)

    count = table.length()
    capacity = table.capacity
    for index, entry in enumerate(table.entries):
        if entry.is_empty():
            continue
        printf(
            "{0:04d} {1:s} -> {2!r} (+{3:d})\n",
            index,
            entry.key,
            entry.value,
            probe_distance(entry, index, capacity),
        )

    printf("-- {0:d}/{1:d} --\n", count, capacity)


def probe_stats(table: Table) -> ProbeStats:
    count = table.length()
    capacity = table.capacity
    distances = [
        probe_distance(entry, index, capacity)
        for index, entry in enumerate(table.entries)
        if not entry.is_empty()
    ]

    return ProbeStats(
        count=count,
        capacity=capacity,
        load_factor=count / capacity,
        max_probe=max(distances, default=0),
        mean_probe=sum(distances) / len(distances) if distances else 0.0,
    )
