"""
Record store
============

The engine never talks to a database directly. It only needs four
operations, described by the `RecordStore` protocol:

- save_all(records)  bulk insert (one call per load pass)
- find_all()         full scan, returned as an immutable snapshot
- count()
- delete_all()       full clear (used only by an explicit reload)

`InMemoryStore` is the implementation used by the CLI and the tests. Any
persistent backend with the same four methods can be dropped in.
"""

from __future__ import annotations
from typing import Iterable, List, Tuple
from typing import Protocol

from .models import OccurrenceRecord


class RecordStore(Protocol):
    def save_all(self, records: Iterable[OccurrenceRecord]) -> int: ...

    def find_all(self) -> Tuple[OccurrenceRecord, ...]: ...

    def count(self) -> int: ...

    def delete_all(self) -> None: ...


class InMemoryStore:
    """List-backed store. Readers get a tuple, so they cannot mutate it."""

    def __init__(self, records: Iterable[OccurrenceRecord] = ()) -> None:
        self._records: List[OccurrenceRecord] = list(records)
        self.save_calls = 0

    def save_all(self, records: Iterable[OccurrenceRecord]) -> int:
        batch = list(records)
        self._records.extend(batch)
        self.save_calls += 1
        return len(batch)

    def find_all(self) -> Tuple[OccurrenceRecord, ...]:
        return tuple(self._records)

    def count(self) -> int:
        return len(self._records)

    def delete_all(self) -> None:
        self._records.clear()

    def __len__(self) -> int:
        return len(self._records)
