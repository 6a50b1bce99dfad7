"""Thread-safe accumulation of per-class results.

Every mutation holds the lock only for the insert itself; parsing happens
outside it.
"""

from __future__ import annotations

from threading import Lock
from typing import Iterable

from ..models import ClassDependencyRecord


class AnalysisAccumulator:
    """Shared sink for worker threads: module set, class records, failures."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._modules: set[str] = set()
        self._records: dict[str, ClassDependencyRecord] = {}
        self._failed: list[str] = []
        self._processed = 0

    def add_modules(self, modules: Iterable[str]) -> None:
        with self._lock:
            self._modules.update(modules)

    def add_record(self, record: ClassDependencyRecord, modules: Iterable[str] = ()) -> int:
        """Store ``record`` (replacing any with the same class name).

        Returns:
            Number of class files processed so far, this one included
        """
        with self._lock:
            self._records[record.class_name] = record
            self._modules.update(modules)
            self._processed += 1
            return self._processed

    def record_failure(self, entry_name: str) -> None:
        with self._lock:
            self._failed.append(entry_name)

    @property
    def modules(self) -> frozenset[str]:
        with self._lock:
            return frozenset(self._modules)

    @property
    def module_count(self) -> int:
        with self._lock:
            return len(self._modules)

    @property
    def records(self) -> tuple[ClassDependencyRecord, ...]:
        """Records ordered by class name."""
        with self._lock:
            return tuple(self._records[name] for name in sorted(self._records))

    @property
    def failed(self) -> tuple[str, ...]:
        with self._lock:
            return tuple(sorted(self._failed))

    @property
    def processed(self) -> int:
        with self._lock:
            return self._processed
