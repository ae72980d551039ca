"""JSON-file record store with optimistic concurrency.

Each file holds a list of records keyed by ``"id"`` and carrying the
aggregate's ``"version"`` (its change token).  Repositories stage added
and updated aggregates and commit them in one write; an update whose
stored version moved since it was loaded fails the whole commit.

Commits take an exclusive ``fcntl`` lock on a sidecar ``<file>.lock``
for the whole load, check and write, so concurrent processes serialise.
Readers need no lock: the data file is only ever swapped in whole.
"""

from __future__ import annotations

import fcntl
import json
import os
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import Generic, Iterator, TypeVar
from weakref import WeakKeyDictionary

from orderflow.domain.exceptions import ConcurrencyError, ConflictError
from orderflow.domain.model.aggregate import AggregateRoot

A = TypeVar("A", bound=AggregateRoot)


class JsonRecordStore:

    def __init__(self, file_path: Path, unique_fields: tuple[str, ...] = ()) -> None:
        self._file_path = file_path
        self._lock_path = file_path.with_name(file_path.name + ".lock")
        self._unique_fields = unique_fields
        self._ensure_file()

    def load(self) -> list[dict]:
        return json.loads(self._file_path.read_text(encoding="utf-8"))

    def commit(self, added: list[dict], updated: list[tuple[dict, int]]) -> None:
        """Insert *added* and replace *updated* records in one write.

        ``updated`` pairs each record with the version it had when loaded.
        Nothing is written if any check fails.
        """
        with self._locked():
            records = self.load()
            index = {raw["id"]: i for i, raw in enumerate(records)}

            for raw in added:
                if raw["id"] in index:
                    raise ConflictError(f"Record {raw['id']} already exists")
            for raw, loaded_version in updated:
                i = index.get(raw["id"])
                if i is None:
                    raise ConcurrencyError(f"Record {raw['id']} no longer exists")
                if records[i]["version"] != loaded_version:
                    raise ConcurrencyError(
                        f"Record {raw['id']} was modified by another process "
                        f"(loaded version {loaded_version}, "
                        f"stored version {records[i]['version']})"
                    )

            for raw, _ in updated:
                records[index[raw["id"]]] = raw
            records.extend(added)
            self._check_unique(records)
            self._write(records)

    # --- File helpers ---------------------------------------------------------

    @contextmanager
    def _locked(self) -> Iterator[None]:
        with open(self._lock_path, "a") as fh:
            fcntl.flock(fh.fileno(), fcntl.LOCK_EX)
            try:
                yield
            finally:
                fcntl.flock(fh.fileno(), fcntl.LOCK_UN)

    def _check_unique(self, records: list[dict]) -> None:
        for field in self._unique_fields:
            seen: set = set()
            for raw in records:
                if raw[field] in seen:
                    raise ConflictError(
                        f"A record with {field} '{raw[field]}' already exists"
                    )
                seen.add(raw[field])

    def _write(self, records: list[dict]) -> None:
        tmp_path = self._file_path.with_suffix(self._file_path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as fh:
            fh.write(json.dumps(records, indent=2) + "\n")
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp_path, self._file_path)

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")


class VersionedJsonRepository(ABC, Generic[A]):
    """Staging and change-token bookkeeping shared by the JSON repositories.

    The version an aggregate had when it was read is remembered per
    instance, so reloading the same record later never refreshes the
    token of a copy that is already in hand.
    """

    unique_fields: tuple[str, ...] = ()

    def __init__(self, file_path: Path) -> None:
        self._store = JsonRecordStore(file_path, self.unique_fields)
        self._loaded_versions: WeakKeyDictionary[A, int] = WeakKeyDictionary()
        self._added: dict[str, A] = {}
        self._updated: dict[str, A] = {}

    # --- Staging --------------------------------------------------------------

    def add(self, aggregate: A) -> None:
        self._added[str(aggregate.id)] = aggregate

    def update(self, aggregate: A) -> None:
        key = str(aggregate.id)
        if self._added.get(key) is aggregate:
            return
        if aggregate not in self._loaded_versions:
            raise ConcurrencyError(f"{key} was not loaded through this repository")
        self._updated[key] = aggregate

    def save(self) -> None:
        self._store.commit(
            added=[self._to_raw(a) for a in self._added.values()],
            updated=[
                (self._to_raw(a), self._loaded_versions[a])
                for a in self._updated.values()
            ],
        )
        for aggregate in [*self._added.values(), *self._updated.values()]:
            self._loaded_versions[aggregate] = aggregate.version
        self._added.clear()
        self._updated.clear()

    # --- Loading --------------------------------------------------------------

    def _find(self, predicate) -> A | None:
        for raw in self._store.load():
            if predicate(raw):
                return self._track(raw)
        return None

    def _all(self) -> list[A]:
        return [self._track(raw) for raw in self._store.load()]

    def _track(self, raw: dict) -> A:
        aggregate = self._to_domain(raw)
        self._loaded_versions[aggregate] = raw["version"]
        return aggregate

    # --- Serialization --------------------------------------------------------

    @staticmethod
    @abstractmethod
    def _to_raw(aggregate: A) -> dict: ...

    @staticmethod
    @abstractmethod
    def _to_domain(raw: dict) -> A: ...
