"""
In‑process storage and fixture seeding.

This module provides the storage abstraction used by every service: a
``Repository`` is a mapping from id to record with ``list``, ``get``,
``put`` and ``delete``, an id allocator and a re‑entrant lock that a
service holds for the full read‑check‑write span of one operation.
``InMemoryRepository`` is the only implementation; a persistent store
can be dropped in later by implementing the same protocol.

``init_db`` builds an ``InMemoryStore`` with one repository per
collection and, when requested, loads the demo data from
``core.fixtures``.  Each application instance owns its own store, so
tests get isolated data simply by building a new app.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Callable, Dict, Generic, List, Optional, Protocol, TypeVar

from ..schemas.client import Client
from ..schemas.coach import Coach
from ..schemas.user import UserAccount
from ..schemas.workout import Workout
from . import fixtures
from .security import hash_password

logger = logging.getLogger(__name__)

T = TypeVar("T")

USERS = "users"
COACHES = "coaches"
CLIENTS = "clients"
WORKOUTS = "workouts"
DEVICES = "devices"
COLLECTIONS = (USERS, COACHES, CLIENTS, WORKOUTS, DEVICES)


class Repository(Protocol[T]):
    """Storage contract for one collection of records keyed by ``id``."""

    name: str
    lock: threading.RLock

    def list(self) -> List[T]:
        ...

    def get(self, record_id: str) -> Optional[T]:
        ...

    def put(self, record: T) -> None:
        ...

    def delete(self, record_id: str) -> bool:
        ...

    def next_id(self) -> str:
        ...


class InMemoryRepository(Generic[T]):
    """Dictionary backed repository preserving insertion order.

    Ids handed out by :meth:`next_id` come from a counter that only
    moves forward, so an id is never issued twice even if a record is
    removed.  Records stored with a numeric id (fixtures) advance the
    counter past that id.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self.lock = threading.RLock()
        self._records: Dict[str, T] = {}
        self._counter = 0

    def __len__(self) -> int:
        return len(self._records)

    def list(self) -> List[T]:
        with self.lock:
            return list(self._records.values())

    def get(self, record_id: str) -> Optional[T]:
        with self.lock:
            return self._records.get(record_id)

    def put(self, record: T) -> None:
        record_id = getattr(record, "id")
        with self.lock:
            self._records[record_id] = record
            if record_id.isdigit():
                self._counter = max(self._counter, int(record_id))

    def delete(self, record_id: str) -> bool:
        with self.lock:
            return self._records.pop(record_id, None) is not None

    def next_id(self) -> str:
        with self.lock:
            self._counter += 1
            while str(self._counter) in self._records:
                self._counter += 1
            return str(self._counter)


class InMemoryStore:
    """Container of named repositories for one application instance."""

    def __init__(self) -> None:
        self._collections: Dict[str, InMemoryRepository] = {}

    def collection(self, name: str) -> InMemoryRepository:
        if name not in self._collections:
            self._collections[name] = InMemoryRepository(name)
        return self._collections[name]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def init_db(seed: bool = True, clock: Callable[[], datetime] = utcnow) -> InMemoryStore:
    """Create the store and optionally load the demo fixtures.

    Seeded passwords are hashed here, so the fixture module only ever
    holds the plain demo credentials.
    """
    store = InMemoryStore()
    for name in COLLECTIONS:
        store.collection(name)
    if not seed:
        return store

    now = clock()
    users = store.collection(USERS)
    for record in fixtures.USERS:
        data = dict(record)
        data["password_hash"] = hash_password(data.pop("password"))
        data.setdefault("created_at", now)
        users.put(UserAccount.model_validate(data))

    for collection, model, records in (
        (COACHES, Coach, fixtures.COACHES),
        (CLIENTS, Client, fixtures.CLIENTS),
        (WORKOUTS, Workout, fixtures.WORKOUTS),
    ):
        repository = store.collection(collection)
        for record in records:
            repository.put(model.model_validate({**record, "updated_at": now}))

    logger.info(
        "Seeded fixtures: %d users, %d coaches, %d clients, %d workouts",
        len(users),
        len(store.collection(COACHES)),
        len(store.collection(CLIENTS)),
        len(store.collection(WORKOUTS)),
    )
    return store
