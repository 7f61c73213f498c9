"""
Generic owner-scoped collection service.

``ResourceCollectionService`` implements listing with filters and
pagination, lookup, creation, partial update and soft deletion for any
record type described by an ``EntityDescriptor``.  Coaches, clients
and workouts are all instances of this one class; the domain services
wrap it with their own messages and aggregate views.

Every operation takes the caller's ``owner_id`` explicitly.  Records
belonging to another owner are indistinguishable from absent ones.
Each operation holds the repository lock from its first read to its
last write, so a conflict check and the write it guards cannot
interleave with another request.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Callable, FrozenSet, Generic, List, Mapping, Optional, Sequence, Type, TypeVar, Union

import pydantic

from ..core.db import Repository
from ..core.errors import NotFoundError, ValidationError
from .conflicts import ConflictChecker, SlotRule, UniqueField
from .query import Page, Predicate, apply_filters, id_order, paginate

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=pydantic.BaseModel)

ALL_STATUSES = "all"
StatusSelector = Union[None, str, Enum]

# Fields the service assigns; callers can never supply them.
RESERVED_FIELDS = frozenset({"id", "owner_id", "status", "created_at", "updated_at"})

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class EntityDescriptor(Generic[T]):
    """Static description of one record type."""

    name: str
    model: Type[T]
    status_type: Type[Enum]
    initial_status: Enum
    deleted_status: Enum
    mutable_fields: FrozenSet[str]
    unique_fields: Sequence[UniqueField] = ()
    slot_rule: Optional[SlotRule] = None
    completed_status: Optional[Enum] = None
    completion_field: Optional[str] = None
    sort_key: Optional[Callable[[Any], Any]] = None
    not_found_message: str = field(default="")

    @property
    def not_found_error(self) -> str:
        return f"{self.name} not found"


def _pydantic_details(exc: pydantic.ValidationError) -> List[dict]:
    return [
        {
            "location": "body",
            "field": ".".join(str(part) for part in err.get("loc", ())),
            "message": err.get("msg", ""),
            "type": err.get("type", ""),
        }
        for err in exc.errors()
    ]


class ResourceCollectionService(Generic[T]):
    def __init__(
        self,
        descriptor: EntityDescriptor[T],
        repository: Repository,
        clock: Clock = utcnow,
        max_page_size: int = 100,
    ) -> None:
        self.descriptor = descriptor
        self.repository = repository
        self.clock = clock
        self.max_page_size = max_page_size
        self.checker = ConflictChecker(descriptor.unique_fields, descriptor.slot_rule)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def _status_matcher(self, status: StatusSelector) -> Callable[[T], bool]:
        deleted = self.descriptor.deleted_status
        if status is None:
            return lambda record: record.status != deleted
        if isinstance(status, str) and status == ALL_STATUSES:
            return lambda record: True
        try:
            wanted = self.descriptor.status_type(status)
        except ValueError as exc:
            raise ValidationError(
                f"Unknown {self.descriptor.name.lower()} status: {status}",
                details=[{"location": "query", "field": "status", "message": "Invalid status", "type": "enum"}],
            ) from exc
        return lambda record: record.status == wanted

    def _sorted(self, records: List[T]) -> List[T]:
        key = self.descriptor.sort_key
        if key is None:
            return records
        return sorted(records, key=lambda record: (key(record), id_order(record.id)))

    def owned(self, owner_id: str, status: StatusSelector = ALL_STATUSES) -> List[T]:
        """All of ``owner_id``'s records matching ``status``, in listing order."""
        matches_status = self._status_matcher(status)
        with self.repository.lock:
            records = [r for r in self.repository.list() if r.owner_id == owner_id and matches_status(r)]
        return self._sorted(records)

    def list(
        self,
        owner_id: str,
        filters: Sequence[Predicate] = (),
        page: int = 1,
        limit: int = 10,
        status: StatusSelector = None,
    ) -> Page[T]:
        """Filtered, sorted and paginated view of the owner's records.

        Parameters
        ----------
        owner_id : str
            Only this owner's records are considered.
        filters : sequence of predicates
            Applied conjunctively after the status selector.
        page, limit : int
            One based page number and page size (``1..max_page_size``).
        status : None, ``"all"`` or a status value
            ``None`` hides soft-deleted records, ``"all"`` shows every
            status, anything else selects exactly that status.
        """
        records = self.owned(owner_id, status)
        return paginate(apply_filters(records, filters), page, limit, self.max_page_size)

    def _get_owned(self, owner_id: str, record_id: str) -> T:
        record = self.repository.get(record_id)
        if record is None or record.owner_id != owner_id:
            raise NotFoundError(
                self.descriptor.not_found_message or None,
                error=self.descriptor.not_found_error,
            )
        return record

    def get(self, owner_id: str, record_id: str) -> T:
        with self.repository.lock:
            return self._get_owned(owner_id, record_id)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def _tick(self, previous: Optional[datetime] = None) -> datetime:
        now = self.clock()
        if previous is not None and now <= previous:
            now = previous + timedelta(microseconds=1)
        return now

    def _validate(self, data: Mapping[str, Any]) -> T:
        try:
            return self.descriptor.model.model_validate(data)
        except pydantic.ValidationError as exc:
            raise ValidationError(details=_pydantic_details(exc)) from exc

    def create(self, owner_id: str, payload: Mapping[str, Any]) -> T:
        """Store a new record for ``owner_id`` built from ``payload``.

        Server managed fields in ``payload`` are ignored.  Constraint
        checks run before an id is allocated, so a rejected create
        leaves the collection untouched.
        """
        descriptor = self.descriptor
        data = {key: value for key, value in payload.items() if key not in RESERVED_FIELDS}
        with self.repository.lock:
            now = self._tick()
            candidate = self._validate(
                {
                    **data,
                    "id": "",
                    "owner_id": owner_id,
                    "status": descriptor.initial_status,
                    "created_at": now,
                    "updated_at": now,
                }
            )
            self.checker.check(self.repository.list(), candidate)
            record = candidate.model_copy(update={"id": self.repository.next_id()})
            self.repository.put(record)
        logger.info("%s %s created for owner %s", descriptor.name, record.id, owner_id)
        return record

    def update(self, owner_id: str, record_id: str, changes: Mapping[str, Any]) -> T:
        """Apply the whitelisted subset of ``changes`` to one record.

        Fields outside the descriptor's ``mutable_fields`` are dropped
        silently.  ``updated_at`` always moves forward, even when no
        field changes.
        """
        descriptor = self.descriptor
        allowed = {key: value for key, value in changes.items() if key in descriptor.mutable_fields}
        with self.repository.lock:
            current = self._get_owned(owner_id, record_id)
            now = self._tick(current.updated_at)
            candidate = self._validate({**current.model_dump(), **allowed, "updated_at": now})

            completed = descriptor.completed_status
            if (
                completed is not None
                and descriptor.completion_field
                and candidate.status == completed
                and current.status != completed
            ):
                candidate = candidate.model_copy(update={descriptor.completion_field: now})

            changed = {key for key in allowed if getattr(current, key) != getattr(candidate, key)}
            self.checker.check(self.repository.list(), candidate, exclude_id=current.id, changed=changed)
            self.repository.put(candidate)
        logger.info("%s %s updated (%s)", descriptor.name, record_id, ", ".join(sorted(changed)) or "no changes")
        return candidate

    def soft_delete(self, owner_id: str, record_id: str) -> T:
        """Move a record to the terminal status.

        Deleting an already deleted record returns it unchanged.
        """
        deleted = self.descriptor.deleted_status
        with self.repository.lock:
            current = self._get_owned(owner_id, record_id)
            if current.status == deleted:
                return current
            record = current.model_copy(update={"status": deleted, "updated_at": self._tick(current.updated_at)})
            self.repository.put(record)
        logger.info("%s %s moved to %s", self.descriptor.name, record_id, deleted.value)
        return record
