"""
Uniqueness and scheduling-slot checks run before any write.

The checker receives the full list of records in a collection and the
candidate record as it would be stored.  It raises ``ConflictError``
when the write would break a constraint; on success the caller is free
to persist the candidate.  Both checks exclude the record being
updated.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, FrozenSet, Iterable, Optional, Sequence, Set, Tuple

from ..core.errors import ConflictError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UniqueField:
    """A field whose value must be unique across the whole collection.

    The ``on_create``/``on_update`` pairs are the ``(error, message)``
    reported to the caller for each kind of write.
    """

    name: str
    on_create: Tuple[str, str] = ("Conflict", "A record with this value already exists")
    on_update: Tuple[str, str] = ("Conflict", "This value is already in use")


@dataclass(frozen=True)
class SlotRule:
    """Per-owner uniqueness of a tuple of fields among non-exempt records."""

    fields: Tuple[str, ...]
    exempt_statuses: FrozenSet[Enum] = field(default_factory=frozenset)
    error: Tuple[str, str] = ("Scheduling conflict", "This slot is already taken")

    def key(self, record: Any) -> Tuple[Any, ...]:
        return tuple(getattr(record, name) for name in self.fields)

    def occupies(self, record: Any) -> bool:
        return record.status not in self.exempt_statuses


class ConflictChecker:
    def __init__(self, unique_fields: Sequence[UniqueField] = (), slot_rule: Optional[SlotRule] = None) -> None:
        self.unique_fields = tuple(unique_fields)
        self.slot_rule = slot_rule

    def check(
        self,
        records: Iterable[Any],
        candidate: Any,
        *,
        exclude_id: Optional[str] = None,
        changed: Optional[Set[str]] = None,
    ) -> None:
        """Raise ``ConflictError`` if storing ``candidate`` breaks a constraint.

        Parameters
        ----------
        records : iterable
            Every record currently in the collection, of all owners.
        candidate : model
            The record as it would be written.
        exclude_id : Optional[str]
            Id of the record being updated; ``None`` for a create.
        changed : Optional[set]
            Fields whose value the update changes.  ``None`` means a
            create, where every constraint is checked.
        """
        others = [record for record in records if record.id != exclude_id]
        creating = changed is None

        for unique in self.unique_fields:
            if not creating and unique.name not in changed:
                continue
            value = getattr(candidate, unique.name)
            if any(getattr(record, unique.name) == value for record in others):
                error, message = unique.on_create if creating else unique.on_update
                logger.info("Unique constraint on %s rejected a write", unique.name)
                raise ConflictError(message, error=error)

        rule = self.slot_rule
        if rule is None or not rule.occupies(candidate):
            return
        if not creating and not changed & (set(rule.fields) | {"status"}):
            return
        slot = rule.key(candidate)
        for record in others:
            if record.owner_id == candidate.owner_id and rule.occupies(record) and rule.key(record) == slot:
                error, message = rule.error
                logger.info("Slot %s for owner %s already taken by %s", slot, candidate.owner_id, record.id)
                raise ConflictError(message, error=error)
