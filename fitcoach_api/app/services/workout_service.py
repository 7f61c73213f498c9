"""
Business logic for workout sessions.

Two workouts of the same coach may not share a ``(date, time)`` slot
unless one of them is cancelled.  Cancelling a workout is the soft
delete and frees its slot.
"""

import calendar
import logging
from datetime import date
from typing import Any, Dict, List, Optional

from ..core import fixtures
from ..core.errors import NotFoundError
from ..schemas.client import Client
from ..schemas.workout import (
    UNKNOWN_CLIENT,
    Workout,
    WorkoutCreate,
    WorkoutStatus,
    WorkoutTemplate,
    WorkoutType,
)
from .conflicts import SlotRule
from .query import Exact, Page
from .resource_service import Clock, EntityDescriptor, ResourceCollectionService, StatusSelector, utcnow

logger = logging.getLogger(__name__)

WORKOUT_DESCRIPTOR = EntityDescriptor(
    name="Workout",
    model=Workout,
    status_type=WorkoutStatus,
    initial_status=WorkoutStatus.SCHEDULED,
    deleted_status=WorkoutStatus.CANCELLED,
    mutable_fields=frozenset(
        {
            "title",
            "type",
            "date",
            "time",
            "duration",
            "status",
            "location",
            "exercises",
            "notes",
            "rating",
            "feedback",
        }
    ),
    slot_rule=SlotRule(
        fields=("date", "time"),
        exempt_statuses=frozenset({WorkoutStatus.CANCELLED}),
        error=("Scheduling conflict", "A workout is already scheduled at this time"),
    ),
    completed_status=WorkoutStatus.COMPLETED,
    completion_field="completed_at",
    sort_key=lambda workout: (workout.date, workout.time),
    not_found_message="The requested workout does not exist",
)


class WorkoutService:
    def __init__(
        self,
        collection: ResourceCollectionService[Workout],
        clients: ResourceCollectionService[Client],
        clock: Clock = utcnow,
    ) -> None:
        self.collection = collection
        self.clients = clients
        self.clock = clock
        self._templates = [WorkoutTemplate.model_validate(t) for t in fixtures.WORKOUT_TEMPLATES]

    async def list_workouts(
        self,
        owner_id: str,
        on_date: Optional[date] = None,
        client_id: Optional[str] = None,
        workout_type: Optional[WorkoutType] = None,
        status: StatusSelector = None,
        page: int = 1,
        limit: int = 10,
    ) -> Page[Workout]:
        filters = []
        if on_date is not None:
            filters.append(Exact("date", on_date))
        if client_id:
            filters.append(Exact("client_id", client_id))
        if workout_type is not None:
            filters.append(Exact("type", workout_type))
        return self.collection.list(owner_id, filters, page=page, limit=limit, status=status)

    async def get_workout(self, owner_id: str, workout_id: str) -> Workout:
        return self.collection.get(owner_id, workout_id)

    def _client_name(self, owner_id: str, client_id: str, fallback: Optional[str]) -> str:
        try:
            return self.clients.get(owner_id, client_id).name
        except NotFoundError:
            return fallback or UNKNOWN_CLIENT

    async def create_workout(self, owner_id: str, data: WorkoutCreate) -> Workout:
        """Schedule a workout.

        ``clientName`` is taken from the coach's client record when the
        client exists; otherwise the supplied name (or a placeholder) is
        used.
        """
        payload = data.model_dump()
        payload["client_name"] = self._client_name(owner_id, data.client_id, data.client_name)
        return self.collection.create(owner_id, payload)

    async def update_workout(self, owner_id: str, workout_id: str, changes: Dict[str, Any]) -> Workout:
        return self.collection.update(owner_id, workout_id, changes)

    async def cancel_workout(self, owner_id: str, workout_id: str) -> Workout:
        return self.collection.soft_delete(owner_id, workout_id)

    async def calendar(self, owner_id: str, month: int, year: int) -> Dict[str, Any]:
        """Group the owner's workouts in one month by date.

        Every status is included, cancelled sessions too, so the
        calendar reflects the full history of the month.
        """
        days_in_month = calendar.monthrange(year, month)[1]
        first, last = date(year, month, 1), date(year, month, days_in_month)
        workouts = [w for w in self.collection.owned(owner_id) if first <= w.date <= last]

        by_date: Dict[str, List[Dict[str, Any]]] = {}
        for workout in workouts:
            by_date.setdefault(workout.date.isoformat(), []).append(
                {
                    "id": workout.id,
                    "title": workout.title,
                    "clientName": workout.client_name,
                    "time": workout.time,
                    "duration": workout.duration,
                    "type": workout.type,
                    "status": workout.status,
                }
            )
        return {
            "month": month,
            "year": year,
            "workouts": by_date,
            "summary": {
                "totalWorkouts": len(workouts),
                "byType": {t.value: sum(1 for w in workouts if w.type == t) for t in WorkoutType},
                "byStatus": {s.value: sum(1 for w in workouts if w.status == s) for s in WorkoutStatus},
            },
        }

    async def list_templates(self) -> List[WorkoutTemplate]:
        return list(self._templates)
