"""
Business logic for a coach's clients.

Clients are stored through the generic collection service.  Deleting
a client only deactivates it; the email stays reserved, so a new client
cannot reuse the address of a deactivated one.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from ..schemas.client import Client, ClientCreate, ClientStatus
from ..schemas.coach import PERIOD_DAYS, Period
from ..schemas.workout import Workout, WorkoutStatus
from .conflicts import UniqueField
from .query import Page, Search
from .resource_service import Clock, EntityDescriptor, ResourceCollectionService, StatusSelector, utcnow

logger = logging.getLogger(__name__)

CLIENT_DESCRIPTOR = EntityDescriptor(
    name="Client",
    model=Client,
    status_type=ClientStatus,
    initial_status=ClientStatus.ACTIVE,
    deleted_status=ClientStatus.INACTIVE,
    mutable_fields=frozenset(
        {
            "name",
            "email",
            "phone",
            "date_of_birth",
            "goals",
            "fitness_level",
            "medical_notes",
            "emergency_contact",
            "measurements",
            "preferences",
        }
    ),
    unique_fields=(
        UniqueField(
            "email",
            on_create=("Client already exists", "A client with this email already exists"),
            on_update=("Email already in use", "Another client is already using this email"),
        ),
    ),
    not_found_message="The requested client does not exist",
)

SEARCH_FIELDS = ("name", "email", "goals")
RECENT_SESSIONS = 5


class ClientService:
    """Сервис клиентов тренера поверх общего сервиса коллекций."""

    def __init__(
        self,
        collection: ResourceCollectionService[Client],
        workouts: ResourceCollectionService[Workout],
        clock: Clock = utcnow,
    ) -> None:
        self.collection = collection
        self.workouts = workouts
        self.clock = clock

    async def list_clients(
        self,
        owner_id: str,
        status: StatusSelector = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> Page[Client]:
        filters = [Search(SEARCH_FIELDS, search)] if search else []
        return self.collection.list(owner_id, filters, page=page, limit=limit, status=status)

    async def get_client(self, owner_id: str, client_id: str) -> Client:
        return self.collection.get(owner_id, client_id)

    async def create_client(self, owner_id: str, data: ClientCreate) -> Client:
        payload = data.model_dump(exclude_none=True)
        payload["join_date"] = self.clock()
        return self.collection.create(owner_id, payload)

    async def update_client(self, owner_id: str, client_id: str, changes: Dict[str, Any]) -> Client:
        return self.collection.update(owner_id, client_id, changes)

    async def deactivate_client(self, owner_id: str, client_id: str) -> Client:
        return self.collection.soft_delete(owner_id, client_id)

    async def get_progress(self, owner_id: str, client_id: str, period: Period = Period.MONTH) -> Dict[str, Any]:
        """Summarise a client's completed sessions within ``period``.

        Sessions count when their completion time (or, failing that,
        their scheduled date) falls in the last ``PERIOD_DAYS[period]``
        days.  ``overall`` reports the lifetime counters kept on the
        client record.
        """
        client = self.collection.get(owner_id, client_id)
        now = self.clock()
        since = now - timedelta(days=PERIOD_DAYS[period])

        history = [w for w in self.workouts.owned(owner_id) if w.client_id == client.id]

        completed = [w for w in history if w.status == WorkoutStatus.COMPLETED]
        in_period = [w for w in completed if since <= session_time(w) <= now]
        ratings = [w.rating for w in in_period if w.rating is not None]
        upcoming = [
            w for w in history if w.status == WorkoutStatus.SCHEDULED and session_time(w) > now
        ]
        recent = sorted(completed, key=session_time, reverse=True)[:RECENT_SESSIONS]

        return {
            "client": {"id": client.id, "name": client.name, "goals": client.goals},
            "period": period.value,
            "progress": {
                "sessionsCompleted": len(in_period),
                "totalHours": round(sum(w.duration for w in in_period) / 60, 2),
                "averageRating": round(sum(ratings) / len(ratings), 2) if ratings else 0.0,
                "missedSessions": sum(
                    1 for w in history if w.status == WorkoutStatus.MISSED and since <= session_time(w) <= now
                ),
                "upcomingSessions": len(upcoming),
            },
            "overall": client.progress,
            "measurements": client.measurements,
            "recentSessions": [
                {
                    "id": w.id,
                    "date": w.date,
                    "title": w.title,
                    "type": w.type,
                    "duration": w.duration,
                    "rating": w.rating,
                    "feedback": w.feedback,
                }
                for w in recent
            ],
        }


def session_time(workout: Workout) -> datetime:
    """When a session happened: its completion stamp or its scheduled slot."""
    if workout.completed_at is not None:
        return workout.completed_at
    hours, minutes = (int(part) for part in workout.time.split(":"))
    return datetime(
        workout.date.year, workout.date.month, workout.date.day, hours, minutes, tzinfo=timezone.utc
    )
