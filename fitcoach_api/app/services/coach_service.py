"""
Business logic for coach profiles and coach level aggregates.

The coach profile is the ``Coach`` record owned by the user account;
there is at most one per account.  Dashboard, statistics and the
clients overview are computed on each request from the coach's
clients and workouts, relative to the service clock.
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from ..core.errors import NotFoundError
from ..schemas.client import Client, ClientStatus
from ..schemas.coach import PERIOD_DAYS, Coach, CoachStatus, Period
from ..schemas.workout import Workout, WorkoutStatus
from .client_service import session_time
from .resource_service import (
    ALL_STATUSES,
    Clock,
    EntityDescriptor,
    ResourceCollectionService,
    utcnow,
)

logger = logging.getLogger(__name__)

COACH_DESCRIPTOR = EntityDescriptor(
    name="Coach",
    model=Coach,
    status_type=CoachStatus,
    initial_status=CoachStatus.ACTIVE,
    deleted_status=CoachStatus.INACTIVE,
    mutable_fields=frozenset({"name", "bio", "specialization", "experience", "certifications", "schedule"}),
    not_found_message="No coach profile exists for this account",
)

RECENT_ACTIVITY = 5
TOP_PERFORMERS = 3


def _average(values: List[float]) -> float:
    return round(sum(values) / len(values), 2) if values else 0.0


class CoachService:
    def __init__(
        self,
        collection: ResourceCollectionService[Coach],
        clients: ResourceCollectionService[Client],
        workouts: ResourceCollectionService[Workout],
        clock: Clock = utcnow,
    ) -> None:
        self.collection = collection
        self.clients = clients
        self.workouts = workouts
        self.clock = clock

    # ------------------------------------------------------------------
    # Profile
    # ------------------------------------------------------------------

    async def get_profile(self, owner_id: str) -> Coach:
        profiles = self.collection.owned(owner_id, ALL_STATUSES)
        if not profiles:
            raise NotFoundError(COACH_DESCRIPTOR.not_found_message, error=COACH_DESCRIPTOR.not_found_error)
        return profiles[0]

    def create_profile(
        self, owner_id: str, name: str, email: str, profile: Optional[Dict[str, Any]] = None
    ) -> Coach:
        """Create the coach profile of a new account.

        Known profile keys (``bio``, ``specialization``, ...) seed the
        record; anything else in ``profile`` is ignored.
        """
        fields = {
            key: value
            for key, value in (profile or {}).items()
            if key in COACH_DESCRIPTOR.mutable_fields and key != "name"
        }
        return self.collection.create(owner_id, {"name": name, "email": email, **fields})

    async def update_profile(self, owner_id: str, changes: Dict[str, Any]) -> Coach:
        coach = await self.get_profile(owner_id)
        return self.collection.update(owner_id, coach.id, changes)

    async def update_schedule(self, owner_id: str, schedule: Dict[str, Any]) -> Coach:
        """Replace the whole weekly schedule."""
        coach = await self.get_profile(owner_id)
        return self.collection.update(owner_id, coach.id, {"schedule": schedule})

    # ------------------------------------------------------------------
    # Aggregates
    # ------------------------------------------------------------------

    def _recent_activity(self, clients: List[Client], workouts: List[Workout]) -> List[Dict[str, Any]]:
        events: List[Dict[str, Any]] = []
        for workout in workouts:
            if workout.status == WorkoutStatus.COMPLETED:
                events.append(
                    {
                        "id": f"workout-{workout.id}-completed",
                        "type": "session_completed",
                        "clientName": workout.client_name,
                        "description": f"Completed {workout.title} workout",
                        "timestamp": workout.completed_at or workout.updated_at,
                        "duration": workout.duration,
                    }
                )
            elif workout.status == WorkoutStatus.SCHEDULED:
                events.append(
                    {
                        "id": f"workout-{workout.id}-scheduled",
                        "type": "session_scheduled",
                        "clientName": workout.client_name,
                        "description": f"{workout.title} scheduled for {workout.date.isoformat()} {workout.time}",
                        "timestamp": workout.created_at,
                        "scheduledFor": session_time(workout),
                    }
                )
        for client in clients:
            events.append(
                {
                    "id": f"client-{client.id}-registered",
                    "type": "client_registered",
                    "clientName": client.name,
                    "description": "New client registered",
                    "timestamp": client.created_at,
                }
            )
        events.sort(key=lambda event: event["timestamp"], reverse=True)
        return events[:RECENT_ACTIVITY]

    def _window(self, days: int) -> tuple:
        now = self.clock()
        return now - timedelta(days=days), now

    @staticmethod
    def _between(moment: datetime, start: datetime, end: datetime) -> bool:
        return start <= moment <= end

    async def dashboard(self, owner_id: str) -> Dict[str, Any]:
        coach = await self.get_profile(owner_id)
        clients = self.clients.owned(owner_id)
        workouts = self.workouts.owned(owner_id)
        now = self.clock()
        today = now.date()
        week_start = now - timedelta(days=7)
        week_end = now + timedelta(days=7)

        completed = [w for w in workouts if w.status == WorkoutStatus.COMPLETED]
        todays = [w for w in workouts if w.date == today and w.status != WorkoutStatus.CANCELLED]

        return {
            "coach": {
                "id": coach.id,
                "name": coach.name,
                "avatar": coach.avatar,
                "specialization": coach.specialization,
            },
            "stats": {
                "totalClients": len(clients),
                "activeClients": sum(1 for c in clients if c.status == ClientStatus.ACTIVE),
                "completedSessions": len(completed),
                "rating": _average([w.rating for w in completed if w.rating is not None]),
            },
            "todaysSchedule": [
                {
                    "id": w.id,
                    "clientName": w.client_name,
                    "title": w.title,
                    "workoutType": w.type,
                    "time": w.time,
                    "duration": w.duration,
                    "status": w.status,
                }
                for w in todays
            ],
            "recentActivity": self._recent_activity(clients, workouts),
            "weeklyProgress": {
                "sessionsCompleted": sum(1 for w in completed if self._between(session_time(w), week_start, now)),
                "sessionsScheduled": sum(
                    1
                    for w in workouts
                    if w.status == WorkoutStatus.SCHEDULED and self._between(session_time(w), now, week_end)
                ),
                "newClients": sum(1 for c in clients if self._between(c.created_at, week_start, now)),
            },
        }

    async def stats(self, owner_id: str, period: Period = Period.MONTH) -> Dict[str, Any]:
        await self.get_profile(owner_id)
        start, now = self._window(PERIOD_DAYS[period])
        clients = self.clients.owned(owner_id)
        in_period = [w for w in self.workouts.owned(owner_id) if self._between(session_time(w), start, now)]
        completed = [w for w in in_period if w.status == WorkoutStatus.COMPLETED]

        return {
            "period": period.value,
            "from": start,
            "to": now,
            "sessionsCompleted": len(completed),
            "sessionsCancelled": sum(1 for w in in_period if w.status == WorkoutStatus.CANCELLED),
            "sessionsMissed": sum(1 for w in in_period if w.status == WorkoutStatus.MISSED),
            "totalHours": round(sum(w.duration for w in completed) / 60, 2),
            "averageRating": _average([w.rating for w in completed if w.rating is not None]),
            "newClients": sum(1 for c in clients if self._between(c.created_at, start, now)),
            "activeClients": sum(1 for c in clients if c.status == ClientStatus.ACTIVE),
            "sessionsByType": {
                t: sum(1 for w in completed if w.type.value == t) for t in sorted({w.type.value for w in completed})
            },
        }

    async def clients_overview(self, owner_id: str) -> Dict[str, Any]:
        """Totals, retention and the best performing active clients."""
        await self.get_profile(owner_id)
        clients = self.clients.owned(owner_id)
        workouts = self.workouts.owned(owner_id)
        month_start, now = self._window(PERIOD_DAYS[Period.MONTH])
        four_weeks_ago = now - timedelta(weeks=4)

        active = [c for c in clients if c.status == ClientStatus.ACTIVE]
        recent_completed = [
            w
            for w in workouts
            if w.status == WorkoutStatus.COMPLETED and self._between(session_time(w), four_weeks_ago, now)
        ]
        top = sorted(active, key=lambda c: (-c.progress.sessions_completed, c.name))[:TOP_PERFORMERS]

        return {
            "totalClients": len(clients),
            "activeClients": len(active),
            "inactiveClients": len(clients) - len(active),
            "newThisMonth": sum(1 for c in clients if self._between(c.created_at, month_start, now)),
            "retentionRate": round(len(active) / len(clients) * 100, 1) if clients else 0.0,
            "averageSessionsPerWeek": round(len(recent_completed) / 4, 2),
            "topPerformers": [
                {
                    "id": c.id,
                    "name": c.name,
                    "sessionsCompleted": c.progress.sessions_completed,
                    "averageRating": c.progress.average_rating,
                }
                for c in top
            ],
            "recentActivity": self._recent_activity(clients, workouts),
        }
