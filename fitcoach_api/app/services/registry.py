"""
Construction of the service graph for one application instance.
"""

from dataclasses import dataclass

from ..core.config import Settings
from ..core.db import CLIENTS, COACHES, DEVICES, USERS, WORKOUTS, InMemoryStore
from .client_service import CLIENT_DESCRIPTOR, ClientService
from .coach_service import COACH_DESCRIPTOR, CoachService
from .device_service import DeviceService
from .notification_service import LoggingNotificationSink, NotificationSink
from .resource_service import Clock, ResourceCollectionService, utcnow
from .user_service import UserService
from .workout_service import WORKOUT_DESCRIPTOR, WorkoutService


@dataclass
class Services:
    users: UserService
    coaches: CoachService
    clients: ClientService
    workouts: WorkoutService
    devices: DeviceService
    notifications: NotificationSink


def build_services(
    store: InMemoryStore,
    settings: Settings,
    clock: Clock = utcnow,
    notifications: NotificationSink = None,
) -> Services:
    limit = settings.max_page_size
    coach_records = ResourceCollectionService(COACH_DESCRIPTOR, store.collection(COACHES), clock, limit)
    client_records = ResourceCollectionService(CLIENT_DESCRIPTOR, store.collection(CLIENTS), clock, limit)
    workout_records = ResourceCollectionService(WORKOUT_DESCRIPTOR, store.collection(WORKOUTS), clock, limit)

    coaches = CoachService(coach_records, client_records, workout_records, clock)
    return Services(
        users=UserService(store.collection(USERS), coaches, clock),
        coaches=coaches,
        clients=ClientService(client_records, workout_records, clock),
        workouts=WorkoutService(workout_records, client_records, clock),
        devices=DeviceService(store.collection(DEVICES), coaches, client_records, workout_records, settings, clock),
        notifications=notifications or LoggingNotificationSink(),
    )
